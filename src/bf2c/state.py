from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class EmitState:
    lines: List[str] = field(default_factory=list)
    indent: int = 0
    temp_counter: int = 0
    buffer_size: int = 0
    origin: int = 0

    def reset(self) -> None:
        self.lines.clear()
        self.indent = 0
        self.temp_counter = 0
        self.buffer_size = 0
        self.origin = 0

    def line(self, text: str) -> None:
        self.lines.append('  ' * self.indent + text)

    def new_temp(self) -> str:
        name = f"t{self.temp_counter}"
        self.temp_counter += 1
        return name
