from __future__ import annotations

from typing import Optional, Tuple

from .nodes import Increment, Input, Loop, Move, Output, Program, ScaledCopy, Statement, walk
from .state import EmitState

DEFAULT_TAPE_LENGTH = 30000

HEADER = (
    "#include <stdio.h>",
    "#include <stdint.h>",
    "",
    "int main(int argc, char** argv) {",
)


def offset_bounds(node: Statement) -> Tuple[int, int]:
    """Lowest and highest offset dereferenced anywhere under ``node``, including 0."""
    lo = hi = 0
    for st in walk(node):
        if isinstance(st, (Increment, Input, Output, Loop, ScaledCopy)):
            lo = min(lo, st.offset)
            hi = max(hi, st.offset)
    return lo, hi


def cell(offset: int) -> str:
    if offset == 0:
        return "buffer[pos]"
    if offset < 0:
        return f"buffer[pos - {-offset}]"
    return f"buffer[pos + {offset}]"


def _add(target: str, amount: int, scale: Optional[str] = None) -> str:
    op = "+=" if amount >= 0 else "-="
    value = f"{scale} * {abs(amount)}" if scale else str(abs(amount))
    return f"{target} {op} {value};"


class CGenerator:
    """
    C code generator.

    Memory Layout:
    - One uint8_t buffer of ``tape_length + max_offset - min_offset`` cells
    - ``pos`` starts at ``-min_offset`` so every static offset stays in range

    Code Generation Strategy:
    - One C statement per tree statement, nesting by two spaces
    - ScaledCopy snapshots its cell into a fresh temporary only when it has targets
    """

    def __init__(self, tape_length: int = DEFAULT_TAPE_LENGTH):
        self.tape_length = tape_length
        self.state = EmitState()

    def generate(self, program: Program) -> str:
        state = self.state
        state.reset()

        lo, hi = offset_bounds(program)
        state.buffer_size = self.tape_length + hi - lo
        state.origin = -lo

        state.lines.extend(HEADER)
        state.indent = 1
        state.line(f"uint8_t buffer[{state.buffer_size}] = {{0}};")
        state.line(f"int pos = {state.origin};")
        for st in program.body:
            self._emit(st)
        state.line("return 0;")
        state.indent = 0
        state.line("}")
        return "\n".join(state.lines) + "\n"

    def _emit(self, st: Statement) -> None:
        state = self.state
        if isinstance(st, Increment):
            state.line(_add(cell(st.offset), st.count))
        elif isinstance(st, Move):
            state.line(_add("pos", st.count))
        elif isinstance(st, Input):
            state.line(f"{cell(st.offset)} = getchar();")
        elif isinstance(st, Output):
            state.line(f"putchar({cell(st.offset)});")
        elif isinstance(st, Loop):
            state.line(f"while ({cell(st.offset)} != 0) {{")
            state.indent += 1
            for inner in st.body:
                self._emit(inner)
            state.indent -= 1
            state.line("}")
        elif isinstance(st, ScaledCopy):
            self._emit_scaled_copy(st)
        else:
            raise TypeError(f"Cannot emit {st!r}")

    def _emit_scaled_copy(self, st: ScaledCopy) -> None:
        state = self.state
        temp = None
        if st.needs_temp:
            temp = state.new_temp()
            state.line(f"uint8_t {temp} = {cell(st.offset)};")
        state.line(f"{cell(st.offset)} = 0;")
        for offset, count in st.targets:
            state.line(_add(cell(offset), count, scale=temp))


def emit(program: Program, tape_length: int = DEFAULT_TAPE_LENGTH) -> str:
    return CGenerator(tape_length).generate(program)
