from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple, Union

# ---------------- IR Nodes ----------------
# Offsets are relative to the pointer at entry to the enclosing block.


@dataclass(frozen=True)
class Increment:
    offset: int
    count: int  # signed, never 0


@dataclass(frozen=True)
class Move:
    count: int  # net >/<
    offset: int = 0  # unused


@dataclass(frozen=True)
class Input:
    offset: int


@dataclass(frozen=True)
class Output:
    offset: int


@dataclass
class Block:
    statements: Tuple["Statement", ...] = ()
    moves_pointer: bool = field(init=False)

    def __post_init__(self) -> None:
        self.statements = tuple(self.statements)
        self.moves_pointer = _moves_pointer(self.statements)

    def __iter__(self) -> Iterator["Statement"]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)


@dataclass(frozen=True)
class Loop:
    offset: int
    body: Block


@dataclass(frozen=True)
class ScaledCopy:
    """Zero the cell at ``offset`` and add ``value * k`` to every other
    ``Increment(o2, k)`` of ``body``, ``value`` being the cell before clearing.
    """

    offset: int
    body: Block

    @property
    def targets(self) -> List[Tuple[int, int]]:
        return [(st.offset, st.count) for st in self.body if st.offset != self.offset]

    @property
    def needs_temp(self) -> bool:
        return len(self.body) > 1


@dataclass(frozen=True)
class Program:
    body: Block


Statement = Union[Increment, Move, Input, Output, Loop, ScaledCopy, Program]


def _moves_pointer(statements: Tuple[Statement, ...]) -> bool:
    for st in statements:
        if isinstance(st, Move) and st.count != 0:
            return True
        if isinstance(st, (Loop, ScaledCopy)) and st.body.moves_pointer:
            return True
    return False


def walk(node: Statement) -> Iterator[Statement]:
    """Yield ``node`` and every statement below it, pre-order."""
    stack: List[Statement] = [node]
    while stack:
        st = stack.pop()
        yield st
        if isinstance(st, (Loop, ScaledCopy, Program)):
            stack.extend(reversed(st.body.statements))


def format_tree(node: Statement, indent: int = 0) -> str:
    pad = '  ' * indent
    if isinstance(node, Program):
        head = f"{pad}Program moves={node.body.moves_pointer}"
    elif isinstance(node, Loop):
        head = f"{pad}Loop @{node.offset} moves={node.body.moves_pointer}"
    elif isinstance(node, ScaledCopy):
        targets = ', '.join(f"{o:+d}*{k}" for o, k in node.targets)
        return f"{pad}ScaledCopy @{node.offset} -> [{targets}]"
    elif isinstance(node, Increment):
        return f"{pad}Increment @{node.offset} {node.count:+d}"
    elif isinstance(node, Move):
        return f"{pad}Move {node.count:+d}"
    elif isinstance(node, Input):
        return f"{pad}Input @{node.offset}"
    elif isinstance(node, Output):
        return f"{pad}Output @{node.offset}"
    else:
        raise TypeError(f"Unknown statement: {node!r}")

    lines = [head]
    for st in node.body:
        lines.append(format_tree(st, indent + 1))
    return "\n".join(lines)
