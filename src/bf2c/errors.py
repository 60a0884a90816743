from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Type, TypeVar


def _line_col(source: str, index: int) -> Tuple[int, int]:
    line = source.count('\n', 0, index) + 1
    column = index - (source.rfind('\n', 0, index) + 1) + 1
    return line, column


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'UnterminatedLoop':
        return 'Every "[" needs a matching "]". Check for a missing "]" after this point.'
    if kind == 'UnmatchedCloseBracket':
        return 'This "]" closes no loop. Remove it or add the missing "[" before it.'
    return None


@dataclass
class BFCError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ParseError(BFCError):
    line: int
    column: int
    context: str

    kind = 'ParseError'
    description = 'malformed program'


class UnterminatedLoopError(ParseError):
    kind = 'UnterminatedLoop'
    description = "'[' has no matching ']'"


class UnmatchedCloseBracketError(ParseError):
    kind = 'UnmatchedCloseBracket'
    description = "']' has no matching '['"


E = TypeVar('E', bound=ParseError)


def make_parse_error(cls: Type[E], *, source: str, index: int) -> E:
    """Build a ``cls`` error pointing at ``source[index]``."""
    line, column = _line_col(source, index)
    ctx = _build_context(source.split('\n'), line, column)
    hint = _hint_for(cls.kind)
    hint_block = f"\nHint: {hint}" if hint else ""
    return cls(
        message=f"{cls.kind}: {cls.description} (line {line}, column {column})\n{ctx}{hint_block}",
        line=line,
        column=column,
        context=ctx,
    )
