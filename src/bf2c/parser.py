from __future__ import annotations

from typing import Dict, List, Optional

from .errors import UnmatchedCloseBracketError, UnterminatedLoopError, make_parse_error
from .nodes import Block, Increment, Input, Loop, Move, Output, Program, Statement


class CharStream:
    """Character reader over source text with one character of lookahead."""

    def __init__(self, source: str):
        self.source = source
        self.index = 0

    def peek(self) -> Optional[str]:
        if self.index >= len(self.source):
            return None
        return self.source[self.index]

    def get(self) -> Optional[str]:
        ch = self.peek()
        if ch is not None:
            self.index += 1
        return ch


def parse_block(stream: CharStream, base_offset: int) -> Block:
    """
    Parse statements until end of stream or a lookahead ']' (left unconsumed).

    Offsets are tracked relative to the block entry; +/- runs are coalesced per
    offset until the next I/O or loop boundary, and the net pointer shift is
    emitted once as a trailing Move.
    """
    statements: List[Statement] = []
    current_offset = base_offset
    adds: Dict[int, int] = {}

    def push_adds() -> None:
        for offset in sorted(adds):
            count = adds[offset]
            if count != 0:
                statements.append(Increment(offset, count))
        adds.clear()

    while True:
        ch = stream.peek()
        if ch is None or ch == ']':
            break
        stream.get()

        if ch == '+':
            adds[current_offset] = adds.get(current_offset, 0) + 1
        elif ch == '-':
            adds[current_offset] = adds.get(current_offset, 0) - 1
        elif ch == '>':
            current_offset += 1
        elif ch == '<':
            current_offset -= 1
        elif ch == '.':
            push_adds()
            statements.append(Output(current_offset))
        elif ch == ',':
            push_adds()
            statements.append(Input(current_offset))
        elif ch == '[':
            push_adds()
            opened_at = stream.index - 1
            body = parse_block(stream, current_offset)
            if stream.get() != ']':
                raise make_parse_error(UnterminatedLoopError, source=stream.source, index=opened_at)
            statements.append(Loop(current_offset, body))
    push_adds()

    if current_offset != base_offset:
        statements.append(Move(current_offset - base_offset))
    return Block(statements)


def parse_program(source: str) -> Program:
    stream = CharStream(source)
    body = parse_block(stream, 0)
    if stream.peek() == ']':
        raise make_parse_error(UnmatchedCloseBracketError, source=source, index=stream.index)
    return Program(body)
