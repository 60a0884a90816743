#
# Tree optimizer.
# Levels (0..1):
#   0: no rewriting (increment runs are still coalesced by the parser)
#   1: scaled-copy folding: [-], [->++<], [>+++<-] ... become ScaledCopy
#
# NOTE: folding is only done on proven-linear loops (Increment only, no net
#       pointer movement, loop cell changes by exactly +/-1 per iteration).
#       Cells are 8-bit and wrap, so such loops always terminate.
#
from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Tuple

from .nodes import Block, Increment, Loop, Program, ScaledCopy, Statement

MAX_LEVEL = 1


# ---------------- Scaled-copy folding ----------------
def loop_delta(offset: int, body: Block) -> Optional[int]:
    """
    If ``body`` is linear (Increment only, pointer fixed), return the per-iteration
    change of the cell at ``offset``. Otherwise None.
    """
    if body.moves_pointer:
        return None
    if not all(isinstance(st, Increment) for st in body):
        return None
    return sum(st.count for st in body if st.offset == offset)


def as_scaled_copy(loop: Loop) -> Optional[ScaledCopy]:
    delta = loop_delta(loop.offset, loop.body)
    if delta is None or abs(delta) != 1:
        return None

    body = loop.body
    if delta == 1:
        # counting up runs (256 - v) times, i.e. -v mod 256
        body = Block(Increment(st.offset, -st.count) for st in body)
    return ScaledCopy(loop.offset, body)


def fold_scaled_copies(node: Statement) -> Statement:
    """
    Fold multiply/copy/clear loops bottom-up. Returns a new node.

    Walks with an explicit stack so nesting depth is not bounded by the
    interpreter's recursion limit; a block is rebuilt once all its children
    are folded.
    """
    if not isinstance(node, (Program, Loop)):
        return node

    # (node being rebuilt, its folded children so far, its unvisited children)
    stack: List[Tuple[Statement, List[Statement], Iterator[Statement]]] = [(node, [], iter(node.body))]
    while True:
        parent, done, pending = stack[-1]
        child = next(pending, None)
        if child is not None:
            if isinstance(child, Loop):
                stack.append((child, [], iter(child.body)))
            else:
                done.append(child)
            continue

        stack.pop()
        body = Block(done)
        if isinstance(parent, Program):
            result: Statement = Program(body)
        else:
            loop = Loop(parent.offset, body)
            folded = as_scaled_copy(loop)
            result = folded if folded is not None else loop
        if not stack:
            return result
        stack[-1][1].append(result)


# ---------------- Main optimizer pipeline ----------------
Pass = Callable[[Statement], Statement]

PASSES: List[List[Pass]] = [
    [],
    [fold_scaled_copies],
]


def optimize(program: Program, level: int = MAX_LEVEL) -> Program:
    level = min(max(int(level), 0), MAX_LEVEL)
    node: Statement = program
    for opt_pass in PASSES[level]:
        node = opt_pass(node)
    if not isinstance(node, Program):
        raise TypeError(f"Optimizer pass returned {node!r}, expected Program")
    return node
