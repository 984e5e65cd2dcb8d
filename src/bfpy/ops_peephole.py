from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .emitter import cell, move, update
from .tokens import MOVE_OPS, OPPOSITE, VALUE_OPS, Fragment, Item, Op, Stream, Token, is_op

Match = Optional[Tuple[Fragment, int]]

CELL_OPS = VALUE_OPS + (Op.CLEAR,)


def _apply(t: Token, offset: int = 0) -> str:
    if t.op is Op.CLEAR:
        return f'{cell(offset)} = 0'
    return update(offset, t.signed())


def _at(stream: Stream, i: int) -> Optional[Item]:
    return stream[i] if i < len(stream) else None


# ---------------- Rules ----------------
def match_offset_update(stream: Stream, i: int) -> Match:
    """>>+<<, <[-]>: update the cell at a fixed offset, pointer untouched."""
    go, op, back = _at(stream, i), _at(stream, i + 1), _at(stream, i + 2)
    if not (is_op(go, *MOVE_OPS) and is_op(op, *CELL_OPS) and is_op(back, *MOVE_OPS)):
        return None
    if back.op is not OPPOSITE[go.op] or back.count != go.count:
        return None
    return Fragment(_apply(op, go.signed())), 3


def match_update_advance(stream: Stream, i: int) -> Match:
    """++>, -<: update the current cell, then step the pointer once."""
    op, step = _at(stream, i), _at(stream, i + 1)
    if not (is_op(op, *VALUE_OPS) and is_op(step, *MOVE_OPS) and step.count == 1):
        return None
    return Fragment(_apply(op) + '\n' + move(step.signed())), 2


def match_advance_update(stream: Stream, i: int) -> Match:
    """>>>+, <<[-]: move the pointer, then update the new current cell."""
    step, op = _at(stream, i), _at(stream, i + 1)
    if not (is_op(step, *MOVE_OPS) and is_op(op, *CELL_OPS)):
        return None
    return Fragment(move(step.signed()) + '\n' + _apply(op)), 2


def match_single(stream: Stream, i: int) -> Match:
    t = stream[i]
    if is_op(t, *CELL_OPS):
        return Fragment(_apply(t)), 1
    if is_op(t, *MOVE_OPS):
        return Fragment(move(t.signed())), 1
    return None


RULES: List[Callable[[Stream, int], Match]] = [
    match_offset_update,
    match_update_advance,
    match_advance_update,
    match_single,
]


def fuse(stream: Stream) -> Stream:
    """
    Turn cell and pointer tokens into statements, most specific idiom first.

    Fragments and structural tokens (loops, scans, I/O, extensions) pass
    through untouched, so loops kept by the reducer still get fused bodies.
    """
    out: Stream = []
    i = 0
    while i < len(stream):
        for rule in RULES:
            m = rule(stream, i)
            if m is not None:
                fragment, used = m
                out.append(fragment)
                i += used
                break
        else:
            out.append(stream[i])
            i += 1
    return out
