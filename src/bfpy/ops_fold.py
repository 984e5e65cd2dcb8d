from __future__ import annotations

from typing import Tuple

from .errors import make_config_error
from .tokens import MOVE_OPS, VALUE_OPS, Item, Op, Stream, Token

MAX_REPEAT = 99


def _axis(item: Item) -> Tuple[Op, ...]:
    if isinstance(item, Token):
        if item.op in VALUE_OPS:
            return VALUE_OPS
        if item.op in MOVE_OPS:
            return MOVE_OPS
    return ()


# ---------------- Run folding ----------------
def fold_runs(stream: Stream) -> Stream:
    """
    Collapse every maximal +/- run and every maximal >/< run to its net effect.

    A run never mixes the value axis with the pointer axis, so each one is a
    two-bucket majority count: the winner is repeated |a - b| times.
    """
    out: Stream = []
    i = 0
    while i < len(stream):
        axis = _axis(stream[i])
        if not axis:
            out.append(stream[i])
            i += 1
            continue
        pos, neg = axis
        s = 0
        while i < len(stream) and _axis(stream[i]) == axis:
            s += stream[i].signed()
            i += 1
        winner = pos if s > 0 else neg
        out.extend(Token(winner) for _ in range(abs(s)))
    return out


# ---------------- Repeat encoding ----------------
def encode_repeats(stream: Stream, cap: int = MAX_REPEAT) -> Stream:
    """Rewrite runs of two or more identical +-<> tokens into count tokens of at most `cap`."""
    if cap < 1:
        raise make_config_error(message=f"Invalid repeat_cap: {cap}")
    out: Stream = []
    i = 0
    while i < len(stream):
        item = stream[i]
        if not _axis(item):
            out.append(item)
            i += 1
            continue
        n = 0
        while i < len(stream) and isinstance(stream[i], Token) and stream[i].op is item.op:
            n += stream[i].count
            i += 1
        while n > 0:
            chunk = min(n, cap)
            out.append(Token(item.op, chunk))
            n -= chunk
    return out


def expand_repeats(stream: Stream) -> Stream:
    out: Stream = []
    for item in stream:
        if isinstance(item, Token) and item.count > 1:
            out.extend(Token(item.op) for _ in range(item.count))
        else:
            out.append(item)
    return out
