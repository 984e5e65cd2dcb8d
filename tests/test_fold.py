#!/usr/bin/env python3
"""
Run folding and repeat encoding.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfpy.errors import BFConfigError
from bfpy.lexer import tokenize
from bfpy.ops_fold import MAX_REPEAT, encode_repeats, expand_repeats, fold_runs
from bfpy.tokens import Op, Token

PROGRAMS = [
    "",
    "++-+",
    "+-+-<><>",
    ">>><<+++--.",
    "+>-<+>-<",
    "+[->+<]>>>.<<<<",
    "-+,+-.><[><]",
]


def test_fold_keeps_majority():
    assert fold_runs(tokenize("++-+")) == [Token(Op.INC), Token(Op.INC)]
    assert fold_runs(tokenize("<<><")) == [Token(Op.LEFT), Token(Op.LEFT)]


def test_fold_deletes_balanced_runs():
    assert fold_runs(tokenize("+-")) == []
    assert fold_runs(tokenize("><<>")) == []


def test_fold_never_mixes_axes():
    stream = tokenize("+>-")
    assert fold_runs(stream) == stream


def test_fold_is_idempotent():
    for src in PROGRAMS:
        once = fold_runs(tokenize(src))
        assert fold_runs(once) == once, src


def test_repeat_encoding():
    assert encode_repeats(tokenize("+++")) == [Token(Op.INC, 3)]
    assert encode_repeats(tokenize("+")) == [Token(Op.INC)]
    assert encode_repeats(tokenize("++.++")) == [Token(Op.INC, 2), Token(Op.OUTPUT), Token(Op.INC, 2)]


def test_repeat_encoding_chunks_at_cap():
    stream = encode_repeats(tokenize("+" * 250))
    assert [t.count for t in stream] == [99, 99, 52]
    stream = encode_repeats(tokenize(">" * 100))
    assert stream == [Token(Op.RIGHT, 99), Token(Op.RIGHT)]


def test_repeat_round_trip():
    """Chunk boundaries never lose or add an instruction."""
    for n in range(2, 251):
        stream = encode_repeats(tokenize("-" * n))
        assert all(t.count <= MAX_REPEAT for t in stream)
        assert sum(t.count for t in stream) == n
        assert len(expand_repeats(stream)) == n


def test_repeat_custom_cap():
    stream = encode_repeats(tokenize("<" * 10), cap=4)
    assert [t.count for t in stream] == [4, 4, 2]


def test_repeat_cap_below_one_is_rejected():
    with pytest.raises(BFConfigError):
        encode_repeats([Token(Op.INC)] * 3, cap=0)
