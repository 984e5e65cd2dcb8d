#!/usr/bin/env python3
"""
Sanitizer and encoder: alphabet filtering, bracket repair, idioms, dead loops.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bfpy.lexer import balance, encode, sanitize, tokenize
from bfpy.tokens import Op, Token


def ops(stream):
    return [t.op for t in stream]


def test_sanitize_drops_comments():
    """Everything outside the eight instructions is discarded."""
    assert sanitize("add two: ++ then print .\n") == "++."
    assert sanitize("Y+Z") == "+"


def test_sanitize_keeps_enabled_extensions():
    assert sanitize("Y+Z", ['Y']) == "Y+"
    assert sanitize("^]x", ['^']) == "^]"


def test_balance_repairs_brackets():
    assert balance("]+[") == "+[]"
    assert balance("[[+") == "[[+]]"
    assert balance("+[-]]") == "+[-]"


def test_idioms_are_recognized_before_mapping():
    stream = tokenize("+[-]>[+]>[<]>[>]")
    assert ops(stream) == [
        Op.INC, Op.CLEAR, Op.RIGHT, Op.CLEAR, Op.RIGHT, Op.SCAN_LEFT, Op.RIGHT, Op.SCAN_RIGHT,
    ]


def test_idioms_do_not_overlap():
    # "[-]" is taken first, the trailing "+]" is left for generic mapping
    assert ops(encode("+[[-]+]")) == [Op.INC, Op.OPEN, Op.CLEAR, Op.INC, Op.CLOSE]


def test_leading_dead_loop_is_removed():
    """The tape starts zeroed, so a loop at the very start can never run."""
    assert ops(tokenize("[this, is. a comment]+.")) == [Op.INC, Op.OUTPUT]
    assert ops(tokenize("[.][.]+")) == [Op.INC]
    assert ops(tokenize("[[.]+]-")) == [Op.DEC]


def test_leading_clear_idiom_is_kept():
    assert ops(tokenize("[-]+")) == [Op.CLEAR, Op.INC]


def test_loops_after_the_start_are_kept():
    assert ops(tokenize("+[-.]")) == [Op.INC, Op.OPEN, Op.DEC, Op.OUTPUT, Op.CLOSE]


def test_extension_tokens():
    assert tokenize("Y+", ['Y']) == [Token(Op.EXTENSION, symbol='Y'), Token(Op.INC)]
    assert tokenize("Y+") == [Token(Op.INC)]
