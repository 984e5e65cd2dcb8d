import re

from typing import Dict, Iterable, List

from .tokens import CORE_SYMBOLS, Op, Stream, Token

IDIOMS: Dict[str, Op] = {
    '[-]': Op.CLEAR,
    '[+]': Op.CLEAR,
    '[<]': Op.SCAN_LEFT,
    '[>]': Op.SCAN_RIGHT,
}

_SIMPLE: Dict[str, Op] = {op.value: op for op in (
    Op.INC, Op.DEC, Op.RIGHT, Op.LEFT, Op.OPEN, Op.CLOSE, Op.INPUT, Op.OUTPUT,
)}


def sanitize(code: str, extra_symbols: Iterable[str] = ()) -> str:
    """Drop every character that is neither an instruction nor an enabled extension symbol."""
    alphabet = CORE_SYMBOLS + ''.join(extra_symbols)
    return re.sub('[^' + re.escape(alphabet) + ']', '', code)


def balance(code: str) -> str:
    """
    Repair bracket structure so every stage sees matched loops.

    An unmatched ']' is dropped; every '[' still open at the end of the
    program is closed there.
    """
    out: List[str] = []
    depth = 0
    for ch in code:
        if ch == '[':
            depth += 1
        elif ch == ']':
            if depth == 0:
                continue
            depth -= 1
        out.append(ch)
    return ''.join(out) + ']' * depth


def strip_dead_loops(stream: Stream) -> Stream:
    # The tape is all zero on entry, so a loop at the very start never runs.
    out = list(stream)
    while out and isinstance(out[0], Token) and out[0].op is Op.OPEN:
        depth = 0
        for j, item in enumerate(out):
            if isinstance(item, Token) and item.op is Op.OPEN:
                depth += 1
            elif isinstance(item, Token) and item.op is Op.CLOSE:
                depth -= 1
                if depth == 0:
                    break
        out = out[j + 1:]
    return out


def encode(code: str, extra_symbols: Iterable[str] = ()) -> Stream:
    """
    Map sanitized, balanced source to opcodes.

    The clear and scan idioms are replaced first, left to right and without
    overlap, so they never reach loop analysis.
    """
    extra = set(extra_symbols)
    tokens: Stream = []
    i = 0
    while i < len(code):
        idiom = IDIOMS.get(code[i:i + 3])
        if idiom is not None:
            tokens.append(Token(idiom))
            i += 3
            continue
        ch = code[i]
        if ch in _SIMPLE:
            tokens.append(Token(_SIMPLE[ch]))
        elif ch in extra:
            tokens.append(Token(Op.EXTENSION, symbol=ch))
        i += 1
    return strip_dead_loops(tokens)


def tokenize(source: str, extra_symbols: Iterable[str] = ()) -> Stream:
    extra = tuple(extra_symbols)
    return encode(balance(sanitize(source, extra)), extra)
