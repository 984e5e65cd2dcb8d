from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

CORE_SYMBOLS = '+-<>[],.'


# ---------------- Opcodes ----------------
class Op(Enum):
    INC = '+'
    DEC = '-'
    CLEAR = 'c'
    RIGHT = '>'
    LEFT = '<'
    OPEN = '['
    CLOSE = ']'
    SCAN_RIGHT = 'r'
    SCAN_LEFT = 'l'
    INPUT = ','
    OUTPUT = '.'
    EXTENSION = 'x'


VALUE_OPS = (Op.INC, Op.DEC)
MOVE_OPS = (Op.RIGHT, Op.LEFT)
OPPOSITE = {
    Op.INC: Op.DEC,
    Op.DEC: Op.INC,
    Op.RIGHT: Op.LEFT,
    Op.LEFT: Op.RIGHT,
}


# ---------------- Stream items ----------------
@dataclass(frozen=True)
class Token:
    op: Op
    count: int = 1  # repeat count, >= 1
    symbol: Optional[str] = None  # source character of an EXTENSION token

    def signed(self) -> int:
        """Count with the direction of the op: + and > positive, - and < negative."""
        if self.op in (Op.DEC, Op.LEFT):
            return -self.count
        return self.count

    def __str__(self) -> str:
        if self.op is Op.EXTENSION:
            return self.symbol or '?'
        ch = {Op.CLEAR: '[-]', Op.SCAN_RIGHT: '[>]', Op.SCAN_LEFT: '[<]'}.get(self.op, self.op.value)
        return ch if self.count == 1 else f"{self.count}{ch}"


@dataclass(frozen=True)
class Fragment:
    text: str  # generated statement(s), never re-matched

    def __str__(self) -> str:
        return '{' + self.text.replace('\n', '; ') + '}'


Item = Union[Token, Fragment]
Stream = List[Item]


def is_op(item: Item, *ops: Op) -> bool:
    return isinstance(item, Token) and item.op in ops


def dump(stream: Stream) -> str:
    """Compact textual form of a stream, used by traces and tests."""
    return ' '.join(str(item) for item in stream)


# ---------------- Extensions ----------------
@dataclass(frozen=True)
class Extension:
    symbol: str
    template: str  # statement(s) run with the tape `d` and pointer `di` in scope
    imports: Tuple[str, ...] = ()


# Parent process sees the current cell as 0, the child sees 1.
FORK = Extension(symbol='Y', template='d[di] = 0 if os.fork() else 1', imports=('os',))


def extension_table(extensions: Tuple[Extension, ...]) -> Dict[str, Extension]:
    return {ext.symbol: ext for ext in extensions}
