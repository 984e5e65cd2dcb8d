from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Callable, List, Optional, Set, Tuple

from .emitter import cell, update
from .tokens import MOVE_OPS, VALUE_OPS, Fragment, Op, Stream, Token, dump, is_op

Trace = Optional[Callable[[bool, str], None]]


# ---------------- Emulation state ----------------
@dataclass
class _Pending:
    offset: int
    delta: int  # signed per-iteration change, 0 for a clear
    clear: bool = False
    constant: bool = False  # cell was cleared earlier in the body


@dataclass
class _Iteration:
    pos: int = 0
    started: bool = False
    origin: int = 0  # signed net change of the origin cell per iteration
    once: bool = False  # origin cleared: the body runs at most once
    cleared: Set[int] = field(default_factory=set)
    pending: List[_Pending] = field(default_factory=list)


def pointer_drift(body: Stream) -> int:
    return sum(t.signed() for t in body if is_op(t, *MOVE_OPS))


def _scaled(offset: int, coeff: Fraction, shift_division: bool) -> str:
    op = '+=' if coeff > 0 else '-='
    mag = abs(coeff)
    src = cell(0)
    if mag == 1:
        expr = src
    elif mag.denominator == 1:
        expr = f'{src} * {mag.numerator}'
    elif mag.numerator == 1 and shift_division and mag.denominator & (mag.denominator - 1) == 0:
        expr = f'{src} >> {mag.denominator.bit_length() - 1}'
    else:
        expr = f'{src} * {mag.numerator} // {mag.denominator}'
    return f'{cell(offset)} {op} {expr}'


def analyze_loop(body: Stream, shift_division: bool = True) -> Tuple[Optional[List[Fragment]], str]:
    """
    Try to prove one innermost loop body equivalent to straight-line code.

    Returns (fragments, note). `fragments` is None when the loop has to stay
    a real loop, and `note` then says why; otherwise it names the divisor.
    Every fragment reads the origin cell's value at loop entry; the origin
    is reset by the last fragment, so the pointer and the order of reads are
    both fixed.
    """
    drift = pointer_drift(body)
    if drift:
        return None, f'pointer drift {drift:+d}'

    it = _Iteration()
    for t in body:
        if not isinstance(t, Token):
            return None, 'opaque fragment'
        if t.op in MOVE_OPS:
            it.pos += t.signed()
        elif t.op in VALUE_OPS:
            if it.pos != 0:
                it.pending.append(_Pending(it.pos, t.signed(), constant=it.pos in it.cleared))
            elif it.once:
                return None, 'origin changed after clear'
            else:
                it.started = True
                it.origin += t.signed()
        elif t.op is Op.CLEAR:
            if it.pos != 0:
                it.pending.append(_Pending(it.pos, 0, clear=True))
                it.cleared.add(it.pos)
            else:
                it.started = True
                it.once = True
        else:
            return None, f'contains {t}'

    if not it.started:
        return None, 'origin never changes'
    if not it.once and it.origin == 0:
        return None, 'origin has no net change'

    out: List[Fragment] = []
    divisor = abs(it.origin)
    for p in it.pending:
        if p.clear:
            out.append(Fragment(f'if {cell(0)}: {cell(p.offset)} = 0'))
        elif p.constant or it.once:
            out.append(Fragment(f'if {cell(0)}: {update(p.offset, p.delta)}'))
        else:
            # iterations = origin / -net, so a count-up origin flips every sign
            coeff = Fraction(p.delta, -it.origin)
            out.append(Fragment(_scaled(p.offset, coeff, shift_division)))
    out.append(Fragment(f'{cell(0)} = 0'))

    if it.once:
        return out, 'single pass'
    return out, f'divisor {divisor}'


def reduce_loop(body: Stream, shift_division: bool = True) -> Optional[List[Fragment]]:
    return analyze_loop(body, shift_division)[0]


def reduce_loops(stream: Stream, shift_division: bool = True, trace: Trace = None) -> Stream:
    """
    Replace every reducible innermost loop with its closed form.

    Loops that contain other loops are never analyzed, and nothing is
    retried once inner loops have been replaced.
    """
    out: Stream = []
    i = 0
    while i < len(stream):
        item = stream[i]
        if not is_op(item, Op.OPEN):
            out.append(item)
            i += 1
            continue
        j = i + 1
        while j < len(stream) and not is_op(stream[j], Op.OPEN, Op.CLOSE):
            j += 1
        if j == len(stream) or is_op(stream[j], Op.OPEN):
            if trace is not None:
                trace(False, f"loop @{i}: kept (contains loops)")
            out.append(item)
            i += 1
            continue

        body = stream[i + 1:j]
        fragments, note = analyze_loop(body, shift_division)
        if trace is not None:
            status = 'reduced' if fragments is not None else 'kept'
            trace(fragments is not None, f"loop @{i} [{dump(body)}]: {status} ({note})")
        if fragments is None:
            out.extend(stream[i:j + 1])
        else:
            out.extend(fragments)
        i = j + 1
    return out
