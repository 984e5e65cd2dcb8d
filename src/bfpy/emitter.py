from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .tokens import Extension, Fragment, Op, Stream, extension_table

INDENT = '    '
TAPE_SIZE = 131072

# while loops per generated function before the rest moves to a helper
MAX_NESTING = 16

EOF_POLICIES = ('zero', 'unchanged', 'exit')

TEMPLATES = {
    Op.OPEN: 'while d[di]:',
    Op.OUTPUT: 'out(d[di])',
    Op.INPUT: 'd[di] = read(d[di])',
    Op.SCAN_RIGHT: 'while d[di]:\n' + INDENT + 'di += 1',
    Op.SCAN_LEFT: 'while d[di]:\n' + INDENT + 'di -= 1',
}

HEADER = '''\
#!/usr/bin/env python3
# Generated by bfpy. Cells are signed 64-bit integers and wrap on overflow.
import sys
{imports}
import numpy as np

np.seterr(over='ignore')

TAPE_SIZE = {tape_size}
ON_EOF = {on_eof!r}

inp = {codes!r}
ip = 0


def read(cell):
    global inp, ip
    if ip >= len(inp):
        line = sys.stdin.readline()
        if not line:
            if ON_EOF == 'exit':
                sys.stdout.flush()
                raise SystemExit(0)
            return 0 if ON_EOF == 'zero' else cell
        inp = [ord(ch) for ch in line] + [0]
        ip = 0
    ip += 1
    return inp[ip - 1]


def out(cell):
    sys.stdout.write(chr(int(cell) & 0xFF))


{helpers}def run():
    d = np.zeros(TAPE_SIZE, dtype=np.int64)
    di = TAPE_SIZE // 2
{body}
    sys.stdout.flush()


if __name__ == '__main__':
    # one byte per cell on the terminal instead of UTF-8
    sys.stdout.reconfigure(encoding='latin-1')
    run()
'''


# ---------------- Cell expressions ----------------
def cell(offset: int = 0) -> str:
    if offset > 0:
        return f'd[di+{offset}]'
    if offset < 0:
        return f'd[di-{-offset}]'
    return 'd[di]'


def update(offset: int, delta: int) -> str:
    """`d[di+offset] += delta` in its shortest form."""
    if delta >= 0:
        return f'{cell(offset)} += {delta}'
    return f'{cell(offset)} -= {-delta}'


def move(delta: int) -> str:
    if delta >= 0:
        return f'di += {delta}'
    return f'di -= {-delta}'


# ---------------- Emission ----------------
def _lines(text: str, depth: int) -> List[str]:
    return [INDENT * depth + line for line in text.split('\n')]


def _emit_block(stream: Stream, i: int, table: Dict[str, Extension], depth: int,
                nesting: int, helpers: List[str]) -> Tuple[List[str], int]:
    """Emit statements from `stream[i]` up to the matching CLOSE; return them and the next index."""
    out: List[str] = []
    while i < len(stream):
        item = stream[i]
        i += 1
        if isinstance(item, Fragment):
            out.extend(_lines(item.text, depth))
        elif item.op is Op.CLOSE:
            break
        elif item.op is Op.OPEN:
            if nesting >= MAX_NESTING:
                body, i = _emit_block(stream, i, table, 2, 1, helpers)
                name = f'_loop{len(helpers)}'
                helpers.append('\n'.join(
                    [f'def {name}(d, di):', INDENT + TEMPLATES[Op.OPEN]]
                    + (body or _lines('pass', 2))
                    + [INDENT + 'return di']
                ))
                out.extend(_lines(f'di = {name}(d, di)', depth))
                continue
            body, i = _emit_block(stream, i, table, depth + 1, nesting + 1, helpers)
            out.extend(_lines(TEMPLATES[Op.OPEN], depth))
            out.extend(body or _lines('pass', depth + 1))
        elif item.op is Op.EXTENSION:
            out.extend(_lines(table[item.symbol].template, depth))
        else:
            out.extend(_lines(TEMPLATES[item.op], depth))
    return out, i


def emit(stream: Stream, extensions: Sequence[Extension] = (), depth: int = 1,
         helpers: Optional[List[str]] = None) -> str:
    """
    Substitute the remaining structural tokens with their templates.

    Fragments are copied verbatim. Loop bodies are indented one level below
    their `while`, and an empty body becomes `pass`. `depth` is the
    indentation of the outermost statements.

    A loop nested more than MAX_NESTING deep is moved into a module-level
    function `_loopN(d, di)` returning the pointer, which is appended to
    `helpers`; CPython rejects more than 20 nested blocks in one function.
    """
    table = extension_table(tuple(extensions))
    if helpers is None:
        helpers = []
    out, _ = _emit_block(stream, 0, table, depth, 0, helpers)
    return '\n'.join(out)


def _import_lines(modules: Iterable[str]) -> str:
    return ''.join(f'import {name}\n' for name in sorted(set(modules)))


def add_header(
    body: str,
    input_data: Union[str, bytes] = b'',
    *,
    tape_size: int = TAPE_SIZE,
    on_eof: str = 'zero',
    imports: Tuple[str, ...] = (),
    helpers: Sequence[str] = (),
) -> str:
    """
    Wrap an emitted body into a complete, runnable script.

    A non-empty literal input buffer ends with a 0, like every stdin line.
    `helpers` are the loop functions collected by `emit`.
    """
    if isinstance(input_data, str):
        codes = [ord(ch) for ch in input_data]
    else:
        codes = list(input_data)
    if codes:
        codes.append(0)
    return HEADER.format(
        imports=_import_lines(imports).rstrip('\n'),
        tape_size=int(tape_size),
        on_eof=on_eof,
        codes=codes,
        helpers=''.join(f'{text}\n\n\n' for text in helpers),
        body=body,
    )
