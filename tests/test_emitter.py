#!/usr/bin/env python3
"""
Emitter templates, indentation and the generated script header.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bfpy.emitter import MAX_NESTING, add_header, cell, emit, move, update
from bfpy.tokens import FORK, Fragment, Op, Token


def test_cell_expressions():
    assert cell() == 'd[di]'
    assert cell(3) == 'd[di+3]'
    assert cell(-2) == 'd[di-2]'
    assert update(1, -4) == 'd[di+1] -= 4'
    assert move(-1) == 'di -= 1'


def test_structural_templates():
    stream = [Token(Op.INPUT), Token(Op.OUTPUT), Token(Op.SCAN_LEFT)]
    assert emit(stream, depth=0) == 'd[di] = read(d[di])\nout(d[di])\nwhile d[di]:\n    di -= 1'


def test_loops_are_indented():
    stream = [Token(Op.OPEN), Fragment('di += 1'), Token(Op.OPEN), Fragment('d[di] -= 1'),
              Token(Op.CLOSE), Token(Op.OUTPUT), Token(Op.CLOSE)]
    assert emit(stream, depth=0).split('\n') == [
        'while d[di]:',
        '    di += 1',
        '    while d[di]:',
        '        d[di] -= 1',
        '    out(d[di])',
    ]


def test_empty_loop_gets_pass():
    assert emit([Token(Op.OPEN), Token(Op.CLOSE)]) == '    while d[di]:\n        pass'


def test_multiline_fragments_keep_indentation():
    stream = [Token(Op.OPEN), Fragment('d[di] += 1\ndi += 1'), Token(Op.CLOSE)]
    assert emit(stream, depth=0) == 'while d[di]:\n    d[di] += 1\n    di += 1'


def test_extension_template():
    stream = [Token(Op.EXTENSION, symbol='Y')]
    assert emit(stream, [FORK], depth=0) == 'd[di] = 0 if os.fork() else 1'


def test_header():
    code = add_header('    out(d[di])', 'AB', tape_size=64, on_eof='exit', imports=('os',))
    assert 'inp = [65, 66, 0]' in code
    assert 'TAPE_SIZE = 64' in code
    assert "ON_EOF = 'exit'" in code
    assert 'import os\n' in code
    compile(code, '<test>', 'exec')


def test_header_accepts_bytes():
    code = add_header('', b'\x00\xff')
    assert 'inp = [0, 255, 0]' in code
    assert 'import os' not in code
    compile(code, '<test>', 'exec')


def test_empty_input_has_no_sentinel():
    assert 'inp = []' in add_header('')


def test_script_writes_latin1_bytes():
    assert "sys.stdout.reconfigure(encoding='latin-1')" in add_header('')


def test_deep_loops_move_to_helpers():
    levels = MAX_NESTING + 3
    stream = [Token(Op.OPEN)] * levels + [Token(Op.OUTPUT)] + [Token(Op.CLOSE)] * levels
    helpers = []
    body = emit(stream, helpers=helpers)
    assert len(helpers) == 1
    assert body.count('while d[di]:') == MAX_NESTING
    assert body.split('\n')[-1] == '    ' * (MAX_NESTING + 1) + 'di = _loop0(d, di)'
    assert helpers[0].split('\n')[:2] == ['def _loop0(d, di):', '    while d[di]:']
    assert helpers[0].split('\n')[-1] == '    return di'
    assert helpers[0].count('while d[di]:') == 3
    code = add_header(body, helpers=helpers)
    assert code.index('def _loop0(d, di):') < code.index('def run():')
    compile(code, '<test>', 'exec')


def test_hoisted_empty_loop_gets_pass():
    stream = [Token(Op.OPEN)] * (MAX_NESTING + 1) + [Token(Op.CLOSE)] * (MAX_NESTING + 1)
    helpers = []
    emit(stream, depth=0, helpers=helpers)
    assert helpers == ['def _loop0(d, di):\n    while d[di]:\n        pass\n    return di']
