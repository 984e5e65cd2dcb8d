from __future__ import annotations

import contextlib
import io
import sys


def load_program(python_code: str) -> dict:
    """Execute a generated script's definitions without running it."""
    namespace = {'__name__': 'bfpy_program'}
    exec(compile(python_code, '<bfpy>', 'exec'), namespace)
    return namespace


def run_program(python_code: str, input_text: str = "") -> str:
    """
    Run a generated program in-process and return what it printed.

    `input_text` stands in for stdin once the program's literal input
    buffer is used up.
    """
    namespace = load_program(python_code)
    stdout = io.StringIO()
    stdin = io.StringIO(input_text)

    old_stdin = sys.stdin
    try:
        sys.stdin = stdin
        with contextlib.redirect_stdout(stdout):
            try:
                namespace['run']()
            except SystemExit:
                pass
    finally:
        sys.stdin = old_stdin

    return stdout.getvalue()
