from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from .api import CompileOptions, compile_string
from .emitter import EOF_POLICIES
from .errors import BFError
from .interpreter import interpret
from .ops_fold import MAX_REPEAT
from .runtime import run_program
from .tokens import FORK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfpy",
        description="Optimizing Brainfuck to Python compiler.",
    )
    parser.add_argument("file", help="Brainfuck source file")
    parser.add_argument("-o", "--output", help="write the generated program here (default: FILE with .py)")
    parser.add_argument("--input", default="", help="literal input buffer embedded in the program")
    parser.add_argument("--run", action="store_true", help="run the compiled program instead of writing it")
    parser.add_argument("--naive", action="store_true", help="run the source with the reference interpreter")
    parser.add_argument("--fork", action="store_true", help="enable the Y fork instruction")
    parser.add_argument("--eof", choices=EOF_POLICIES, default="zero", help="input behaviour at end of stdin")
    parser.add_argument("--repeat-cap", type=int, default=MAX_REPEAT, help="largest count per repeat token")
    parser.add_argument("--no-shift", action="store_true", help="never emit right shifts for divisions")
    parser.add_argument("--trace", action="store_true", help="print what each stage did")
    parser.add_argument("--time", action="store_true", help="report compile and run times")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        code = Path(args.file).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Couldn't find file: {args.file}", file=sys.stderr)
        return 1

    try:
        if args.naive:
            start = time.time()
            out = interpret(code, args.input, stdin=sys.stdin, on_eof=args.eof)
            sys.stdout.write(out)
            sys.stdout.flush()
            if args.time:
                print(f"\nExecution took {(time.time() - start) * 1000:.2f} ms", file=sys.stderr)
            return 0

        options = CompileOptions(
            extensions=(FORK,) if args.fork else (),
            repeat_cap=args.repeat_cap,
            on_eof=args.eof,
            shift_division=not args.no_shift,
            trace=args.trace,
        )
        start = time.time()
        result = compile_string(code, input_data=args.input, options=options)
        end = time.time()
    except BFError as e:
        print(e, file=sys.stderr)
        return 1

    if args.trace:
        for line in result.trace:
            print(line, file=sys.stderr)
    if args.time:
        print(f"Compilation took {(end - start) * 1000:.2f} ms "
              f"({result.reduced_loops} loops reduced, {result.kept_loops} kept)", file=sys.stderr)

    if args.run:
        start = time.time()
        sys.stdout.write(run_program(result.python_code, sys.stdin.read()))
        sys.stdout.flush()
        if args.time:
            print(f"\nExecution took {(time.time() - start) * 1000:.2f} ms", file=sys.stderr)
        return 0

    target = Path(args.output) if args.output else Path(args.file).with_suffix(".py")
    target.write_text(result.python_code, encoding="utf-8")
    print(f"Wrote {target}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
