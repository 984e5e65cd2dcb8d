#!/usr/bin/env python3

import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.append(os.path.join(ROOT, 'src'))

from bfpy import compile_file  # noqa: E402
from bfpy.interpreter import interpret  # noqa: E402
from bfpy.runtime import run_program  # noqa: E402


def _norm(s: str) -> str:
    return s.replace('\r\n', '\n')


def _run_example(path: str, *, input_text: str) -> dict:
    result = compile_file(path)
    with open(path, encoding='utf-8') as f:
        source = f.read()
    return {
        "compiled": _norm(run_program(result.python_code, input_text)),
        "naive": _norm(interpret(source, input_text=input_text)),
        "reduced": result.reduced_loops,
        "kept": result.kept_loops,
    }


def main() -> int:
    examples = [
        {
            "file": "examples/hello.b",
            "input": "",
            "check": lambda out: out == "Hello World!\n",
            "expect": "exactly equals 'Hello World!\\n'",
        },
        {
            "file": "examples/letters.b",
            "input": "",
            "check": lambda out: out == "ABCDEFGHIJKLMNOPQRSTUVWXYZ\n",
            "expect": "the alphabet and a newline",
        },
        {
            "file": "examples/cat.b",
            "input": "echo me\n",
            "check": lambda out: out == "echo me\n",
            "expect": "exactly equals 'echo me\\n'",
        },
    ]

    print("=== bfpy Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(os.path.join(ROOT, ex["file"]), input_text=ex["input"])
        passed = r["compiled"] == r["naive"] and ex["check"](r["compiled"])
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']} ({r['reduced']} loops reduced, {r['kept']} kept)")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']}")
        print("--- compiled output ---")
        print(repr(r["compiled"]))
        print("--- interpreter output ---")
        print(repr(r["naive"]))

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
