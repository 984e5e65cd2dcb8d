"""
Naive reference interpreter.

Executes source one instruction at a time with the same cell and I/O
semantics as generated programs: signed 64-bit cells that wrap, the pointer
starting mid-tape, a literal input buffer followed by line-by-line stdin.
Used to check compiled programs for equivalence and by `bfpy --naive`.
"""
from __future__ import annotations

import io
from typing import List, Optional, TextIO, Union

import numpy as np
from numba import njit

from .emitter import EOF_POLICIES, TAPE_SIZE
from .errors import make_config_error, make_runtime_error
from .lexer import balance, sanitize

STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_END = 3
STOP_OFF_TAPE = 4
STOP_BATCH = 5

BATCH_STEPS = 1_000_000


@njit(cache=True)
def jit_loop(program_arr, memory, pc, pointer, bracket_map_arr, max_steps):
    """
    Run until I/O, the end of the program, the tape edge or `max_steps`.

    I/O is left to the caller: the loop stops *on* the '.' or ',' without
    executing it.
    """
    stop_reason = 0
    mem_len = len(memory)
    prog_len = len(program_arr)
    steps = 0

    while pc < prog_len and steps < max_steps:
        command = program_arr[pc]

        if command == 62:  # '>'
            pointer += 1
            if pointer >= mem_len:
                stop_reason = STOP_OFF_TAPE
                break
        elif command == 60:  # '<'
            pointer -= 1
            if pointer < 0:
                stop_reason = STOP_OFF_TAPE
                break
        elif command == 43:  # '+'
            memory[pointer] += 1
        elif command == 45:  # '-'
            memory[pointer] -= 1
        elif command == 46:  # '.'
            stop_reason = STOP_OUTPUT
            break
        elif command == 44:  # ','
            stop_reason = STOP_INPUT
            break
        elif command == 91:  # '['
            if memory[pointer] == 0:
                pc = bracket_map_arr[pc]
        elif command == 93:  # ']'
            if memory[pointer] != 0:
                pc = bracket_map_arr[pc]

        pc += 1
        steps += 1

    if stop_reason == 0:
        if pc >= prog_len:
            stop_reason = STOP_END
        else:
            stop_reason = STOP_BATCH

    return pc, pointer, stop_reason, steps


class InputSource:
    """Literal buffer then one stdin line at a time, each ending with a 0 sentinel."""

    def __init__(self, input_data: Union[str, bytes] = b"", stdin: Optional[TextIO] = None,
                 on_eof: str = 'zero'):
        if isinstance(input_data, str):
            self.buffer = [ord(ch) for ch in input_data]
        else:
            self.buffer = list(input_data)
        if self.buffer:
            self.buffer.append(0)
        self.cursor = 0
        self.stdin = stdin
        self.on_eof = on_eof
        self.exhausted = False

    def read(self, cell: int) -> int:
        if self.cursor >= len(self.buffer):
            line = self.stdin.readline() if self.stdin is not None else ''
            if not line:
                if self.on_eof == 'exit':
                    self.exhausted = True
                return 0 if self.on_eof == 'zero' else cell
            self.buffer = [ord(ch) for ch in line] + [0]
            self.cursor = 0
        self.cursor += 1
        return self.buffer[self.cursor - 1]


class BrainFuckRunner:
    def __init__(self, tape_size: int = TAPE_SIZE):
        self.tape_size = tape_size
        self.reset()

    def reset(self):
        self.memory = np.zeros(self.tape_size, dtype=np.int64)
        self.pointer = self.tape_size // 2
        self.pc = 0
        self.step_count = 0
        self.output_buffer: List[str] = []
        self.program = ""
        self.program_arr = np.array([], dtype=np.int32)
        self.bracket_map_arr = np.array([], dtype=np.int32)

    def load_program(self, program_text: str):
        self.reset()
        self.program = balance(sanitize(program_text))
        self.program_arr = np.array([ord(c) for c in self.program], dtype=np.int32)
        self._preprocess_brackets()

    def _preprocess_brackets(self):
        self.bracket_map_arr = np.arange(len(self.program), dtype=np.int32)
        stack = []
        for i, char in enumerate(self.program):
            if char == '[':
                stack.append(i)
            elif char == ']':
                start = stack.pop()
                self.bracket_map_arr[start] = i
                self.bracket_map_arr[i] = start

    def run(self, source: InputSource, step_limit: Optional[int] = None) -> str:
        while True:
            batch = BATCH_STEPS
            if step_limit is not None:
                batch = min(batch, step_limit - self.step_count)
                if batch <= 0:
                    raise make_runtime_error(message=f"step limit {step_limit} exceeded",
                                             code=self.program, pc=self.pc, pointer=self.pointer)

            self.pc, self.pointer, stop_reason, steps = jit_loop(
                self.program_arr, self.memory, self.pc, self.pointer,
                self.bracket_map_arr, batch,
            )
            self.step_count += steps

            if stop_reason == STOP_END:
                break
            if stop_reason == STOP_OFF_TAPE:
                raise make_runtime_error(message="pointer left the tape", code=self.program,
                                         pc=self.pc, pointer=self.pointer)
            if stop_reason == STOP_OUTPUT:
                self.output_buffer.append(chr(int(self.memory[self.pointer]) & 0xFF))
                self.pc += 1
            elif stop_reason == STOP_INPUT:
                value = source.read(int(self.memory[self.pointer]))
                if source.exhausted:
                    break
                self.memory[self.pointer] = value
                self.pc += 1

        return ''.join(self.output_buffer)


def interpret(
    source: str,
    input_data: Union[str, bytes] = b"",
    input_text: str = "",
    *,
    stdin: Optional[TextIO] = None,
    tape_size: int = TAPE_SIZE,
    on_eof: str = 'zero',
    step_limit: Optional[int] = None,
) -> str:
    """Run `source` directly and return its output. `input_text` is used as stdin unless `stdin` is given."""
    if on_eof not in EOF_POLICIES:
        raise make_config_error(message=f"Invalid on_eof policy: {on_eof!r}")
    runner = BrainFuckRunner(tape_size)
    runner.load_program(source)
    lines = stdin if stdin is not None else io.StringIO(input_text)
    return runner.run(InputSource(input_data, lines, on_eof), step_limit=step_limit)
