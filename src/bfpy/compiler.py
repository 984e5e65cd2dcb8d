from typing import List, Sequence

from .emitter import emit
from .errors import make_config_error
from .lexer import balance, encode, sanitize
from .ops_fold import MAX_REPEAT, encode_repeats, fold_runs
from .ops_loops import reduce_loops
from .ops_peephole import fuse
from .state import CompilerState
from .tokens import Extension, Stream, dump


class BrainFuckCompiler:
    """
    Brainfuck to Python compiler

    Compiles tape-language source into the body of a Python `run()`
    function operating on a tape `d` and a pointer `di`.

    Pipeline:
    - Sanitize: drop everything outside +-<>[],. and the enabled extensions
    - Encode: opcodes, with [-] [+] [<] [>] recognized as idioms and
      leading dead loops removed
    - Fold: collapse +/- and >/< runs to their net effect
    - Repeat: count-prefixed tokens, chunked at `repeat_cap`
    - Reduce: replace provable innermost loops with closed-form updates
    - Fuse: peephole idioms into single statements
    - Emit: structural templates and indentation

    Every stage is a pure function of the previous stage's output; the
    compiler only keeps statistics and the optional trace.
    """

    def __init__(self, extensions: Sequence[Extension] = (), repeat_cap=MAX_REPEAT,
                 shift_division=True, trace=False):
        if repeat_cap < 2:
            raise make_config_error(message=f"Invalid repeat_cap: {repeat_cap}")
        self.extensions = tuple(extensions)
        self.repeat_cap = repeat_cap
        self.shift_division = shift_division
        self.state = CompilerState(is_tracing=trace)
        self.helpers: List[str] = []

    # ===== Main Compilation Pipeline =====

    def compile(self, code):
        """
        Main compilation method.

        Args:
            code: source text; any character outside the alphabet is ignored

        Returns:
            Python statements for the body of `run()`, indented one level.
            Loops nested too deep for one function are left in `self.helpers`.
        """
        self.state.reset()
        self.helpers = []
        body = emit(self.optimize(code), self.extensions, helpers=self.helpers)
        if self.helpers:
            self.state.add_trace(f"emit: {len(self.helpers)} loops moved to helper functions")
        return body

    def optimize(self, code) -> Stream:
        symbols = [ext.symbol for ext in self.extensions]
        code = balance(sanitize(code, symbols))
        self.state.add_trace(f"sanitize: {len(code)} instructions")

        stream = encode(code, symbols)
        self._stage('encode', stream)

        stream = fold_runs(stream)
        self._stage('fold', stream)

        stream = encode_repeats(stream, self.repeat_cap)
        self._stage('repeat', stream)

        trace = self.state.record_loop
        stream = reduce_loops(stream, self.shift_division, trace=trace)
        self._stage('reduce', stream)

        stream = fuse(stream)
        self._stage('fuse', stream)
        return stream

    def _stage(self, name, stream):
        if self.state.is_tracing:
            self.state.add_trace(f"{name}: {len(stream)} items")
            if len(stream) <= 40:
                self.state.add_trace(f"  {dump(stream)}")
