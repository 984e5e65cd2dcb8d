from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .compiler import BrainFuckCompiler
from .emitter import EOF_POLICIES, TAPE_SIZE, add_header
from .errors import make_config_error
from .ops_fold import MAX_REPEAT
from .tokens import CORE_SYMBOLS, Extension


@dataclass(frozen=True)
class CompileOptions:
    extensions: Tuple[Extension, ...] = ()
    repeat_cap: int = MAX_REPEAT
    tape_size: int = TAPE_SIZE
    on_eof: str = 'zero'
    shift_division: bool = True
    trace: bool = False

    def __post_init__(self) -> None:
        seen = set()
        for ext in self.extensions:
            sym = ext.symbol
            if len(sym) != 1 or sym in CORE_SYMBOLS or sym.isdigit() or sym.isspace():
                raise make_config_error(message=f"Invalid extension symbol: {sym!r}")
            if sym in seen:
                raise make_config_error(message=f"Duplicate extension symbol: {sym!r}")
            seen.add(sym)
        if self.on_eof not in EOF_POLICIES:
            raise make_config_error(message=f"Invalid on_eof policy: {self.on_eof!r}")
        if self.repeat_cap < 2:
            raise make_config_error(message=f"Invalid repeat_cap: {self.repeat_cap}")
        if self.tape_size < 2:
            raise make_config_error(message=f"Invalid tape_size: {self.tape_size}")


@dataclass(frozen=True)
class CompileResult:
    python_code: str
    body: str
    reduced_loops: int
    kept_loops: int
    trace: List[str]


def compile_string(
    source: str,
    *,
    input_data: Union[str, bytes] = b"",
    options: Optional[CompileOptions] = None,
) -> CompileResult:
    opts = options or CompileOptions()
    compiler = BrainFuckCompiler(
        extensions=opts.extensions,
        repeat_cap=opts.repeat_cap,
        shift_division=opts.shift_division,
        trace=opts.trace,
    )
    body = compiler.compile(source)
    imports = tuple(name for ext in opts.extensions for name in ext.imports)
    code = add_header(body, input_data, tape_size=opts.tape_size, on_eof=opts.on_eof,
                      imports=imports, helpers=compiler.helpers)
    state = compiler.state
    return CompileResult(
        python_code=code,
        body=body,
        reduced_loops=state.reduced_loops,
        kept_loops=state.kept_loops,
        trace=list(state.trace),
    )


def compile_file(
    path: str | Path,
    *,
    input_data: Union[str, bytes] = b"",
    options: Optional[CompileOptions] = None,
    encoding: str = "utf-8",
) -> CompileResult:
    p = Path(path)
    return compile_string(p.read_text(encoding=encoding), input_data=input_data, options=options)
