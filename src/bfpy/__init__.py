
from .compiler import BrainFuckCompiler
from .lexer import sanitize, tokenize
from .api import CompileOptions, CompileResult, compile_file, compile_string
from .tokens import FORK, Extension

__all__ = [
    'BrainFuckCompiler',
    'sanitize',
    'tokenize',
    'CompileOptions',
    'CompileResult',
    'compile_string',
    'compile_file',
    'Extension',
    'FORK',
]
