from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def _build_context(code: str, pc: int, *, context: int = 12) -> str:
    start = max(0, pc - context)
    end = min(len(code), pc + context + 1)
    window = code[start:end]
    caret = ' ' * (pc - start) + '^'
    return f"  {start:6d} | {window}\n         | {caret}"


def _hint_for(message: str, *, kind: str) -> Optional[str]:
    msg = message.lower()
    if kind == 'config':
        if 'extension symbol' in msg:
            return 'Extension symbols must be a single character that is not one of +-<>[],. or a digit.'
        if 'duplicate' in msg:
            return 'Register each extension symbol only once.'
        if 'on_eof' in msg:
            return 'Use one of: zero, unchanged, exit.'
        if 'repeat_cap' in msg:
            return 'The repeat cap must be at least 2.'
        if 'tape_size' in msg:
            return 'The tape needs room on both sides of the start cell.'
        return None
    if kind == 'runtime':
        if 'left the tape' in msg:
            return 'Increase tape_size or check the program for runaway pointer movement.'
        return None
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BFConfigError(BFError):
    hint: Optional[str] = None


@dataclass
class BFRuntimeError(BFError):
    pc: int
    pointer: int
    context: str


def make_config_error(*, message: str) -> BFConfigError:
    hint = _hint_for(message, kind='config')
    hint_block = f"\nHint: {hint}" if hint else ""
    return BFConfigError(message=f"ConfigError: {message}{hint_block}", hint=hint)


def make_runtime_error(*, message: str, code: str, pc: int, pointer: int) -> BFRuntimeError:
    ctx = _build_context(code, pc)
    hint = _hint_for(message, kind='runtime')
    hint_block = f"\nHint: {hint}" if hint else ""
    return BFRuntimeError(
        message=f"RuntimeError: {message} (pc {pc}, pointer {pointer})\n{ctx}{hint_block}",
        pc=pc,
        pointer=pointer,
        context=ctx,
    )
