from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class CompilerState:
    reduced_loops: int = 0
    kept_loops: int = 0
    trace: List[str] = field(default_factory=list)
    is_tracing: bool = False

    def reset(self) -> None:
        self.reduced_loops = 0
        self.kept_loops = 0
        self.trace.clear()

    def add_trace(self, message: str) -> None:
        if self.is_tracing:
            self.trace.append(message)

    def record_loop(self, reduced: bool, message: str) -> None:
        if reduced:
            self.reduced_loops += 1
        else:
            self.kept_loops += 1
        self.add_trace(message)
