"""
vsgraph compiler — error taxonomy and result type
==================================================
Compilation is all-or-nothing. The public entry point returns a
CompileResult holding either the script text or a CompileError.

    MISSING_SOURCE   the node set has no Source node
    MISSING_OUTPUT   the node set has no Output node
    CYCLE_DETECTED   the connection set contains a directed cycle
    DANGLING_INPUT   an emitted node's input connector has no producer

Pipeline phases raise CompileFailed internally; compile_graph() converts it
to a failed CompileResult at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class CompileErrorKind(Enum):
    MISSING_SOURCE = "MissingSource"
    MISSING_OUTPUT = "MissingOutput"
    CYCLE_DETECTED = "CycleDetected"
    DANGLING_INPUT = "DanglingInput"


@dataclass(frozen=True)
class CompileError:
    kind: CompileErrorKind
    message: str
    # ids of the nodes a caller should highlight (cycle members, dangling node)
    node_ids: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "nodeIds": list(self.node_ids),
        }

    def __str__(self):
        return f"{self.kind.value}: {self.message}"


class CompileFailed(Exception):
    """Raised by pipeline phases and by CompileResult.unwrap()."""

    def __init__(self, error: CompileError):
        super().__init__(str(error))
        self.error = error

    @property
    def kind(self) -> CompileErrorKind:
        return self.error.kind


@dataclass(frozen=True)
class CompileResult:
    script: Optional[str] = None
    error: Optional[CompileError] = field(default=None)

    @classmethod
    def success(cls, script: str) -> "CompileResult":
        return cls(script=script)

    @classmethod
    def failure(cls, error: CompileError) -> "CompileResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        if self.error is not None:
            raise CompileFailed(self.error)
        return self.script


__all__ = ["CompileError", "CompileErrorKind", "CompileFailed", "CompileResult"]
