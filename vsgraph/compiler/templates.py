"""
vsgraph compiler — Statement Templates
=======================================
Fixed text the emitter stitches together. External tooling parses these
strings (call targets, output indices), so every literal here is part of the
output contract and is pinned by tests.

  PREAMBLE           two lines emitted at the top of every script
  SOURCE_ADAPTERS    source-plugin hint → ingest call target
  render_literal()   parameter value → VapourSynth/Python literal
  safe_identifier()  node id → variable-name fragment
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from vsgraph.core.Types import ParameterKind


# ── Code writer ───────────────────────────────────────────────────────────────

class CodeWriter:
    """Simple line accumulator."""

    def __init__(self):
        self._lines: List[str] = []

    def writeln(self, line: str = "") -> "CodeWriter":
        self._lines.append(line)
        return self

    def comment(self, text: str) -> "CodeWriter":
        return self.writeln(f"# {text}")

    def extend(self, lines: List[str]) -> "CodeWriter":
        for line in lines:
            self.writeln(line)
        return self

    def lines(self) -> List[str]:
        return self._lines

    def result(self) -> str:
        return "\n".join(self._lines) + "\n"


# ── Preamble ──────────────────────────────────────────────────────────────────

RUNTIME_HANDLE = "core"

PREAMBLE: List[str] = [
    "import vapoursynth as vs",
    f"{RUNTIME_HANDLE} = vs.core",
]


# ── Source adapters ───────────────────────────────────────────────────────────

DEFAULT_SOURCE_ADAPTER = "ffms2.Source"

SOURCE_ADAPTERS: Dict[str, str] = {
    "ffms2":        "ffms2.Source",
    "lsmashsource": "lsmas.LWLibavSource",
}


def source_adapter(hint: Optional[str]) -> str:
    """Call target (without the runtime handle) for a Source node's plugin hint."""
    if not hint:
        return DEFAULT_SOURCE_ADAPTER
    return SOURCE_ADAPTERS.get(hint, DEFAULT_SOURCE_ADAPTER)


# ── Literals ──────────────────────────────────────────────────────────────────

_ESCAPES = {
    "\\": "\\\\",
    '"':  '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def string_literal(text: str) -> str:
    """Double-quoted literal; backslashes in Windows paths are escaped, not raw."""
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def render_literal(value: Any, kind: ParameterKind) -> str:
    """Literal for a value already of the kind's Python type (see ParameterKind.coerce)."""
    if value is None or not kind.validate(value):
        raise ValueError(f"Cannot render {value!r} as {kind.value}")
    if kind == ParameterKind.BOOL:
        return "True" if value else "False"
    if kind == ParameterKind.INT:
        return str(value)
    if kind == ParameterKind.FLOAT:
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Non-finite float parameter {value!r}")
        return repr(number)
    return string_literal(value)


# ── Identifiers ───────────────────────────────────────────────────────────────

_NON_IDENT = re.compile(r"[^a-z0-9_]")


def safe_identifier(text: str) -> str:
    """Lower-case, with every character outside [a-z0-9_] replaced by '_'."""
    return _NON_IDENT.sub("_", text.lower())


__all__ = [
    "CodeWriter",
    "DEFAULT_SOURCE_ADAPTER",
    "PREAMBLE",
    "RUNTIME_HANDLE",
    "SOURCE_ADAPTERS",
    "render_literal",
    "safe_identifier",
    "source_adapter",
    "string_literal",
]
