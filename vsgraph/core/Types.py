import math
from enum import Enum, auto
from typing import Any


class PortDirection(Enum):
    INPUT = auto()
    OUTPUT = auto()


class NodeKind(Enum):
    SOURCE = "Source"
    FILTER = "Filter"
    OUTPUT = "Output"


_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def _finite(raw: Any) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"Non-finite float {raw!r}")
    return value


class ParameterKind(Enum):
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    CHOICE = "choice"

    @staticmethod
    def from_name(name: str) -> 'ParameterKind':
        # the editor stores lower-case legacy names ("int", "float", ...)
        try:
            return ParameterKind(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown parameter type '{name}'") from None

    @staticmethod
    def infer(value: Any) -> 'ParameterKind':
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return ParameterKind.BOOL
        if isinstance(value, int):
            return ParameterKind.INT
        if isinstance(value, float):
            return ParameterKind.FLOAT
        if isinstance(value, str):
            return ParameterKind.STRING
        raise ValueError(f"Unsupported parameter value {value!r}")

    def validate(self, value: Any) -> bool:
        if value is None:
            return True
        if self == ParameterKind.INT:
            return isinstance(value, int) and not isinstance(value, bool)
        elif self == ParameterKind.FLOAT:
            return isinstance(value, (float, int)) and not isinstance(value, bool)
        elif self == ParameterKind.BOOL:
            return isinstance(value, bool)
        elif self in (ParameterKind.STRING, ParameterKind.CHOICE):
            return isinstance(value, str)
        return False

    def coerce(self, raw: Any) -> Any:
        """Convert a raw stored value (usually a string) to this kind's Python type."""
        if raw is None:
            return None
        if self.validate(raw):
            return _finite(raw) if self == ParameterKind.FLOAT else raw

        if self == ParameterKind.INT:
            if isinstance(raw, float) and raw.is_integer():
                return int(raw)
            if isinstance(raw, str):
                return int(raw.strip())
        elif self == ParameterKind.FLOAT:
            if isinstance(raw, str):
                return _finite(raw.strip())
        elif self == ParameterKind.BOOL:
            if isinstance(raw, str):
                text = raw.strip().lower()
                if text in _TRUE_STRINGS:
                    return True
                if text in _FALSE_STRINGS:
                    return False
            elif isinstance(raw, int):
                return bool(raw)
        elif self in (ParameterKind.STRING, ParameterKind.CHOICE):
            if isinstance(raw, (int, float)):
                return str(raw)

        raise ValueError(f"Cannot convert {raw!r} to {self.value}")
