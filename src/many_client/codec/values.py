"""
Value model of the tagged binary codec.

Python natives cover most wire kinds (bytes, str, int, bool, None, float,
list, dict). The classes here cover what has no native counterpart.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TaggedValue:
    """A value prefixed with a numeric tag. Unknown tags round-trip unchanged."""
    tag: int
    value: Any

    def __post_init__(self):
        if not isinstance(self.tag, int) or isinstance(self.tag, bool) or self.tag < 0:
            raise ValueError(f"Tag must be a non-negative integer, got {self.tag!r}")


@dataclass(frozen=True)
class SimpleValue:
    """A simple value other than false, true, null and undefined."""
    value: int

    def __post_init__(self):
        if not (0 <= self.value <= 19 or 32 <= self.value <= 255):
            raise ValueError(f"Invalid simple value: {self.value}")


class _Undefined:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()
