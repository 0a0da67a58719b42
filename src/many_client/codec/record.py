"""
WireRecord: the ordered, integer-keyed map used for every call's arguments
and results.

A field can be present with a value, present as null, or absent; the three
are kept apart. field() also reports a fourth state, MALFORMED, when a field
decoder rejects the value, so callers decide whether that failure is fatal.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..runtime.errors import DecodeError, ManyClientError, MissingField
from .values import UNDEFINED


class FieldState(Enum):
    PRESENT = "present"
    NULL = "null"
    ABSENT = "absent"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class FieldResult:
    """Outcome of looking up (and optionally decoding) one record field."""
    index: int
    state: FieldState
    value: Any = None
    error: Optional[ManyClientError] = None
    name: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.state is FieldState.PRESENT

    def require(self) -> Any:
        """
        Value of a field that must be there.

        Raises:
            MissingField: If the field is absent
            DecodeError: If the field is null
            ManyClientError: The decoder's error if the field is malformed
        """
        if self.state is FieldState.PRESENT:
            return self.value
        if self.state is FieldState.ABSENT:
            raise MissingField(self.index, self.name)
        if self.state is FieldState.NULL:
            raise DecodeError(f"Required {self._label} is null")
        raise self.error

    def optional(self, default: Any = None) -> Any:
        """Value of the field, or default when absent or null. Malformed still raises."""
        if self.state is FieldState.PRESENT:
            return self.value
        if self.state is FieldState.MALFORMED:
            raise self.error
        return default

    @property
    def _label(self) -> str:
        return f"{self.name} (field {self.index})" if self.name else f"field {self.index}"


def _check_key(key: Any) -> int:
    if isinstance(key, bool) or not isinstance(key, int) or key < 0:
        raise DecodeError(f"Record keys must be non-negative integers, got {key!r}")
    return key


class WireRecord(dict):
    """Ordered mapping from field index to value."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for key in self:
            _check_key(key)

    def __setitem__(self, key: int, value: Any) -> None:
        super().__setitem__(_check_key(key), value)

    @classmethod
    def from_value(cls, value: Any, what: str = "record") -> "WireRecord":
        """
        Interpret a decoded value as a record.

        null and undefined mean an empty record.

        Raises:
            DecodeError: If the value is not a map with integer keys
        """
        if value is None or value is UNDEFINED:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            raise DecodeError(f"Expected {what} to be a map, got {type(value).__name__}")
        return cls(value)

    def set(self, index: int, value: Any) -> "WireRecord":
        """Set a field (chainable)."""
        self[index] = value
        return self

    def set_optional(self, index: int, value: Any) -> "WireRecord":
        """Set a field only when value is not None (chainable)."""
        if value is not None:
            self[index] = value
        return self

    def state(self, index: int) -> FieldState:
        if index not in self:
            return FieldState.ABSENT
        value = self[index]
        if value is None or value is UNDEFINED:
            return FieldState.NULL
        return FieldState.PRESENT

    def field(self, index: int, decoder: Optional[Callable[[Any], Any]] = None,
              name: Optional[str] = None) -> FieldResult:
        """
        Look up a field and run its decoder.

        Decoder failures (ManyClientError) are returned as MALFORMED results;
        the error is re-raised by require()/optional().
        """
        state = self.state(index)
        if state is not FieldState.PRESENT:
            return FieldResult(index, state, name=name)
        value = self[index]
        if decoder is None:
            return FieldResult(index, state, value, name=name)
        try:
            return FieldResult(index, state, decoder(value), name=name)
        except ManyClientError as e:
            return FieldResult(index, FieldState.MALFORMED, value, error=e, name=name)

    def require(self, index: int, decoder: Optional[Callable[[Any], Any]] = None,
                name: Optional[str] = None) -> Any:
        return self.field(index, decoder, name).require()

    def optional(self, index: int, decoder: Optional[Callable[[Any], Any]] = None,
                 name: Optional[str] = None, default: Any = None) -> Any:
        return self.field(index, decoder, name).optional(default)

    def __repr__(self) -> str:
        return f"WireRecord({dict.__repr__(self)})"
