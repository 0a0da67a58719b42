"""
Immutable bidirectional lookup tables between names and wire values.

Tables are built once and handed to the mappers that need them. Wire values
may be structured (e.g. the transaction type index [6, 0]); lists are stored
as tuples for lookup and returned as lists for encoding.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Tuple, Union

from .errors import UnknownEnumerator

logger = logging.getLogger(__name__)


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class UnknownValue:
    """A wire value that has no entry in its table, kept as received."""
    table: str
    raw: Any

    def __str__(self) -> str:
        return f"<unknown {self.table} {self.raw!r}>"


class EnumTable:
    """Name <-> wire value table."""

    def __init__(self, name: str, entries: Iterable[Tuple[str, Any]]):
        by_name = {}
        by_value = {}
        for entry_name, value in entries:
            frozen = _freeze(value)
            if entry_name in by_name or frozen in by_value:
                raise ValueError(f"Duplicate entry in {name} table: {entry_name}={value!r}")
            by_name[entry_name] = frozen
            by_value[frozen] = entry_name
        self._name = name
        self._by_name = MappingProxyType(by_name)
        self._by_value = MappingProxyType(by_value)

    @classmethod
    def indexed(cls, name: str, names: Iterable[str], start: int = 0) -> "EnumTable":
        """Table whose wire values are consecutive integers."""
        return cls(name, ((n, i) for i, n in enumerate(names, start)))

    @property
    def name(self) -> str:
        return self._name

    def names(self) -> List[str]:
        return list(self._by_name)

    def __contains__(self, entry_name: object) -> bool:
        return entry_name in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def value_of(self, entry_name: str) -> Any:
        """
        Wire value for a name.

        Raises:
            UnknownEnumerator: If the name is not in the table
        """
        try:
            return _thaw(self._by_name[entry_name])
        except (KeyError, TypeError):
            raise UnknownEnumerator(self._name, entry_name)

    def name_of(self, value: Any) -> str:
        """
        Name for a wire value.

        Raises:
            UnknownEnumerator: If the value is not in the table
        """
        try:
            return self._by_value[_freeze(value)]
        except (KeyError, TypeError):
            raise UnknownEnumerator(self._name, value)

    def decode(self, value: Any) -> Union[str, UnknownValue]:
        """
        Lenient lookup used on responses.

        Accepts a wire value or a name; anything else comes back as an
        UnknownValue carrying the raw input.
        """
        if isinstance(value, str) and value in self._by_name:
            return value
        try:
            return self._by_value[_freeze(value)]
        except (KeyError, TypeError):
            logger.warning(f"Unknown {self._name} value on the wire: {value!r}")
            return UnknownValue(self._name, value)

    def encode(self, entry: Union[str, int, UnknownValue]) -> Any:
        """
        Wire value for a name, a known wire value, or a preserved UnknownValue.

        Raises:
            UnknownEnumerator: If the entry cannot be mapped
        """
        if isinstance(entry, UnknownValue):
            return entry.raw
        if isinstance(entry, str):
            return self.value_of(entry)
        self.name_of(entry)
        return _thaw(_freeze(entry))

    def __repr__(self) -> str:
        return f"EnumTable({self._name!r}, {dict(self._by_name)!r})"
