"""
Interpretation of tagged values.

Only two tags carry meaning for the client: the identity tag and the epoch
timestamp tag. Everything else is kept as UnknownTag so it can be written
back exactly as it was received.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

from ..runtime.address import Address
from ..runtime.errors import MalformedEncoding, UnexpectedTag
from .identity import IDENTITY_TAG, address_to_identity, identity_to_address
from .values import TaggedValue

TIMESTAMP_TAG = 1


@dataclass(frozen=True)
class Identity:
    address: Address

    def to_tagged(self) -> TaggedValue:
        return address_to_identity(self.address)


@dataclass(frozen=True)
class Timestamp:
    """Seconds since the Unix epoch, integer or fractional."""
    value: Union[int, float]

    @property
    def datetime(self) -> datetime:
        return datetime.fromtimestamp(self.value, tz=timezone.utc)

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Timestamp":
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        seconds = moment.timestamp()
        return cls(int(seconds) if seconds.is_integer() else seconds)

    def to_tagged(self) -> TaggedValue:
        return TaggedValue(TIMESTAMP_TAG, self.value)


@dataclass(frozen=True)
class UnknownTag:
    tag: int
    value: Any

    def to_tagged(self) -> TaggedValue:
        return TaggedValue(self.tag, self.value)


Interpreted = Union[Identity, Timestamp, UnknownTag]


def interpret_tag(tagged: TaggedValue) -> Interpreted:
    """
    Classify a tagged value.

    Raises:
        MalformedAddress: If an identity tag wraps invalid address bytes
        MalformedEncoding: If a timestamp tag wraps something other than a number
    """
    if tagged.tag == IDENTITY_TAG:
        return Identity(identity_to_address(tagged))
    if tagged.tag == TIMESTAMP_TAG:
        return Timestamp(timestamp_value(tagged))
    return UnknownTag(tagged.tag, tagged.value)


def timestamp_value(tagged: Any) -> Union[int, float]:
    """Seconds carried by a timestamp-tagged value."""
    if not isinstance(tagged, TaggedValue):
        raise UnexpectedTag(TIMESTAMP_TAG, None)
    if tagged.tag != TIMESTAMP_TAG:
        raise UnexpectedTag(TIMESTAMP_TAG, tagged.tag)
    value = tagged.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedEncoding(f"Timestamp must wrap a number, got {type(value).__name__}")
    return value


def decode_timestamp(tagged: Any) -> datetime:
    """Tagged epoch seconds to an aware UTC datetime."""
    try:
        return Timestamp(timestamp_value(tagged)).datetime
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedEncoding(f"Timestamp out of range: {tagged!r}", cause=e)
