"""
Address Pydantic custom type for MANY identities.

An address is an immutable byte string whose first byte selects its kind:

    0x00          anonymous (1 byte)
    0x01          public key: 0x01 + 28-byte key hash (29 bytes)
    0x80..0xFF    subresource: flag/id byte + 28-byte hash + 3 id bytes (32 bytes)

The textual form is "m" + base32(bytes) + a 2-character CRC-16 checksum.
"""

from __future__ import annotations
import base64
import binascii
from typing import Any, Optional, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from .errors import MalformedAddress

ANONYMOUS_BYTE = 0x00
PUBLIC_KEY_BYTE = 0x01
SUBRESOURCE_FLAG = 0x80

HASH_SIZE = 28
PUBLIC_KEY_SIZE = 1 + HASH_SIZE
SUBRESOURCE_SIZE = 1 + HASH_SIZE + 3
MAX_SUBRESOURCE_ID = 0x7FFFFFFF

ANONYMOUS_TEXT = "maa"


def _crc16(data: bytes) -> int:
    # CRC-16/ARC: reflected 0x8005, zero init, no final xor
    crc = 0
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1
    return crc


def _b32(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=").lower()


def _checksum(data: bytes) -> str:
    return _b32(_crc16(data).to_bytes(2, "big"))[:2]


def validate_address_bytes(data: bytes) -> bytes:
    """
    Check that raw bytes form a structurally valid address.

    Raises:
        MalformedAddress: If the bytes are empty, the kind byte is reserved,
            or the length does not match the kind
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedAddress(f"Address must be bytes, got {type(data).__name__}")
    data = bytes(data)
    if not data:
        raise MalformedAddress("Address bytes cannot be empty")

    kind = data[0]
    if kind == ANONYMOUS_BYTE:
        expected = 1
    elif kind == PUBLIC_KEY_BYTE:
        expected = PUBLIC_KEY_SIZE
    elif kind & SUBRESOURCE_FLAG:
        expected = SUBRESOURCE_SIZE
    else:
        raise MalformedAddress(f"Invalid address kind byte 0x{kind:02x}",
                               details={"bytes": data.hex()})

    if len(data) != expected:
        raise MalformedAddress(
            f"Address of kind 0x{kind:02x} must be {expected} bytes, got {len(data)}",
            details={"bytes": data.hex()},
        )
    return data


class Address:
    """Custom Pydantic type for MANY addresses."""

    __slots__ = ("_bytes",)

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        object.__setattr__(self, "_bytes", validate_address_bytes(data))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Address is immutable")

    # Constructors

    @classmethod
    def anonymous(cls) -> "Address":
        """The anonymous address."""
        return cls(bytes([ANONYMOUS_BYTE]))

    @classmethod
    def from_public_key_hash(cls, key_hash: bytes) -> "Address":
        """Create a public key address from a 28-byte key hash."""
        if len(key_hash) != HASH_SIZE:
            raise MalformedAddress(f"Key hash must be {HASH_SIZE} bytes, got {len(key_hash)}")
        return cls(bytes([PUBLIC_KEY_BYTE]) + bytes(key_hash))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Address":
        """Create an Address from its byte representation."""
        return cls(data)

    @classmethod
    def from_string(cls, text: str) -> "Address":
        """Parse the textual "m..." form, verifying the checksum."""
        if not isinstance(text, str):
            raise MalformedAddress("Address text must be a string")
        if text == ANONYMOUS_TEXT:
            return cls.anonymous()
        if not text.startswith("m") or len(text) < 4:
            raise MalformedAddress(f"Invalid address text: {text!r}")

        body, checksum = text[1:-2], text[-2:]
        padded = body.upper() + "=" * (-len(body) % 8)
        try:
            data = base64.b32decode(padded)
        except (binascii.Error, ValueError) as e:
            raise MalformedAddress(f"Invalid base32 in address: {text!r}", cause=e)

        if _checksum(data) != checksum.lower():
            raise MalformedAddress(f"Address checksum mismatch: {text!r}")
        return cls(data)

    @classmethod
    def parse(cls, value: Union[str, bytes, "Address"]) -> "Address":
        """Accept an Address, its bytes, or its textual form."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(value)
        raise MalformedAddress(f"Cannot build an address from {type(value).__name__}")

    # Structure

    @property
    def kind_byte(self) -> int:
        """The leading byte that selects the address kind."""
        return self._bytes[0]

    @property
    def is_anonymous(self) -> bool:
        return self.kind_byte == ANONYMOUS_BYTE

    @property
    def is_public_key(self) -> bool:
        return self.kind_byte == PUBLIC_KEY_BYTE

    @property
    def is_subresource(self) -> bool:
        return bool(self.kind_byte & SUBRESOURCE_FLAG)

    @property
    def hash(self) -> Optional[bytes]:
        """The 28-byte key hash, None for the anonymous address."""
        if self.is_anonymous:
            return None
        return self._bytes[1:1 + HASH_SIZE]

    @property
    def subresource_id(self) -> Optional[int]:
        """Subresource id for subresource addresses, None otherwise."""
        if not self.is_subresource:
            return None
        high = self.kind_byte & 0x7F
        low = self._bytes[1 + HASH_SIZE:]
        return (high << 24) | (low[0] << 16) | (low[1] << 8) | low[2]

    def with_subresource(self, subresource_id: int) -> "Address":
        """Derive the subresource address with the given id from this address."""
        if self.is_anonymous:
            raise MalformedAddress("The anonymous address cannot have subresources")
        if not 0 <= subresource_id <= MAX_SUBRESOURCE_ID:
            raise MalformedAddress(f"Subresource id out of range: {subresource_id}")
        first = SUBRESOURCE_FLAG | ((subresource_id >> 24) & 0x7F)
        tail = bytes([(subresource_id >> 16) & 0xFF, (subresource_id >> 8) & 0xFF, subresource_id & 0xFF])
        return Address(bytes([first]) + self.hash + tail)

    # Conversions

    def to_bytes(self) -> bytes:
        return self._bytes

    def __bytes__(self) -> bytes:
        return self._bytes

    def to_string(self) -> str:
        if self.is_anonymous:
            return ANONYMOUS_TEXT
        return f"m{_b32(self._bytes)}{_checksum(self._bytes)}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Address('{self.to_string()}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Address):
            return self._bytes == other._bytes
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the Address."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
        )

    @classmethod
    def _validate(cls, value: Any, _info=None) -> "Address":
        """Validate and convert the input to an Address."""
        try:
            return cls.parse(value)
        except MalformedAddress as e:
            # pydantic reports ValueError as a validation failure
            raise ValueError(e.message) from e
