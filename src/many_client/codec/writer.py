"""
CBOR Writer

Encodes the value model (see values.py) into RFC 8949 binary form. Maps keep
insertion order and every item is written with a definite length.
"""

import struct
from typing import Any, List

from ..runtime.errors import MarshalError
from .values import TaggedValue, SimpleValue, UNDEFINED

MAJOR_UINT = 0
MAJOR_NEGINT = 1
MAJOR_BYTES = 2
MAJOR_TEXT = 3
MAJOR_ARRAY = 4
MAJOR_MAP = 5
MAJOR_TAG = 6
MAJOR_SIMPLE = 7

TAG_POSITIVE_BIGNUM = 2
TAG_NEGATIVE_BIGNUM = 3

SIMPLE_FALSE = 20
SIMPLE_TRUE = 21
SIMPLE_NULL = 22
SIMPLE_UNDEFINED = 23

MAX_DEPTH = 256

_UINT64_LIMIT = 1 << 64


class CborWriter:
    """
    Binary writer producing CBOR items.

    Primitive writers (head, uint, text, ...) append to an internal buffer;
    write() dispatches on the Python type of a value.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def u8(self, v: int) -> None:
        """Write unsigned 8-bit integer."""
        self._bb.append(v & 0xFF)

    def raw(self, v: bytes) -> None:
        """Write raw bytes without any header."""
        self._bb.extend(v)

    def head(self, major: int, arg: int) -> None:
        """
        Write an item head: major type plus its argument in the shortest form.

        Args:
            major: Major type (0-7)
            arg: Unsigned argument (length, value or tag number)
        """
        initial = major << 5
        if arg < 24:
            self.u8(initial | arg)
        elif arg <= 0xFF:
            self.u8(initial | 24)
            self.u8(arg)
        elif arg <= 0xFFFF:
            self.u8(initial | 25)
            self.raw(struct.pack(">H", arg))
        elif arg <= 0xFFFFFFFF:
            self.u8(initial | 26)
            self.raw(struct.pack(">I", arg))
        else:
            self.u8(initial | 27)
            self.raw(struct.pack(">Q", arg))

    def integer(self, v: int) -> None:
        """
        Write an integer of any magnitude.

        Values outside the 64-bit range are written as bignums (tags 2 and 3)
        so that sign and exact magnitude survive.
        """
        if 0 <= v < _UINT64_LIMIT:
            self.head(MAJOR_UINT, v)
        elif -_UINT64_LIMIT <= v < 0:
            self.head(MAJOR_NEGINT, -1 - v)
        elif v > 0:
            self.head(MAJOR_TAG, TAG_POSITIVE_BIGNUM)
            self.byte_string(v.to_bytes((v.bit_length() + 7) // 8, "big"))
        else:
            n = -1 - v
            self.head(MAJOR_TAG, TAG_NEGATIVE_BIGNUM)
            self.byte_string(n.to_bytes((n.bit_length() + 7) // 8, "big"))

    def byte_string(self, v: bytes) -> None:
        """Write a byte string with its length."""
        self.head(MAJOR_BYTES, len(v))
        self.raw(v)

    def text(self, s: str) -> None:
        """Write a UTF-8 text string with its length."""
        try:
            encoded = s.encode("utf-8")
        except UnicodeEncodeError as e:
            raise MarshalError(f"Text is not encodable as UTF-8: {s!r}", cause=e)
        self.head(MAJOR_TEXT, len(encoded))
        self.raw(encoded)

    def boolean(self, v: bool) -> None:
        self.u8((MAJOR_SIMPLE << 5) | (SIMPLE_TRUE if v else SIMPLE_FALSE))

    def null(self) -> None:
        self.u8((MAJOR_SIMPLE << 5) | SIMPLE_NULL)

    def undefined(self) -> None:
        self.u8((MAJOR_SIMPLE << 5) | SIMPLE_UNDEFINED)

    def simple(self, v: SimpleValue) -> None:
        if v.value < 24:
            self.u8((MAJOR_SIMPLE << 5) | v.value)
        else:
            self.u8((MAJOR_SIMPLE << 5) | 24)
            self.u8(v.value)

    def double(self, v: float) -> None:
        """Write a float as an IEEE 754 double."""
        self.u8((MAJOR_SIMPLE << 5) | 27)
        self.raw(struct.pack(">d", v))

    def write(self, value: Any, depth: int = 0) -> None:
        """
        Write any supported value.

        Raises:
            MarshalError: If the value (or something nested in it) has no
                wire representation
        """
        if depth > MAX_DEPTH:
            raise MarshalError(f"Value nested deeper than {MAX_DEPTH} levels")

        # bool is a subclass of int and must be checked first
        if value is None:
            self.null()
        elif value is UNDEFINED:
            self.undefined()
        elif isinstance(value, bool):
            self.boolean(value)
        elif isinstance(value, int):
            self.integer(value)
        elif isinstance(value, float):
            self.double(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.byte_string(bytes(value))
        elif isinstance(value, str):
            self.text(value)
        elif isinstance(value, (list, tuple)):
            self.head(MAJOR_ARRAY, len(value))
            for item in value:
                self.write(item, depth + 1)
        elif isinstance(value, dict):
            self.head(MAJOR_MAP, len(value))
            for key, item in value.items():
                self.write(key, depth + 1)
                self.write(item, depth + 1)
        elif isinstance(value, TaggedValue):
            if value.tag >= _UINT64_LIMIT:
                raise MarshalError(f"Tag number out of range: {value.tag}")
            if value.tag in (TAG_POSITIVE_BIGNUM, TAG_NEGATIVE_BIGNUM):
                raise MarshalError(f"Bignum tag {value.tag} is written from int values only")
            self.head(MAJOR_TAG, value.tag)
            self.write(value.value, depth + 1)
        elif isinstance(value, SimpleValue):
            self.simple(value)
        else:
            raise MarshalError(f"Cannot encode value of type {type(value).__name__}")

    def to_bytes(self) -> bytes:
        """Return accumulated bytes as immutable bytes object."""
        return bytes(self._bb)


def encode(value: Any) -> bytes:
    """Encode a value to bytes."""
    writer = CborWriter()
    writer.write(value)
    return writer.to_bytes()
