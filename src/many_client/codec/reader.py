"""
CBOR Reader

Decodes RFC 8949 binary items into the value model (see values.py). Both
definite and indefinite lengths are accepted. Any truncated or structurally
invalid input raises MalformedEncoding; no default is ever substituted.
"""

import struct
from typing import Any

from ..runtime.errors import MalformedEncoding
from .values import TaggedValue, SimpleValue, UNDEFINED
from .writer import (
    MAJOR_UINT, MAJOR_NEGINT, MAJOR_BYTES, MAJOR_TEXT, MAJOR_ARRAY, MAJOR_MAP,
    MAJOR_TAG, MAX_DEPTH, TAG_POSITIVE_BIGNUM, TAG_NEGATIVE_BIGNUM,
)

INDEFINITE = 31
BREAK = 0xFF

_BREAK = object()


def _hashable(value: Any) -> Any:
    """Map keys must be hashable: arrays become tuples, maps are rejected."""
    if isinstance(value, list):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, dict):
        raise MalformedEncoding("Map keys cannot be maps")
    if isinstance(value, TaggedValue):
        return TaggedValue(value.tag, _hashable(value.value))
    return value


class CborReader:
    """
    Binary reader for CBOR items.

    Keeps a cursor into the buffer; read() consumes exactly one item.
    Maps decode to dicts, so keys that Python treats as equal (1, 1.0 and
    True) cannot share a map and are rejected as a key collision.
    """

    def __init__(self, buf: bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = bytes(buf)
        self._off = 0

    @property
    def eof(self) -> bool:
        """True when the whole buffer has been consumed."""
        return self._off >= len(self._buf)

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    def u8(self) -> int:
        """Read unsigned 8-bit integer."""
        if self._off >= len(self._buf):
            raise MalformedEncoding("Truncated input: attempting to read beyond end",
                                    details={"offset": self._off})
        val = self._buf[self._off]
        self._off += 1
        return val

    def take(self, n: int) -> bytes:
        """Read n bytes from buffer."""
        if n > self.remaining:
            raise MalformedEncoding(f"Truncated input: need {n} bytes, {self.remaining} left",
                                    details={"offset": self._off})
        out = self._buf[self._off:self._off + n]
        self._off += n
        return out

    def argument(self, info: int) -> int:
        """Read the argument that follows an initial byte with the given additional info."""
        if info < 24:
            return info
        if info == 24:
            return self.u8()
        if info == 25:
            return struct.unpack(">H", self.take(2))[0]
        if info == 26:
            return struct.unpack(">I", self.take(4))[0]
        if info == 27:
            return struct.unpack(">Q", self.take(8))[0]
        raise MalformedEncoding(f"Reserved additional information value {info}",
                                details={"offset": self._off - 1})

    def read(self, depth: int = 0) -> Any:
        """
        Read one complete item.

        Raises:
            MalformedEncoding: On truncated or invalid input
        """
        item = self._read_item(depth, allow_break=False)
        return item

    def _read_item(self, depth: int, allow_break: bool) -> Any:
        if depth > MAX_DEPTH:
            raise MalformedEncoding(f"Input nested deeper than {MAX_DEPTH} levels")

        initial = self.u8()
        if initial == BREAK:
            if allow_break:
                return _BREAK
            raise MalformedEncoding("Unexpected break code", details={"offset": self._off - 1})

        major, info = initial >> 5, initial & 0x1F

        if major == 7:
            return self._read_simple(info)

        if info == INDEFINITE:
            return self._read_indefinite(major, depth)

        arg = self.argument(info)

        if major == MAJOR_UINT:
            return arg
        if major == MAJOR_NEGINT:
            return -1 - arg
        if major == MAJOR_BYTES:
            return self.take(arg)
        if major == MAJOR_TEXT:
            return self._decode_text(self.take(arg))
        if major == MAJOR_ARRAY:
            self._check_count(arg)
            return [self._read_item(depth + 1, False) for _ in range(arg)]
        if major == MAJOR_MAP:
            self._check_count(arg * 2)
            result = {}
            for _ in range(arg):
                self._read_pair(result, depth)
            return result
        # MAJOR_TAG
        return self._read_tagged(arg, depth)

    def _read_simple(self, info: int) -> Any:
        if info < 20:
            return SimpleValue(info)
        if info == 20:
            return False
        if info == 21:
            return True
        if info == 22:
            return None
        if info == 23:
            return UNDEFINED
        if info == 24:
            value = self.u8()
            if value < 32:
                raise MalformedEncoding(f"Invalid two-byte simple value {value}")
            return SimpleValue(value)
        if info == 25:
            return struct.unpack(">e", self.take(2))[0]
        if info == 26:
            return struct.unpack(">f", self.take(4))[0]
        if info == 27:
            return struct.unpack(">d", self.take(8))[0]
        raise MalformedEncoding(f"Reserved simple value encoding {info}",
                                details={"offset": self._off - 1})

    def _read_indefinite(self, major: int, depth: int) -> Any:
        if major in (MAJOR_BYTES, MAJOR_TEXT):
            chunks = []
            while True:
                initial = self.u8()
                if initial == BREAK:
                    break
                if initial >> 5 != major or initial & 0x1F == INDEFINITE:
                    raise MalformedEncoding("Invalid chunk inside indefinite-length string")
                chunks.append(self.take(self.argument(initial & 0x1F)))
            joined = b"".join(chunks)
            return joined if major == MAJOR_BYTES else self._decode_text(joined)

        if major == MAJOR_ARRAY:
            items = []
            while True:
                item = self._read_item(depth + 1, allow_break=True)
                if item is _BREAK:
                    return items
                items.append(item)

        if major == MAJOR_MAP:
            result = {}
            while not self._at_break():
                self._read_pair(result, depth)
            self.u8()
            return result

        raise MalformedEncoding(f"Major type {major} cannot have an indefinite length")

    def _at_break(self) -> bool:
        if self.eof:
            raise MalformedEncoding("Truncated input: missing break code")
        return self._buf[self._off] == BREAK

    def _read_pair(self, result: dict, depth: int) -> None:
        key = _hashable(self._read_item(depth + 1, False))
        value = self._read_item(depth + 1, False)
        try:
            duplicate = key in result
        except TypeError as e:
            raise MalformedEncoding(f"Unhashable map key {key!r}", cause=e)
        if duplicate:
            existing = next(k for k in result if k == key)
            # 1, 1.0 and True are distinct CBOR keys but one dict key
            if type(existing) is not type(key):
                raise MalformedEncoding(
                    f"Map keys {existing!r} and {key!r} collide as dict keys",
                    details={"reason": "key_collision"})
            raise MalformedEncoding(f"Duplicate map key {key!r}")
        result[key] = value

    def _read_tagged(self, tag: int, depth: int) -> Any:
        inner = self._read_item(depth + 1, False)
        if tag in (TAG_POSITIVE_BIGNUM, TAG_NEGATIVE_BIGNUM):
            if not isinstance(inner, bytes):
                raise MalformedEncoding(f"Bignum tag {tag} must wrap a byte string")
            magnitude = int.from_bytes(inner, "big")
            return magnitude if tag == TAG_POSITIVE_BIGNUM else -1 - magnitude
        return TaggedValue(tag, inner)

    def _check_count(self, items: int) -> None:
        # every item needs at least one byte
        if items > self.remaining:
            raise MalformedEncoding(f"Truncated input: {items} items announced, "
                                    f"{self.remaining} bytes left")

    @staticmethod
    def _decode_text(data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEncoding("Invalid UTF-8 in text string", cause=e)


def decode(data: bytes) -> Any:
    """
    Decode exactly one item from data.

    Raises:
        MalformedEncoding: On truncated, invalid, or trailing input
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedEncoding(f"Cannot decode {type(data).__name__}, expected bytes")
    reader = CborReader(data)
    value = reader.read()
    if not reader.eof:
        raise MalformedEncoding(f"{reader.remaining} trailing bytes after item")
    return value
