"""
MANY Binary Codec Module

Tagged binary (CBOR, RFC 8949) encoding for the MANY ledger protocol.

Key components:
- writer.py / reader.py: CBOR encoding and decoding of the value model
- values.py: TaggedValue, SimpleValue and UNDEFINED
- identity.py: Address <-> identity-tagged value (tag 10000)
- tags.py: interpretation of identity/timestamp/unknown tags
- record.py: WireRecord, the integer-keyed argument/result container
"""

from .values import TaggedValue, SimpleValue, UNDEFINED
from .writer import CborWriter, encode
from .reader import CborReader, decode
from .identity import IDENTITY_TAG, address_to_identity, identity_to_address
from .tags import (
    TIMESTAMP_TAG, Identity, Timestamp, UnknownTag, interpret_tag, decode_timestamp,
)
from .record import WireRecord, FieldState, FieldResult

__all__ = [
    "TaggedValue",
    "SimpleValue",
    "UNDEFINED",
    "CborWriter",
    "CborReader",
    "encode",
    "decode",
    "IDENTITY_TAG",
    "address_to_identity",
    "identity_to_address",
    "TIMESTAMP_TAG",
    "Identity",
    "Timestamp",
    "UnknownTag",
    "interpret_tag",
    "decode_timestamp",
    "WireRecord",
    "FieldState",
    "FieldResult",
]
