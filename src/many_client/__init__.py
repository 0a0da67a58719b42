"""
MANY Ledger Python Client

Client for MANY protocol ledger servers: tagged binary codec, request and
response envelopes, transaction mapping and the account/multisig methods.
"""

__version__ = "0.1.0"

from .runtime.address import Address
from .runtime.errors import (
    ManyClientError,
    EncodingError,
    MalformedEncoding,
    MarshalError,
    UnexpectedTag,
    MalformedAddress,
    DecodeError,
    MissingField,
    ValidationError,
    UnsupportedTransactionKind,
    UnknownEnumerator,
    ProtocolError,
    TransportError,
)
from .codec import WireRecord, TaggedValue, encode, decode, address_to_identity, identity_to_address
from .envelope import build_request, parse_response
from .tx import TransactionMapper, SendParams, SendBuilder
from .account import AccountModule, AccountFeature, MultisigTransactionInfo
from .config import ClientConfig
from .transport import Transport, HttpTransport
from .client import ManyClient

__all__ = [
    "__version__",
    "Address",
    "ManyClientError",
    "EncodingError",
    "MalformedEncoding",
    "MarshalError",
    "UnexpectedTag",
    "MalformedAddress",
    "DecodeError",
    "MissingField",
    "ValidationError",
    "UnsupportedTransactionKind",
    "UnknownEnumerator",
    "ProtocolError",
    "TransportError",
    "WireRecord",
    "TaggedValue",
    "encode",
    "decode",
    "address_to_identity",
    "identity_to_address",
    "build_request",
    "parse_response",
    "TransactionMapper",
    "SendParams",
    "SendBuilder",
    "AccountModule",
    "AccountFeature",
    "MultisigTransactionInfo",
    "ClientConfig",
    "Transport",
    "HttpTransport",
    "ManyClient",
]
