"""
MANY Client Error Model

This module provides the error handling framework for the MANY ledger client.
Every error raised by the library derives from ManyClientError; errors reported
by the remote service surface as ProtocolError with their wire code untouched.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Union
from enum import IntEnum
import re


class ErrorCode(IntEnum):
    """Local error codes used by the client library."""

    UNKNOWN = 1

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    MALFORMED_ENCODING = 101
    MARSHAL_ERROR = 102
    UNEXPECTED_TAG = 103
    MALFORMED_ADDRESS = 104

    # Decoding errors (200-299)
    DECODE_ERROR = 200
    MISSING_FIELD = 201

    # Validation errors (300-399)
    INVALID_PARAMETER = 300
    UNSUPPORTED_TRANSACTION_KIND = 301
    UNKNOWN_ENUMERATOR = 302

    # Remote and transport errors (400-499)
    PROTOCOL_ERROR = 400
    TRANSPORT_ERROR = 401


class ManyClientError(Exception):
    """
    Base class for all client errors.

    Carries a message, a code, optional structured details and the
    underlying exception that caused it.
    """

    def __init__(self, message: str, code: Union[ErrorCode, int] = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        label = self.code.name if isinstance(self.code, ErrorCode) else str(self.code)
        parts = [f"[{label}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": int(self.code),
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class EncodingError(ManyClientError):
    """Value encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class MalformedEncoding(EncodingError):
    """Truncated or structurally invalid binary input."""

    def __init__(self, message: str = "Malformed encoding",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.MALFORMED_ENCODING, details, cause)


class MarshalError(EncodingError):
    """A Python value has no wire representation."""

    def __init__(self, message: str = "Marshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.MARSHAL_ERROR, details, cause)


class UnexpectedTag(EncodingError):
    """A tagged value carries a different tag than the one required."""

    def __init__(self, expected: int, actual: Optional[int],
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        if actual is None:
            message = f"Expected a value tagged {expected}, got an untagged value"
        else:
            message = f"Expected tag {expected}, got tag {actual}"
        super().__init__(message, ErrorCode.UNEXPECTED_TAG, details, cause)
        self.expected = expected
        self.actual = actual


class MalformedAddress(EncodingError):
    """Address bytes or text do not satisfy the address layout."""

    def __init__(self, message: str = "Malformed address",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.MALFORMED_ADDRESS, details, cause)


class DecodeError(ManyClientError):
    """A decoded record does not have the shape a response schema requires."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class MissingField(DecodeError):
    """A required field index is absent from a record."""

    def __init__(self, index: int, name: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        label = f"{name} (field {index})" if name else f"field {index}"
        super().__init__(f"Missing required {label}", ErrorCode.MISSING_FIELD, details)
        self.index = index
        self.name = name


class ValidationError(ManyClientError):
    """Invalid arguments supplied by the caller."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_PARAMETER,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class UnsupportedTransactionKind(ValidationError):
    """The transaction kind has no entry in the transaction type table."""

    def __init__(self, kind: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Transaction type not supported: {kind}",
                         ErrorCode.UNSUPPORTED_TRANSACTION_KIND, details)
        self.kind = kind


class UnknownEnumerator(ValidationError):
    """A value falls outside an enumeration table."""

    def __init__(self, table: str, value: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Unknown {table} value: {value!r}",
                         ErrorCode.UNKNOWN_ENUMERATOR, details)
        self.table = table
        self.value = value


_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class ProtocolError(ManyClientError):
    """
    Error reported by the remote service.

    The code is the remote code and is kept opaque. The message is the
    verbatim message template; str() substitutes {name} placeholders from
    the error arguments.
    """

    def __init__(self, code: int, message: str, arguments: Optional[Dict[str, str]] = None):
        super().__init__(message, code)
        self.arguments = dict(arguments or {})

    @property
    def rendered(self) -> str:
        """Message with its {name} placeholders filled from the arguments."""
        return _PLACEHOLDER.sub(lambda m: self.arguments.get(m.group(1), m.group(0)), self.message)

    def __str__(self) -> str:
        return f"ProtocolError({self.code}): {self.rendered}"

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.arguments:
            result["arguments"] = self.arguments
        return result


class TransportError(ManyClientError):
    """The transport failed to deliver a request or return a response."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR, details, cause)


__all__ = [
    "ErrorCode",
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
]
