"""
Request/response envelope.

A request is the two-element array [method, args]. A response is a record
whose field 4 is the result slot:

- an error sub-record {0: code, 1: message, 2: arguments} means failure, and
  every other field of the response is ignored;
- a byte string carries the CBOR-encoded payload record (null or empty
  means no content);
- otherwise the record itself is the payload.

The presence of the error sub-record is the only success/failure signal.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .codec import WireRecord, decode, encode
from .codec.values import UNDEFINED
from .runtime.errors import DecodeError, MalformedEncoding, ProtocolError, ValidationError

logger = logging.getLogger(__name__)

RESULT_FIELD = 4

ERROR_CODE = 0
ERROR_MESSAGE = 1
ERROR_ARGUMENTS = 2


def build_request(method: str, args: Optional[Mapping[int, Any]] = None) -> bytes:
    """
    Serialize a method call.

    Args:
        method: Method name, e.g. "account.multisigInfo"
        args: Integer-keyed arguments (None for no arguments)

    Returns:
        Encoded request bytes

    Raises:
        ValidationError: If the method name or argument keys are invalid
    """
    if not isinstance(method, str) or not method:
        raise ValidationError(f"Method name must be a non-empty string, got {method!r}")
    try:
        record = WireRecord.from_value(args, "arguments")
    except DecodeError as e:
        raise ValidationError(f"Invalid arguments for {method}: {e.message}", cause=e)

    payload = encode([method, record])
    logger.debug(f"Request {method}: {len(record)} fields, {len(payload)} bytes")
    return payload


def parse_request(data: bytes) -> Tuple[str, WireRecord]:
    """
    Decode a serialized request back into (method, args).

    Raises:
        MalformedEncoding: If the bytes are not a [method, args] pair
    """
    value = decode(data)
    if not isinstance(value, list) or len(value) != 2 or not isinstance(value[0], str):
        raise MalformedEncoding("Request must be a [method, args] array")
    try:
        return value[0], WireRecord.from_value(value[1], "arguments")
    except DecodeError as e:
        raise MalformedEncoding(f"Invalid request arguments: {e.message}", cause=e)


def build_response(payload: Optional[Mapping[int, Any]] = None) -> bytes:
    """Encode a success response carrying payload in its result slot."""
    inner = b"" if payload is None else encode(WireRecord.from_value(payload, "payload"))
    return encode(WireRecord({RESULT_FIELD: inner}))


def build_error_response(code: int, message: str,
                         arguments: Optional[Dict[str, str]] = None) -> bytes:
    """Encode an error response."""
    error = WireRecord({ERROR_CODE: code, ERROR_MESSAGE: message})
    if arguments:
        error[ERROR_ARGUMENTS] = dict(arguments)
    return encode(WireRecord({RESULT_FIELD: error}))


def error_from_record(value: Any) -> ProtocolError:
    """
    Build the ProtocolError described by an error sub-record.

    Raises:
        DecodeError: If the sub-record has no integer code or a non-text message
    """
    error = WireRecord.from_value(value, "error")
    code = error.require(ERROR_CODE, name="error code")
    if isinstance(code, bool) or not isinstance(code, int):
        raise DecodeError(f"Error code must be an integer, got {code!r}")

    message = error.optional(ERROR_MESSAGE, name="error message", default="")
    if not isinstance(message, str):
        raise DecodeError(f"Error message must be text, got {type(message).__name__}")

    arguments = error.optional(ERROR_ARGUMENTS, name="error arguments", default={})
    if not isinstance(arguments, dict):
        raise DecodeError("Error arguments must be a map")
    return ProtocolError(code, message, {str(k): str(v) for k, v in arguments.items()})


def parse_response(data: Optional[bytes]) -> WireRecord:
    """
    Decode a response into its payload record.

    Args:
        data: Encoded response (None or b"" mean no content)

    Returns:
        Payload record, possibly empty

    Raises:
        ProtocolError: If the response carries an error sub-record
        MalformedEncoding: If the bytes cannot be decoded
        DecodeError: If the response is not a record
    """
    if not data:
        return WireRecord()

    value = decode(data)
    if value is None or value is UNDEFINED:
        return WireRecord()

    response = WireRecord.from_value(value, "response")
    result = response.get(RESULT_FIELD)

    if isinstance(result, dict):
        error = error_from_record(result)
        logger.debug(f"Response error {error.code}: {error.message}")
        raise error

    if isinstance(result, (bytes, bytearray)):
        inner = decode(result) if result else None
        payload = WireRecord.from_value(inner, "payload")
    else:
        payload = response

    logger.debug(f"Response payload: {len(payload)} fields")
    return payload
