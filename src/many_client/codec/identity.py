"""
Identity codec: the single conversion point between Address and its tagged
wire form. Every party-reference field goes through these two functions.
"""

from typing import Any, Union

from ..runtime.address import Address
from ..runtime.errors import MalformedAddress, UnexpectedTag
from .values import TaggedValue

IDENTITY_TAG = 10000


def address_to_identity(address: Union[Address, str, bytes]) -> TaggedValue:
    """
    Wrap an address in the identity tag.

    Strings are parsed as textual addresses and bytes are validated, so a
    malformed party reference fails here rather than on the server.
    """
    return TaggedValue(IDENTITY_TAG, Address.parse(address).to_bytes())


def identity_to_address(value: Any) -> Address:
    """
    Unwrap a tagged identity.

    Raises:
        UnexpectedTag: If the value is not tagged with the identity tag
        MalformedAddress: If the inner value is not valid address bytes
    """
    if not isinstance(value, TaggedValue):
        raise UnexpectedTag(IDENTITY_TAG, None, details={"value": repr(value)})
    if value.tag != IDENTITY_TAG:
        raise UnexpectedTag(IDENTITY_TAG, value.tag)
    if not isinstance(value.value, (bytes, bytearray)):
        raise MalformedAddress(
            f"Identity must wrap a byte string, got {type(value.value).__name__}")
    return Address(value.value)
