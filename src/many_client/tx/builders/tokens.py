"""
Token transaction builders.
"""

from __future__ import annotations
from typing import Union

from ...runtime.address import Address
from ..types import SendParams
from .base import BaseTxBuilder

AddressLike = Union[str, bytes, Address]


class SendBuilder(BaseTxBuilder[SendParams]):
    """Builder for send transactions."""

    @property
    def tx_kind(self) -> str:
        return "send"

    @property
    def params_cls(self):
        return SendParams

    def from_(self, address: AddressLike) -> SendBuilder:
        """Set the source account."""
        return self.with_field("from", address)

    def to(self, address: AddressLike) -> SendBuilder:
        """Set the recipient."""
        return self.with_field("to", address)

    def symbol(self, address: AddressLike) -> SendBuilder:
        """Set the token symbol address."""
        return self.with_field("symbol", address)

    def amount(self, amount: int) -> SendBuilder:
        """Set the amount to send (in token base units)."""
        return self.with_field("amount", amount)


__all__ = ["SendBuilder"]
