r"""
Transaction mapper: typed transaction parameters <-> numeric-keyed records.

Submitted transaction record:   {0: type index, 1: params}
Send params record:             {0: from?, 1: to, 2: amount, 3: symbol}

Every address goes through the identity codec in both directions.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Mapping, Union

import pydantic

from ..codec.identity import address_to_identity, identity_to_address
from ..codec.record import WireRecord
from ..runtime.errors import DecodeError, UnsupportedTransactionKind, ValidationError
from ..runtime.tables import EnumTable, UnknownValue
from .types import TRANSACTION_TYPES, SendParams, SubmittedTransaction

logger = logging.getLogger(__name__)

TXN_TYPE = 0
TXN_PARAMS = 1

SEND_FROM = 0
SEND_TO = 1
SEND_AMOUNT = 2
SEND_SYMBOL = 3


def _kind_name(kind: Any) -> Any:
    return getattr(kind, "value", kind)


def decode_amount(value: Any) -> int:
    """
    Token amount from its wire form.

    Requests carry a plain integer (or a bignum, already an int once decoded);
    responses may carry the magnitude as a big-endian byte string.
    """
    if isinstance(value, (bytes, bytearray)):
        if not value:
            raise DecodeError("Amount byte string is empty")
        return int.from_bytes(value, "big")
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Amount must be an integer, got {type(value).__name__}")
    if value < 0:
        raise DecodeError(f"Amount cannot be negative: {value}")
    return value


class TransactionMapper:
    """
    Encodes and decodes transaction parameters using an injected type table.

    Only kinds that are both in the table and have a parameter codec can be
    encoded; unknown kinds on the wire decode to an UnknownValue kind with
    the raw parameter record.
    """

    def __init__(self, table: EnumTable = TRANSACTION_TYPES):
        self._table = table
        self._encoders: Dict[str, Callable[[Any], WireRecord]] = {
            "send": self.build_send_params,
        }
        self._decoders: Dict[str, Callable[[Any], Any]] = {
            "send": self.decode_send_params,
        }

    @property
    def table(self) -> EnumTable:
        return self._table

    def supports(self, kind: Any) -> bool:
        name = _kind_name(kind)
        return name in self._table and name in self._encoders

    # Encoding

    def build_send_params(self, data: Union[SendParams, Mapping[str, Any]]) -> WireRecord:
        """
        Map send parameters to their record.

        Raises:
            ValidationError: If a field is missing, an address is invalid, or
                the amount is negative
        """
        params = self.validate_send_params(data)
        record = WireRecord()
        if params.from_ is not None:
            record[SEND_FROM] = address_to_identity(params.from_)
        record[SEND_TO] = address_to_identity(params.to)
        record[SEND_AMOUNT] = params.amount
        record[SEND_SYMBOL] = address_to_identity(params.symbol)
        return record

    @staticmethod
    def validate_send_params(data: Union[SendParams, Mapping[str, Any]]) -> SendParams:
        if isinstance(data, SendParams):
            return data
        try:
            return SendParams.model_validate(dict(data))
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid send parameters: {e.error_count()} error(s)",
                                  details={"errors": e.errors(include_url=False)}, cause=e)

    def build_submitted_txn(self, kind: Any, data: Any) -> WireRecord:
        """
        Map a transaction of the given kind to {0: type index, 1: params}.

        Raises:
            UnsupportedTransactionKind: If the kind has no table entry or no
                parameter encoding; nothing is encoded in that case
        """
        name = _kind_name(kind)
        if not self.supports(name):
            raise UnsupportedTransactionKind(name)
        index = self._table.value_of(name)
        params = self._encoders[name](data)
        logger.debug(f"Built {name} transaction with type index {index}")
        return WireRecord({TXN_TYPE: index, TXN_PARAMS: params})

    # Decoding

    def decode_send_params(self, value: Any) -> SendParams:
        """
        Rebuild send parameters from their record.

        Raises:
            MissingField: If to, amount or symbol is absent
            UnexpectedTag, MalformedAddress: If an address field is invalid
            DecodeError: If the amount is not a non-negative integer
        """
        record = WireRecord.from_value(value, "send parameters")
        return SendParams(
            from_=record.optional(SEND_FROM, identity_to_address, name="from"),
            to=record.require(SEND_TO, identity_to_address, name="to"),
            amount=record.require(SEND_AMOUNT, decode_amount, name="amount"),
            symbol=record.require(SEND_SYMBOL, identity_to_address, name="symbol"),
        )

    def decode_submitted_txn(self, value: Any) -> SubmittedTransaction:
        """
        Rebuild a submitted transaction.

        An unknown type index is not an error: the kind comes back as an
        UnknownValue and the params as the raw record.
        """
        record = WireRecord.from_value(value, "transaction")
        kind = self._table.decode(record.require(TXN_TYPE, name="transaction type"))
        raw_params = record.require(TXN_PARAMS, name="transaction parameters")

        if isinstance(kind, UnknownValue) or kind not in self._decoders:
            return SubmittedTransaction(kind, WireRecord.from_value(raw_params, "transaction parameters"))
        return SubmittedTransaction(kind, self._decoders[kind](raw_params))
