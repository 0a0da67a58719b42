"""
Transaction types for the MANY ledger.

Transaction kinds are identified on the wire by their event type index
(e.g. send is [6, 0]). The default table is immutable and is injected into
TransactionMapper; pass a different table to extend or restrict it.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field

from ..codec.record import WireRecord
from ..runtime.address import Address
from ..runtime.tables import EnumTable, UnknownValue


class LedgerTransactionType(str, Enum):
    """Transaction kinds with a parameter encoding in this client."""
    send = "send"


TRANSACTION_TYPES = EnumTable("TransactionType", [
    ("send", [6, 0]),
    ("kvStorePut", [7, 0]),
    ("kvStoreDisable", [7, 1]),
    ("accountCreate", [9, 0]),
    ("accountSetDescription", [9, 1]),
    ("accountAddRoles", [9, 2]),
    ("accountRemoveRoles", [9, 3]),
    ("accountDisable", [9, 4]),
    ("accountAddFeatures", [9, 5]),
    ("accountMultisigSubmit", [9, [1, 0]]),
    ("accountMultisigApprove", [9, [1, 1]]),
    ("accountMultisigRevoke", [9, [1, 2]]),
    ("accountMultisigExecute", [9, [1, 3]]),
    ("accountMultisigWithdraw", [9, [1, 4]]),
    ("accountMultisigSetDefaults", [9, [1, 5]]),
    ("accountMultisigExpired", [9, [1, 6]]),
])


class SendParams(BaseModel):
    """Parameters of a token send."""
    from_: Optional[Address] = Field(default=None, validation_alias=AliasChoices("from", "from_"))
    to: Address
    symbol: Address = Field(validation_alias=AliasChoices("symbol", "symbolAddress"))
    amount: int = Field(ge=0, description="Amount in the token's smallest unit")

    model_config = {"frozen": True}


@dataclass(frozen=True)
class SubmittedTransaction:
    """A transaction embedded in a multisig record, as decoded from the wire."""
    kind: Union[str, UnknownValue]
    params: Union[SendParams, WireRecord]

    @property
    def is_known(self) -> bool:
        return not isinstance(self.kind, UnknownValue)
