"""
Transaction types, mapping and builders.
"""

from .types import TRANSACTION_TYPES, LedgerTransactionType, SendParams, SubmittedTransaction
from .mapper import TransactionMapper, decode_amount
from .builders import SendBuilder, get_builder_for

__all__ = [
    "TRANSACTION_TYPES",
    "LedgerTransactionType",
    "SendParams",
    "SubmittedTransaction",
    "TransactionMapper",
    "decode_amount",
    "SendBuilder",
    "get_builder_for",
]
