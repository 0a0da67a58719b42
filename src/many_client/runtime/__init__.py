"""Runtime helpers for the MANY ledger client"""

from .address import Address
from .errors import ManyClientError
from .tables import EnumTable, UnknownValue

__all__ = [
    "Address",
    "ManyClientError",
    "EnumTable",
    "UnknownValue",
]
