"""Transports for the MANY ledger client"""

from .base import CallOptions, Caller, Transport
from .http import HttpTransport

__all__ = [
    "CallOptions",
    "Caller",
    "Transport",
    "HttpTransport",
]
