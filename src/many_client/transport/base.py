"""
Transport contracts.

Transport moves encoded bytes; Caller is the method-level contract the
protocol modules depend on (ManyClient implements it on top of a Transport).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol

from ..codec.record import WireRecord

CallOptions = Optional[Mapping[str, Any]]


class Transport(ABC):
    """Delivers an encoded request and returns the encoded response."""

    @abstractmethod
    def send(self, payload: bytes, options: CallOptions = None) -> bytes:
        """
        Send one request.

        Args:
            payload: Encoded request envelope
            options: Per-call options, passed through untouched by the client

        Returns:
            Encoded response (may be empty for no content)

        Raises:
            TransportError: If the request could not be delivered
        """

    def close(self) -> None:
        """Release resources held by the transport."""


class Caller(Protocol):
    """Anything that can perform call(method, args, options) -> payload record."""

    def call(self, method: str, args: Optional[Mapping[int, Any]] = None,
             options: CallOptions = None) -> WireRecord:
        ...
