"""
MANY ledger client.

ManyClient turns call(method, args, options) into one round trip:
build_request -> Transport.send -> parse_response. Protocol modules such as
AccountModule depend only on that call contract.
"""

from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Union

from .account.module import AccountModule
from .codec.record import WireRecord
from .config import ClientConfig
from .envelope import build_request, parse_response
from .transport.base import CallOptions, Transport
from .transport.http import HttpTransport
from .tx.mapper import TransactionMapper


class ManyClient:
    """
    Client for a MANY ledger server.

    Example:
        ```python
        with ManyClient("http://localhost:8000") as client:
            info = client.account.info(Address.from_public_key_hash(key_hash))
            payload = client.call("ledger.info")
        ```
    """

    def __init__(self, config: Union[str, ClientConfig], transport: Optional[Transport] = None,
                 mapper: Optional[TransactionMapper] = None):
        """
        Initialize the client.

        Args:
            config: Either an endpoint URL string or a ClientConfig object
            transport: Transport to use instead of HTTP (tests, custom channels)
            mapper: Transaction mapper shared by the protocol modules
        """
        if isinstance(config, str):
            self.config = ClientConfig(endpoint=config)
        else:
            self.config = config

        self.logger = logging.getLogger(__name__)
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        self._owns_transport = transport is None
        self.transport = transport or HttpTransport(
            self.config.resolved_endpoint(),
            timeout=self.config.timeout,
            verify_ssl=self.config.verify_ssl,
            user_agent=self.config.user_agent,
        )
        self.account = AccountModule(self, mapper)

    def call(self, method: str, args: Optional[Mapping[int, Any]] = None,
             options: CallOptions = None) -> WireRecord:
        """
        Perform one method call.

        Args:
            method: Method name, e.g. "account.info"
            args: Integer-keyed argument record
            options: Per-call options handed to the transport untouched

        Returns:
            Payload record of the response (empty for no content)

        Raises:
            ValidationError: If the request cannot be built
            TransportError: If the transport fails
            ProtocolError: If the server answers with an error
            MalformedEncoding, DecodeError: If the response cannot be decoded
        """
        request = build_request(method, args)
        self.logger.debug(f"Calling {method}")
        response = self.transport.send(request, options)
        return parse_response(response)

    def close(self) -> None:
        """Close the transport if it was created by this client."""
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> ManyClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
