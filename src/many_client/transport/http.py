"""
HTTP transport: one POST per call with the encoded envelope as the body.
"""

from __future__ import annotations
import logging
from typing import Optional

import requests

from ..runtime.errors import TransportError
from .base import CallOptions, Transport

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/cbor"


class HttpTransport(Transport):
    """
    Transport over HTTP(S) using requests.

    Example:
        ```python
        with HttpTransport("http://localhost:8000") as transport:
            raw = transport.send(build_request("account.info", {0: identity}))
        ```
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the transport.

        Args:
            endpoint: Server URL
            timeout: Request timeout in seconds (default: 30)
            session: Optional requests.Session for connection pooling
            verify_ssl: Verify TLS certificates
            user_agent: Value of the User-Agent header
        """
        self._endpoint = endpoint.rstrip('/')
        self._timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._verify_ssl = verify_ssl
        self._headers = {"Content-Type": CONTENT_TYPE, "Accept": CONTENT_TYPE}
        if user_agent:
            self._headers["User-Agent"] = user_agent

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def send(self, payload: bytes, options: CallOptions = None) -> bytes:
        """
        POST the request and return the raw response body.

        A "timeout" entry in options overrides the default timeout.

        Raises:
            TransportError: On connection failures and non-2xx statuses
        """
        timeout = self._timeout
        if options and options.get("timeout") is not None:
            timeout = options["timeout"]

        try:
            response = self._session.post(
                self._endpoint,
                data=payload,
                headers=self._headers,
                timeout=timeout,
                verify=self._verify_ssl,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", cause=e)

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason}",
                details={"status": response.status_code, "endpoint": self._endpoint},
            )

        logger.debug(f"POST {self._endpoint}: {len(payload)} bytes sent, "
                     f"{len(response.content)} bytes received")
        return response.content

    def close(self) -> None:
        """Close the HTTP session if owned by this transport."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
