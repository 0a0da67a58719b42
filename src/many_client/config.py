"""
Client configuration.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

# Well-known endpoints, resolved case-insensitively
WELL_KNOWN_ENDPOINTS: Dict[str, str] = {
    "local": "http://127.0.0.1:8000",
}


@dataclass
class ClientConfig:
    """Configuration for the MANY ledger client."""

    endpoint: str
    timeout: float = 30.0
    debug: bool = False
    verify_ssl: bool = True
    user_agent: str = "many-ledger-client-python/0.1.0"

    def resolved_endpoint(self) -> str:
        """Endpoint URL, with well-known aliases expanded."""
        return WELL_KNOWN_ENDPOINTS.get(self.endpoint.lower(), self.endpoint)
