"""
Transaction builders for the MANY ledger.
"""

from typing import Dict, Type

from .base import BaseTxBuilder, BuilderError
from .tokens import SendBuilder

BUILDER_REGISTRY: Dict[str, Type[BaseTxBuilder]] = {
    "send": SendBuilder,
}


def get_builder_for(kind: str) -> BaseTxBuilder:
    """New builder instance for a transaction kind."""
    try:
        return BUILDER_REGISTRY[kind]()
    except KeyError:
        raise BuilderError(f"No builder for transaction kind: {kind}")


__all__ = [
    "BaseTxBuilder",
    "BuilderError",
    "SendBuilder",
    "BUILDER_REGISTRY",
    "get_builder_for",
]
