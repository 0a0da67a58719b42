"""
Shared fixtures for the MANY ledger client tests.
"""

from unittest.mock import Mock

import pytest

from many_client.account import AccountModule
from many_client.client import ManyClient
from many_client.codec import WireRecord
from many_client.tx import TransactionMapper

from helpers import MockTransport, mk_address


@pytest.fixture
def mapper():
    """Transaction mapper with the default type table."""
    return TransactionMapper()


@pytest.fixture
def caller():
    """Mock caller whose call() returns an empty payload record."""
    mock = Mock()
    mock.call.return_value = WireRecord()
    return mock


@pytest.fixture
def account(caller):
    """AccountModule wired to the mock caller."""
    return AccountModule(caller)


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def client(transport):
    """ManyClient over a MockTransport."""
    with ManyClient("http://localhost:8000", transport=transport) as c:
        yield c


@pytest.fixture
def alice():
    return mk_address(1)


@pytest.fixture
def bob():
    return mk_address(2)
