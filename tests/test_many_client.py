"""
Unit tests for ManyClient: one call is one build/send/parse round trip.
"""

import logging

import pytest

from many_client import ManyClient, __version__
from many_client.client import ManyClient as ClientClass
from many_client.codec import WireRecord, encode
from many_client.config import ClientConfig
from many_client.envelope import build_error_response, build_response
from many_client.runtime.errors import MalformedEncoding, ProtocolError, TransportError
from many_client.transport import HttpTransport, Transport

from helpers import mk_address, mk_identity, mk_multisig_info_payload, mk_send_data

pytestmark = pytest.mark.unit


class TestClientConfiguration:

    def test_endpoint_string(self):
        client = ManyClient("http://localhost:8000")
        assert client.config == ClientConfig(endpoint="http://localhost:8000")
        assert isinstance(client.transport, HttpTransport)
        client.close()

    def test_well_known_endpoint(self):
        client = ManyClient(ClientConfig(endpoint="LOCAL", timeout=3.0))
        assert client.transport.endpoint == "http://127.0.0.1:8000"
        assert client.transport._timeout == 3.0
        client.close()

    def test_debug_sets_logger_level(self, transport):
        client = ManyClient(ClientConfig(endpoint="local", debug=True), transport=transport)
        assert client.logger.level == logging.DEBUG

    def test_injected_transport_not_closed(self, transport):
        with ManyClient("local", transport=transport):
            pass
        assert not transport.closed

    def test_same_class_exported(self):
        assert ManyClient is ClientClass
        assert __version__


class TestCall:

    def test_round_trip(self, client, transport):
        transport.queue(build_response({0: "hello"}))
        result = client.call("base.echo", {0: "hello"}, {"nonce": b"n"})
        assert result == {0: "hello"}
        assert isinstance(result, WireRecord)
        assert transport.last_call == ("base.echo", {0: "hello"})
        assert transport.requests[-1][1] == {"nonce": b"n"}

    def test_protocol_error(self, client, transport):
        transport.queue(build_error_response(-1, "Unknown method {m}", {"m": "base.nope"}))
        with pytest.raises(ProtocolError) as exc_info:
            client.call("base.nope")
        assert exc_info.value.rendered == "Unknown method base.nope"

    def test_transport_error_propagates(self):
        class FailingTransport(Transport):
            def send(self, payload, options=None):
                raise TransportError("down")

        failing = ManyClient("local", transport=FailingTransport())
        with pytest.raises(TransportError):
            failing.call("base.status")

    def test_garbage_response(self, client, transport):
        transport.queue(b"\x83\x01")
        with pytest.raises(MalformedEncoding):
            client.call("base.status")


class TestAccountThroughClient:
    """AccountModule over the real envelope and a mock transport."""

    def test_submit_then_info(self, client, transport):
        transport.queue(build_response({0: b"\x00\x01"}))
        transport.queue(encode(mk_multisig_info_payload(threshold=2)))

        token = client.account.submit_multisig_txn("send", mk_send_data(
            amount=1, threshold=3, expireInSecs=3600, executeAutomatically=False,
        ))
        method, args = transport.last_call
        assert method == "account.multisigSubmitTransaction"
        assert args[2][0] == [6, 0]
        assert args[2][1] == {
            0: mk_identity(321), 1: mk_identity(123), 2: 1, 3: mk_identity(456),
        }
        assert (args[3], args[4], args[5]) == (3, 3600, False)

        info = client.account.multisig_info(token.token)
        assert transport.last_call == ("account.multisigInfo", {0: b"\x00\x01"})
        assert len(info.approvers) == 1
        assert info.threshold == 2
        assert info.state == "pending"
        assert not info.is_execute_ready

    def test_approve_with_no_content(self, client, transport):
        transport.queue(b"")
        assert client.account.multisig_approve(b"\x00\x01") == {}
        assert transport.call_count == 1

    def test_create_returns_address(self, client, transport):
        transport.queue(build_response({0: mk_identity(77)}))
        assert client.account.create("new", features=[0]) == mk_address(77)
