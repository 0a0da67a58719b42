"""
Unit tests for the HTTP transport.

requests.Session is mocked; nothing touches the network.
"""

from unittest.mock import Mock

import pytest
import requests

from many_client.runtime.errors import TransportError
from many_client.transport import HttpTransport

pytestmark = pytest.mark.unit


def make_response(status=200, content=b"\xa0", reason="OK"):
    response = Mock()
    response.status_code = status
    response.content = content
    response.reason = reason
    return response


class TestHttpTransportInitialization:

    def test_endpoint_strips_trailing_slash(self):
        transport = HttpTransport("http://localhost:8000/")
        assert transport.endpoint == "http://localhost:8000"

    def test_default_timeout(self):
        transport = HttpTransport("http://localhost:8000")
        assert transport._timeout == 30.0

    def test_context_manager_closes_owned_session(self):
        with HttpTransport("http://localhost:8000") as transport:
            transport._session = Mock()
            session = transport._session
        session.close.assert_called_once()

    def test_external_session_not_closed(self):
        session = Mock()
        HttpTransport("http://localhost:8000", session=session).close()
        session.close.assert_not_called()


class TestHttpTransportSend:

    @pytest.fixture
    def session(self):
        session = Mock()
        session.post.return_value = make_response()
        return session

    def test_posts_payload(self, session):
        transport = HttpTransport("http://localhost:8000", timeout=5.0, session=session,
                                  user_agent="tests/1.0")
        assert transport.send(b"\x82\x60\xa0") == b"\xa0"

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "http://localhost:8000"
        assert kwargs["data"] == b"\x82\x60\xa0"
        assert kwargs["headers"]["Content-Type"] == "application/cbor"
        assert kwargs["headers"]["User-Agent"] == "tests/1.0"
        assert kwargs["timeout"] == 5.0
        assert kwargs["verify"] is True

    def test_timeout_option(self, session):
        transport = HttpTransport("http://localhost:8000", session=session)
        transport.send(b"", {"timeout": 1.5, "nonce": b"x"})
        assert session.post.call_args[1]["timeout"] == 1.5

    def test_empty_body(self, session):
        session.post.return_value = make_response(status=204, content=b"", reason="No Content")
        transport = HttpTransport("http://localhost:8000", session=session)
        assert transport.send(b"") == b""

    def test_http_error_status(self, session):
        session.post.return_value = make_response(status=503, reason="Service Unavailable")
        transport = HttpTransport("http://localhost:8000", session=session)
        with pytest.raises(TransportError) as exc_info:
            transport.send(b"")
        assert "503" in exc_info.value.message
        assert exc_info.value.details["status"] == 503

    def test_connection_error(self, session):
        failure = requests.exceptions.ConnectionError("refused")
        session.post.side_effect = failure
        transport = HttpTransport("http://localhost:8000", session=session)
        with pytest.raises(TransportError) as exc_info:
            transport.send(b"")
        assert exc_info.value.cause is failure

    def test_timeout_error(self, session):
        session.post.side_effect = requests.exceptions.Timeout("slow")
        transport = HttpTransport("http://localhost:8000", session=session)
        with pytest.raises(TransportError):
            transport.send(b"")
