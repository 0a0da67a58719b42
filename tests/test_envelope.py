"""
Unit tests for request/response envelopes.
"""

import logging

import pytest

from many_client.codec import WireRecord, decode, encode
from many_client.envelope import (
    RESULT_FIELD, build_error_response, build_request, build_response, error_from_record,
    parse_request, parse_response,
)
from many_client.runtime.errors import DecodeError, MalformedEncoding, ProtocolError, ValidationError

from helpers import mk_identity, mk_multisig_info_payload

pytestmark = pytest.mark.unit


class TestBuildRequest:
    """Request serialization."""

    def test_wire_shape(self):
        data = build_request("account.multisigApprove", {0: b"\x01\x02"})
        assert decode(data) == ["account.multisigApprove", {0: b"\x01\x02"}]

    def test_no_arguments(self):
        assert decode(build_request("ledger.info")) == ["ledger.info", {}]

    def test_round_trip(self):
        args = WireRecord({0: mk_identity(1), 3: [1, 2], 7: ["memo"]})
        method, parsed = parse_request(build_request("account.multisigSubmitTransaction", args))
        assert method == "account.multisigSubmitTransaction"
        assert parsed == args
        assert isinstance(parsed, WireRecord)

    @pytest.mark.parametrize("method", ["", None, 5])
    def test_invalid_method(self, method):
        with pytest.raises(ValidationError):
            build_request(method, {})

    def test_invalid_argument_keys(self):
        with pytest.raises(ValidationError):
            build_request("account.info", {"account": b"\x00"})

    def test_parse_request_rejects_other_shapes(self):
        with pytest.raises(MalformedEncoding):
            parse_request(encode({0: 1}))
        with pytest.raises(MalformedEncoding):
            parse_request(encode(["m", {"x": 1}]))


class TestParseResponse:
    """Response decoding and the error discriminant."""

    def test_enveloped_payload(self):
        payload = {0: b"token"}
        assert parse_response(build_response(payload)) == payload

    def test_bare_payload_fixture(self):
        fixture = mk_multisig_info_payload()
        parsed = parse_response(encode(fixture))
        assert parsed == fixture
        assert parsed[RESULT_FIELD] == 2

    @pytest.mark.parametrize("data", [None, b"", encode(None), build_response(None)])
    def test_no_content(self, data):
        assert parse_response(data) == {}

    def test_error_response(self):
        data = build_error_response(7, "Insufficient funds in {account}", {"account": "mabc"})
        with pytest.raises(ProtocolError) as exc_info:
            parse_response(data)
        err = exc_info.value
        assert err.code == 7
        assert err.message == "Insufficient funds in {account}"
        assert err.arguments == {"account": "mabc"}
        assert err.rendered == "Insufficient funds in mabc"

    def test_error_takes_precedence_over_payload(self):
        response = WireRecord({
            0: b"token",
            1: mk_identity(1),
            2: "looks like a payload",
            RESULT_FIELD: WireRecord({0: 12, 1: "Not allowed"}),
        })
        with pytest.raises(ProtocolError) as exc_info:
            parse_response(encode(response))
        assert exc_info.value.code == 12

    def test_error_without_message(self):
        with pytest.raises(ProtocolError) as exc_info:
            parse_response(encode({RESULT_FIELD: {0: 3}}))
        assert exc_info.value.message == ""

    def test_malformed_error_record(self):
        with pytest.raises(DecodeError):
            parse_response(encode({RESULT_FIELD: {1: "no code"}}))
        with pytest.raises(DecodeError):
            parse_response(encode({RESULT_FIELD: {0: "one", 1: "bad code"}}))

    def test_truncated_bytes(self):
        with pytest.raises(MalformedEncoding):
            parse_response(build_response({0: 1})[:-1])

    def test_non_record_response(self):
        with pytest.raises(DecodeError):
            parse_response(encode([1, 2]))

    def test_debug_logging(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="many_client.envelope"):
            parse_response(build_response({0: 1}))
        assert "Response payload: 1 fields" in caplog.text


class TestErrorFromRecord:
    """error_from_record on decoded sub-records."""

    def test_argument_values_stringified(self):
        err = error_from_record({0: 1, 1: "Value {n} too big", 2: {"n": 5}})
        assert err.arguments == {"n": "5"}
        assert err.rendered == "Value 5 too big"

    def test_arguments_must_be_map(self):
        with pytest.raises(DecodeError):
            error_from_record({0: 1, 1: "x", 2: ["n"]})
