"""
Unit tests for transaction builders.
"""

import pytest

from many_client.tx import SendBuilder, SendParams, TransactionMapper, get_builder_for
from many_client.tx.builders import BuilderError
from many_client.runtime.tables import EnumTable

from helpers import mk_address, mk_identity

pytestmark = pytest.mark.unit


class TestSendBuilder:
    """Chainable send builder."""

    @pytest.fixture
    def builder(self):
        return (SendBuilder()
                .from_(mk_address(1))
                .to(str(mk_address(2)))
                .symbol(mk_address(3).to_bytes())
                .amount(100))

    def test_build(self, builder):
        params = builder.build()
        assert isinstance(params, SendParams)
        assert params.to == mk_address(2)
        assert params.amount == 100

    def test_get_field(self, builder):
        assert builder.get_field("amount") == 100
        assert builder.get_field("memo", "none") == "none"

    def test_to_record(self, builder):
        record = builder.to_record()
        assert record == {
            0: [6, 0],
            1: {0: mk_identity(1), 1: mk_identity(2), 2: 100, 3: mk_identity(3)},
        }

    def test_to_record_with_mapper(self, builder):
        mapper = TransactionMapper(EnumTable("TransactionType", [("send", [6, 9])]))
        assert builder.to_record(mapper)[0] == [6, 9]

    def test_missing_fields(self):
        with pytest.raises(BuilderError) as exc_info:
            SendBuilder().amount(1).validate()
        assert "to" in exc_info.value.message
        assert "symbol" in exc_info.value.message

    def test_invalid_amount(self, builder):
        with pytest.raises(BuilderError):
            builder.amount(-5).build()


class TestRegistry:

    def test_get_builder_for_send(self):
        assert isinstance(get_builder_for("send"), SendBuilder)

    def test_get_builder_for_unknown(self):
        with pytest.raises(BuilderError):
            get_builder_for("stake")
