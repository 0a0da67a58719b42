"""
Unit tests for account management methods and account info decoding.
"""

import pytest

from many_client.account import AccountFeature, AccountInfo, make_account_info
from many_client.account.types import decode_feature, encode_feature, encode_roles, decode_roles
from many_client.codec import WireRecord, address_to_identity, decode, encode
from many_client.runtime.errors import (
    DecodeError, UnexpectedTag, UnknownEnumerator, ValidationError,
)
from many_client.runtime.tables import UnknownValue

from helpers import mk_address, mk_identity

pytestmark = pytest.mark.unit


def make_account_info_payload():
    """account.info response for an account with three members and the multisig feature."""
    return WireRecord({
        0: "my-account",
        1: {
            mk_identity(2): ["owner", "canMultisigSubmit"],
            mk_identity(1): ["canMultisigApprove"],
            mk_identity(3): ["canMultisigApprove"],
        },
        2: [[1, {0: 2, 2: False, 1: 86400}]],
    })


class TestInfo:
    """account.info"""

    def test_request_and_decode(self, account, caller):
        caller.call.return_value = make_account_info_payload()
        target = mk_address(7)

        info = account.info(str(target))

        caller.call.assert_called_once_with(
            "account.info", WireRecord({0: address_to_identity(target)}), None)
        assert info == AccountInfo(
            description="my-account",
            roles={
                mk_address(2): ["owner", "canMultisigSubmit"],
                mk_address(1): ["canMultisigApprove"],
                mk_address(3): ["canMultisigApprove"],
            },
            features=[AccountFeature("accountMultisig", {
                "threshold": 2, "executeAutomatically": False, "expireInSecs": 86400,
            })],
        )

    def test_decode_from_wire_bytes(self):
        info = make_account_info(decode(encode(make_account_info_payload())))
        assert info.description == "my-account"
        assert len(info.roles) == 3

    def test_empty_payload(self):
        assert make_account_info(WireRecord()) == AccountInfo(None, {}, [])

    def test_role_indices(self):
        info = make_account_info({1: {mk_identity(1): [0, 3]}})
        assert info.roles[mk_address(1)] == ["owner", "canMultisigApprove"]

    def test_unknown_role_and_feature_kept(self):
        info = make_account_info({
            1: {mk_identity(1): ["owner", 99]},
            2: [0, 7, [1, {5: "later"}]],
        })
        assert info.roles[mk_address(1)] == ["owner", UnknownValue("AccountRole", 99)]
        assert info.features[0] == AccountFeature("accountLedger")
        assert info.features[1].feature_type == UnknownValue("AccountFeatureType", 7)
        assert info.features[2].arguments == {UnknownValue("AccountMultisigArgument", 5): "later"}

    def test_untagged_role_key(self):
        with pytest.raises(UnexpectedTag):
            make_account_info({1: {mk_address(1).to_bytes(): ["owner"]}})

    def test_description_must_be_text(self):
        with pytest.raises(DecodeError):
            make_account_info({0: b"bytes"})

    def test_malformed_feature(self):
        with pytest.raises(DecodeError):
            make_account_info({2: [[1, 2, 3]]})


class TestCreate:
    """account.create"""

    def test_request_and_result(self, account, caller):
        member = mk_address(1)
        created = mk_address(50)
        caller.call.return_value = WireRecord({0: address_to_identity(created)})
        opts = {"nonce": bytes(16)}

        result = account.create(
            "account name",
            roles={member: ["canMultisigApprove", "canMultisigSubmit"]},
            features=[AccountFeature.ledger(), AccountFeature.multisig(2, 3600, False)],
            options=opts,
        )

        caller.call.assert_called_once_with(
            "account.create",
            WireRecord({
                0: "account name",
                1: {address_to_identity(member): ["canMultisigApprove", "canMultisigSubmit"]},
                2: [0, [1, {0: 2, 1: 3600, 2: False}]],
            }),
            opts,
        )
        assert result == created

    def test_without_name_or_roles(self, account, caller):
        caller.call.return_value = WireRecord({0: mk_identity(50)})
        account.create(features=[0])
        assert caller.call.call_args[0][1] == {2: [0]}

    def test_response_without_address(self, account, caller):
        with pytest.raises(DecodeError):
            account.create("x", features=[0])

    def test_unknown_role_rejected(self, account, caller):
        with pytest.raises(ValidationError):
            account.create("x", roles={mk_address(1): ["superuser"]})
        caller.call.assert_not_called()

    def test_unknown_feature_rejected(self, account, caller):
        with pytest.raises(ValidationError):
            account.create("x", features=["accountTeleport"])
        caller.call.assert_not_called()

    def test_invalid_multisig_feature(self):
        with pytest.raises(ValidationError):
            AccountFeature.multisig(threshold=0)


class TestAccountUpdates:
    """setDescription, addRoles, removeRoles, addFeatures, disable"""

    def test_set_description(self, account, caller):
        account.set_description(mk_address(5), "renamed")
        caller.call.assert_called_once_with(
            "account.setDescription", WireRecord({0: mk_identity(5), 1: "renamed"}), None)

    @pytest.mark.parametrize("method_name,wire_method", [
        ("add_roles", "account.addRoles"),
        ("remove_roles", "account.removeRoles"),
    ])
    def test_roles(self, account, caller, method_name, wire_method):
        getattr(account, method_name)(mk_address(5), {mk_address(6): ["canLedgerTransact", 3]})
        caller.call.assert_called_once_with(
            wire_method,
            WireRecord({0: mk_identity(5), 1: {mk_identity(6): ["canLedgerTransact", "canMultisigApprove"]}}),
            None,
        )

    def test_roles_must_be_mapping(self, account, caller):
        with pytest.raises(ValidationError):
            account.add_roles(mk_address(5), [mk_address(6)])
        caller.call.assert_not_called()

    def test_add_features(self, account, caller):
        account.add_features(
            mk_address(5),
            [("accountMultisig", {"threshold": 2})],
            roles={mk_address(6): ["canMultisigApprove"]},
        )
        caller.call.assert_called_once_with(
            "account.addFeatures",
            WireRecord({
                0: mk_identity(5),
                1: {mk_identity(6): ["canMultisigApprove"]},
                2: [[1, {0: 2}]],
            }),
            None,
        )

    def test_add_features_without_roles(self, account, caller):
        account.add_features(mk_address(5), ["accountKvStore"])
        assert caller.call.call_args[0][1] == {0: mk_identity(5), 2: [2]}

    def test_disable(self, account, caller):
        account.disable(mk_address(5), {"nonce": b"1"})
        caller.call.assert_called_once_with(
            "account.disable", WireRecord({0: mk_identity(5)}), {"nonce": b"1"})

    def test_invalid_account_address(self, account, caller):
        with pytest.raises(ValidationError):
            account.disable("m123")
        caller.call.assert_not_called()


class TestRoleAndFeatureCodecs:
    """encode/decode helpers used by the account methods."""

    def test_encode_roles_rejects_unknown(self):
        with pytest.raises(UnknownEnumerator):
            encode_roles({mk_address(1): ["superuser"]})

    def test_encode_roles_keeps_unknown_values(self):
        roles = {mk_address(1): [UnknownValue("AccountRole", 42)]}
        assert encode_roles(roles) == {mk_identity(1): [42]}

    def test_decode_roles_requires_map(self):
        with pytest.raises(DecodeError):
            decode_roles([1, 2])

    def test_feature_round_trip(self):
        feature = AccountFeature.multisig(threshold=3, execute_automatically=True)
        assert decode_feature(encode_feature(feature)) == feature

    def test_bare_feature(self):
        assert encode_feature(AccountFeature.ledger()) == 0
        assert encode_feature("accountTokens") == 3
