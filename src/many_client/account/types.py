"""
Account enumerations and account info decoding.

Roles, feature types, multisig feature arguments and multisig states are
EnumTables. Encoding is strict (UnknownEnumerator for a bad name); decoding
is lenient and keeps unrecognized wire values as UnknownValue so newer
servers do not break older clients.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pydantic
from pydantic import BaseModel, Field

from ..codec.identity import address_to_identity, identity_to_address
from ..codec.record import WireRecord
from ..runtime.address import Address
from ..runtime.errors import DecodeError, ManyClientError, ValidationError
from ..runtime.tables import EnumTable, UnknownValue

ACCOUNT_ROLES = EnumTable.indexed("AccountRole", [
    "owner",
    "canLedgerTransact",
    "canMultisigSubmit",
    "canMultisigApprove",
    "canKvStorePut",
    "canKvStoreDisable",
    "canKvStoreTransfer",
    "canTokensCreate",
    "canTokensMint",
    "canTokensBurn",
    "canTokensUpdate",
    "canTokensAddExtendedInfo",
    "canTokensRemoveExtendedInfo",
])

ACCOUNT_FEATURE_TYPES = EnumTable.indexed("AccountFeatureType", [
    "accountLedger",
    "accountMultisig",
    "accountKvStore",
    "accountTokens",
])

MULTISIG_ARGUMENTS = EnumTable.indexed("AccountMultisigArgument", [
    "threshold",
    "expireInSecs",
    "executeAutomatically",
])

MULTISIG_STATES = EnumTable.indexed("MultisigTransactionState", [
    "pending",
    "executedAutomatically",
    "executedManually",
    "withdrawn",
    "expired",
])

RoleName = Union[str, UnknownValue]
Roles = Dict[Address, List[RoleName]]


class MultisigFeatureArgs(BaseModel):
    """Arguments of the multisig account feature. Unset arguments use the server default."""
    threshold: Optional[int] = Field(default=None, ge=1)
    expire_in_secs: Optional[int] = Field(default=None, ge=0, alias="expireInSecs")
    execute_automatically: Optional[bool] = Field(default=None, alias="executeAutomatically")

    model_config = {"populate_by_name": True, "frozen": True}


@dataclass(frozen=True)
class AccountFeature:
    """
    A feature and its arguments.

    Known multisig arguments are keyed by name; arguments the client does not
    know are keyed by an UnknownValue carrying the wire index.
    """
    feature_type: RoleName
    arguments: Dict[Any, Any] = field(default_factory=dict)

    @classmethod
    def ledger(cls) -> "AccountFeature":
        return cls("accountLedger")

    @classmethod
    def multisig(cls, threshold: Optional[int] = None, expire_in_secs: Optional[int] = None,
                 execute_automatically: Optional[bool] = None) -> "AccountFeature":
        try:
            args = MultisigFeatureArgs(threshold=threshold, expire_in_secs=expire_in_secs,
                                       execute_automatically=execute_automatically)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid multisig feature arguments: {e.error_count()} error(s)",
                                  cause=e)
        named = {
            "threshold": args.threshold,
            "expireInSecs": args.expire_in_secs,
            "executeAutomatically": args.execute_automatically,
        }
        return cls("accountMultisig", {k: v for k, v in named.items() if v is not None})


@dataclass(frozen=True)
class AccountInfo:
    """Snapshot returned by account.info."""
    description: Optional[str]
    roles: Roles
    features: List[AccountFeature]


# Roles

def encode_roles(roles: Mapping[Any, Iterable[Any]]) -> Dict[Any, List[Any]]:
    """
    {address: [role, ...]} to its wire map {identity: [role name, ...]}.

    Raises:
        UnknownEnumerator: If a role name is not in the role table
        MalformedAddress: If an address is invalid
    """
    encoded = {}
    for address, role_list in roles.items():
        names = []
        for role in role_list:
            if isinstance(role, UnknownValue):
                names.append(role.raw)
            elif isinstance(role, str):
                ACCOUNT_ROLES.value_of(role)
                names.append(role)
            else:
                names.append(ACCOUNT_ROLES.name_of(role))
        encoded[address_to_identity(address)] = names
    return encoded


def decode_roles(value: Any) -> Roles:
    """
    Wire role map to {Address: [role name, ...]}.

    Roles may arrive as names or as indices. Unknown roles become
    UnknownValue entries; a bad identity key fails the whole map.
    """
    if not isinstance(value, dict):
        raise DecodeError(f"Roles must be a map, got {type(value).__name__}")
    roles: Roles = {}
    for identity, role_list in value.items():
        address = identity_to_address(identity)
        if not isinstance(role_list, (list, tuple)):
            raise DecodeError(f"Roles of {address} must be an array")
        roles[address] = [ACCOUNT_ROLES.decode(role) for role in role_list]
    return roles


# Features

def encode_feature(feature: Union[AccountFeature, str, int, Tuple[Any, Mapping]]) -> Any:
    """
    A feature to its wire form: a bare index when it has no arguments,
    [index, {argument index: value}] otherwise.
    """
    if isinstance(feature, AccountFeature):
        feature_type, arguments = feature.feature_type, feature.arguments
    elif isinstance(feature, (tuple, list)):
        feature_type, arguments = feature[0], dict(feature[1])
    else:
        feature_type, arguments = feature, {}

    index = ACCOUNT_FEATURE_TYPES.encode(feature_type)
    if not arguments:
        return index

    wire_args = {}
    for key, value in arguments.items():
        wire_args[MULTISIG_ARGUMENTS.encode(key)] = value
    return [index, wire_args]


def encode_features(features: Iterable[Any]) -> List[Any]:
    return [encode_feature(feature) for feature in features]


def decode_feature(value: Any) -> AccountFeature:
    if isinstance(value, (list, tuple)):
        if len(value) != 2 or not isinstance(value[1], dict):
            raise DecodeError(f"Feature must be [type, arguments], got {value!r}")
        feature_type = ACCOUNT_FEATURE_TYPES.decode(value[0])
        arguments = {MULTISIG_ARGUMENTS.decode(k): v for k, v in value[1].items()}
        return AccountFeature(feature_type, arguments)
    return AccountFeature(ACCOUNT_FEATURE_TYPES.decode(value))


def decode_features(value: Any) -> List[AccountFeature]:
    if not isinstance(value, (list, tuple)):
        raise DecodeError(f"Features must be an array, got {type(value).__name__}")
    return [decode_feature(item) for item in value]


# Account info

INFO_NAME = 0
INFO_ROLES = 1
INFO_FEATURES = 2


def make_account_info(payload: Mapping[int, Any]) -> AccountInfo:
    """Decode an account.info payload."""
    record = WireRecord.from_value(payload, "account info")
    description = record.optional(INFO_NAME, name="description")
    if description is not None and not isinstance(description, str):
        raise DecodeError("Account description must be text")
    return AccountInfo(
        description=description,
        roles=record.optional(INFO_ROLES, decode_roles, name="roles", default={}),
        features=record.optional(INFO_FEATURES, decode_features, name="features", default=[]),
    )


def validate_roles_argument(roles: Mapping[Any, Iterable[Any]]) -> Dict[Any, List[Any]]:
    """encode_roles, reporting caller mistakes as ValidationError."""
    if not isinstance(roles, Mapping):
        raise ValidationError(f"Roles must be a mapping of address to roles, got {type(roles).__name__}")
    try:
        return encode_roles(roles)
    except ManyClientError as e:
        raise ValidationError(f"Invalid roles: {e.message}", cause=e)
