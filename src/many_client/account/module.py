"""
Account namespace of the MANY ledger: account management and the multisig
transaction lifecycle.

Every method builds its argument record, performs exactly one call through
the injected caller, and decodes the payload. Errors from the caller
(ProtocolError, TransportError) propagate unchanged; nothing is retried.
"""

from __future__ import annotations
import logging
from typing import Any, Iterable, Mapping, Optional, Type, TypeVar, Union

import pydantic

from ..codec.identity import address_to_identity, identity_to_address
from ..codec.record import WireRecord
from ..runtime.address import Address
from ..runtime.errors import ManyClientError, ValidationError
from ..transport.base import CallOptions, Caller
from ..tx.mapper import TransactionMapper
from .multisig import (
    TOKEN, MultisigDefaults, MultisigToken, MultisigTransactionInfo, SubmitMultisigArgs,
    decode_multisig_info, decode_token,
)
from .types import AccountInfo, encode_features, make_account_info, validate_roles_argument

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)
AddressLike = Union[Address, str, bytes]


def _validate(model_cls: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    try:
        return model_cls.model_validate(dict(data))
    except pydantic.ValidationError as e:
        problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ValidationError(f"Invalid {model_cls.__name__}: {'; '.join(problems)}", cause=e)


def _identity(address: AddressLike, what: str):
    try:
        return address_to_identity(address)
    except ManyClientError as e:
        raise ValidationError(f"Invalid {what} address: {e.message}", cause=e)


def _token_args(token: bytes) -> WireRecord:
    if not isinstance(token, (bytes, bytearray, memoryview)):
        raise ValidationError(f"Token must be bytes, got {type(token).__name__}")
    return WireRecord({TOKEN: bytes(token)})


class AccountModule:
    """
    account.* methods.

    Example:
        ```python
        client = ManyClient("http://localhost:8000")
        token = client.account.submit_multisig_txn("send", {
            "from": account, "to": recipient, "symbol": symbol, "amount": 10,
            "threshold": 2,
        }).token
        client.account.multisig_approve(token)
        info = client.account.multisig_info(token)
        ```
    """

    namespace = "account"

    def __init__(self, caller: Caller, mapper: Optional[TransactionMapper] = None):
        """
        Args:
            caller: Object implementing call(method, args, options)
            mapper: Transaction mapper (default table if omitted)
        """
        self._caller = caller
        self._mapper = mapper or TransactionMapper()

    @property
    def mapper(self) -> TransactionMapper:
        return self._mapper

    def _call(self, method: str, args: WireRecord, options: CallOptions = None) -> WireRecord:
        return self._caller.call(f"{self.namespace}.{method}", args, options)

    # =========================================================================
    # Account management
    # =========================================================================

    def info(self, account: AddressLike, options: CallOptions = None) -> AccountInfo:
        """Description, roles and features of an account."""
        payload = self._call("info", WireRecord({0: _identity(account, "account")}), options)
        return make_account_info(payload)

    def create(self, name: Optional[str] = None, roles: Optional[Mapping[Any, Iterable[Any]]] = None,
               features: Iterable[Any] = (), options: CallOptions = None) -> Address:
        """
        Create an account.

        Returns:
            Address of the new account
        """
        args = WireRecord()
        args.set_optional(0, name)
        if roles:
            args[1] = validate_roles_argument(roles)
        args[2] = self._features(features)
        payload = self._call("create", args, options)
        return payload.require(0, identity_to_address, name="address")

    def set_description(self, account: AddressLike, description: str,
                        options: CallOptions = None) -> WireRecord:
        args = WireRecord({0: _identity(account, "account"), 1: description})
        return self._call("setDescription", args, options)

    def add_roles(self, account: AddressLike, roles: Mapping[Any, Iterable[Any]],
                  options: CallOptions = None) -> WireRecord:
        args = WireRecord({0: _identity(account, "account"), 1: validate_roles_argument(roles)})
        return self._call("addRoles", args, options)

    def remove_roles(self, account: AddressLike, roles: Mapping[Any, Iterable[Any]],
                     options: CallOptions = None) -> WireRecord:
        args = WireRecord({0: _identity(account, "account"), 1: validate_roles_argument(roles)})
        return self._call("removeRoles", args, options)

    def add_features(self, account: AddressLike, features: Iterable[Any],
                     roles: Optional[Mapping[Any, Iterable[Any]]] = None,
                     options: CallOptions = None) -> WireRecord:
        args = WireRecord({0: _identity(account, "account")})
        if roles:
            args[1] = validate_roles_argument(roles)
        args[2] = self._features(features)
        return self._call("addFeatures", args, options)

    def disable(self, account: AddressLike, options: CallOptions = None) -> WireRecord:
        return self._call("disable", WireRecord({0: _identity(account, "account")}), options)

    @staticmethod
    def _features(features: Iterable[Any]) -> list:
        try:
            return encode_features(features)
        except ManyClientError as e:
            raise ValidationError(f"Invalid features: {e.message}", cause=e)

    # =========================================================================
    # Multisig lifecycle
    # =========================================================================

    def submit_multisig_txn(self, txn_type: Any, txn_data: Mapping[str, Any],
                            options: CallOptions = None) -> MultisigToken:
        """
        Submit a transaction for multisig approval.

        Args:
            txn_type: Transaction kind, e.g. "send"
            txn_data: Transaction parameters plus the multisig options
                from, memo, threshold, expireInSecs, executeAutomatically
            options: Passed to the transport untouched

        Returns:
            Token referencing the new multisig transaction

        Raises:
            UnsupportedTransactionKind: Before anything is sent, if txn_type
                has no encoding
        """
        transaction = self._mapper.build_submitted_txn(txn_type, txn_data)
        args = _validate(SubmitMultisigArgs, txn_data).to_record(transaction)
        payload = self._call("multisigSubmitTransaction", args, options)
        token = decode_token(payload)
        logger.debug(f"Submitted multisig {getattr(txn_type, 'value', txn_type)}: token {token.token.hex()}")
        return token

    def multisig_info(self, token: bytes, options: CallOptions = None) -> MultisigTransactionInfo:
        """Fresh snapshot of a multisig transaction."""
        payload = self._call("multisigInfo", _token_args(token), options)
        return decode_multisig_info(payload, self._mapper, token=bytes(token))

    def multisig_approve(self, token: bytes, options: CallOptions = None) -> WireRecord:
        return self._call("multisigApprove", _token_args(token), options)

    def multisig_revoke(self, token: bytes, options: CallOptions = None) -> WireRecord:
        return self._call("multisigRevoke", _token_args(token), options)

    def multisig_execute(self, token: bytes, options: CallOptions = None) -> WireRecord:
        return self._call("multisigExecute", _token_args(token), options)

    def multisig_withdraw(self, token: bytes, options: CallOptions = None) -> WireRecord:
        return self._call("multisigWithdraw", _token_args(token), options)

    def multisig_set_defaults(self, account: AddressLike, threshold: Optional[int] = None,
                              expire_in_secs: Optional[int] = None,
                              execute_automatically: Optional[bool] = None,
                              options: CallOptions = None) -> WireRecord:
        """Set the default multisig options of an account."""
        defaults = _validate(MultisigDefaults, {
            "account": account,
            "threshold": threshold,
            "expire_in_secs": expire_in_secs,
            "execute_automatically": execute_automatically,
        })
        return self._call("multisigSetDefaults", defaults.to_record(), options)
