r"""
Multisig transaction records.

A multisig transaction lives on the server; the client builds the requests
that drive it and decodes point-in-time snapshots returned by
account.multisigInfo. Server-side lifecycle, for reference only:

    pending --(approvals >= threshold)--> ready --(auto or execute)--> executed
    pending / ready --(withdraw by submitter)--> withdrawn
    pending / ready --(timeout)--> expired

Approvals can be revoked while the transaction is pending. Executed,
withdrawn and expired are terminal. Nothing here computes transitions:
readiness is read from the approvers map of a single snapshot.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field

from ..codec.identity import address_to_identity, identity_to_address
from ..codec.record import FieldState, WireRecord
from ..codec.tags import Timestamp, decode_timestamp, timestamp_value
from ..runtime.address import Address
from ..runtime.errors import DecodeError, ManyClientError
from ..runtime.tables import UnknownValue
from ..tx.mapper import TransactionMapper
from ..tx.types import SubmittedTransaction
from .types import MULTISIG_STATES

logger = logging.getLogger(__name__)

# account.multisigSubmitTransaction
SUBMIT_FROM = 0
SUBMIT_MEMO_LEGACY = 1
SUBMIT_TRANSACTION = 2
SUBMIT_THRESHOLD = 3
SUBMIT_EXPIRE_IN_SECS = 4
SUBMIT_EXECUTE_AUTOMATICALLY = 5
SUBMIT_MEMO = 7

# account.multisigInfo response
INFO_MEMO_LEGACY = 0
INFO_TRANSACTION = 1
INFO_SUBMITTER = 2
INFO_APPROVERS = 3
INFO_THRESHOLD = 4
INFO_EXECUTE_AUTOMATICALLY = 5
INFO_TIMEOUT = 6
INFO_DATA = 7
INFO_STATE = 8
INFO_MEMO = 9

APPROVER_APPROVED = 0

# account.multisigSetDefaults
DEFAULTS_ACCOUNT = 0
DEFAULTS_THRESHOLD = 1
DEFAULTS_EXPIRE_IN_SECS = 2
DEFAULTS_EXECUTE_AUTOMATICALLY = 3

# every token-only call uses field 0
TOKEN = 0

TERMINAL_STATES = frozenset({"executedAutomatically", "executedManually", "withdrawn", "expired"})


class SubmitMultisigArgs(BaseModel):
    """
    Arguments of account.multisigSubmitTransaction besides the transaction.

    A single string memo goes to the legacy memo field; a list of strings
    goes to the memo field. Unset options are omitted so the account
    defaults apply.
    """
    from_: Address = Field(validation_alias=AliasChoices("from", "from_"))
    memo: Optional[Union[str, List[str]]] = None
    threshold: Optional[int] = Field(default=None, ge=1)
    expire_in_secs: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("expireInSecs", "expire_in_secs"))
    execute_automatically: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("executeAutomatically", "execute_automatically"))

    model_config = {"frozen": True}

    def to_record(self, transaction: WireRecord) -> WireRecord:
        record = WireRecord({SUBMIT_FROM: address_to_identity(self.from_)})
        if isinstance(self.memo, str):
            record[SUBMIT_MEMO_LEGACY] = self.memo
        record[SUBMIT_TRANSACTION] = transaction
        record.set_optional(SUBMIT_THRESHOLD, self.threshold)
        record.set_optional(SUBMIT_EXPIRE_IN_SECS, self.expire_in_secs)
        record.set_optional(SUBMIT_EXECUTE_AUTOMATICALLY, self.execute_automatically)
        if isinstance(self.memo, list):
            record[SUBMIT_MEMO] = list(self.memo)
        return record


class MultisigDefaults(BaseModel):
    """Arguments of account.multisigSetDefaults."""
    account: Address
    threshold: Optional[int] = Field(default=None, ge=1)
    expire_in_secs: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("expireInSecs", "expire_in_secs"))
    execute_automatically: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("executeAutomatically", "execute_automatically"))

    model_config = {"frozen": True}

    def to_record(self) -> WireRecord:
        record = WireRecord({DEFAULTS_ACCOUNT: address_to_identity(self.account)})
        record.set_optional(DEFAULTS_THRESHOLD, self.threshold)
        record.set_optional(DEFAULTS_EXPIRE_IN_SECS, self.expire_in_secs)
        record.set_optional(DEFAULTS_EXECUTE_AUTOMATICALLY, self.execute_automatically)
        return record


@dataclass(frozen=True)
class MultisigToken:
    """Handle returned by a submission."""
    token: bytes


@dataclass(frozen=True)
class InvalidApprover:
    """An approvers entry that could not be decoded."""
    raw_identity: Any
    raw_value: Any
    error: ManyClientError


@dataclass(frozen=True)
class MultisigTransactionInfo:
    """Point-in-time snapshot of a multisig transaction."""
    transaction: SubmittedTransaction
    submitter: Address
    approvers: Dict[Address, bool]
    threshold: int
    execute_automatically: Optional[bool] = None
    expire_at: Optional[datetime] = None
    memo: Optional[List[Union[str, bytes]]] = None
    state: Optional[Union[str, UnknownValue]] = None
    data: Optional[bytes] = None
    token: Optional[bytes] = None
    invalid_approvers: List[InvalidApprover] = field(default_factory=list)
    raw_timeout: Any = None
    timeout_error: Optional[ManyClientError] = None

    @property
    def approval_count(self) -> int:
        return sum(1 for approved in self.approvers.values() if approved)

    @property
    def is_execute_ready(self) -> bool:
        """True when this snapshot shows at least threshold approvals."""
        return self.approval_count >= self.threshold

    @property
    def is_terminal(self) -> bool:
        return isinstance(self.state, str) and self.state in TERMINAL_STATES


def decode_token(payload: Any) -> MultisigToken:
    """Decode the submit response {0: token}."""
    record = WireRecord.from_value(payload, "submit response")
    token = record.require(TOKEN, name="token")
    if not isinstance(token, (bytes, bytearray)):
        raise DecodeError(f"Token must be a byte string, got {type(token).__name__}")
    return MultisigToken(bytes(token))


def _decode_threshold(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise DecodeError(f"Threshold must be a positive integer, got {value!r}")
    return value


def _decode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"Expected a boolean, got {value!r}")
    return value


def _decode_memo(value: Any) -> List[Union[str, bytes]]:
    if not isinstance(value, list) or not all(isinstance(m, (str, bytes)) for m in value):
        raise DecodeError("Memo must be an array of strings or byte strings")
    return list(value)


def _decode_approved(value: Any) -> bool:
    record = WireRecord.from_value(value, "approver info")
    return record.require(APPROVER_APPROVED, _decode_bool, name="approved")


def decode_approvers(value: Any) -> tuple:
    """
    Decode the approvers map.

    Returns:
        ({Address: approved}, [InvalidApprover, ...]); a bad entry is
        reported in the second list, never dropped silently
    """
    if not isinstance(value, dict):
        raise DecodeError(f"Approvers must be a map, got {type(value).__name__}")
    approvers: Dict[Address, bool] = {}
    invalid: List[InvalidApprover] = []
    for identity, info in value.items():
        try:
            approvers[identity_to_address(identity)] = _decode_approved(info)
        except ManyClientError as e:
            logger.warning(f"Invalid approver entry {identity!r}: {e.message}")
            invalid.append(InvalidApprover(identity, info, e))
    return approvers, invalid


def _decode_timeout(record: WireRecord) -> tuple:
    """
    Decode the expiry without letting it sink the snapshot.

    Returns:
        (expire_at, raw, error). raw is a Timestamp when the tag wraps a
        number (servers may send milliseconds), otherwise the value as
        received; error is set when no datetime could be produced
    """
    result = record.field(INFO_TIMEOUT, decode_timestamp, name="timeout")
    if result.state in (FieldState.ABSENT, FieldState.NULL):
        return None, None, None
    if result.state is FieldState.PRESENT:
        return result.value, Timestamp(timestamp_value(record[INFO_TIMEOUT])), None
    try:
        raw = Timestamp(timestamp_value(result.value))
    except ManyClientError:
        raw = result.value
    logger.warning(f"Undecodable multisig timeout {result.value!r}: {result.error.message}")
    return None, raw, result.error


def decode_multisig_info(payload: Any, mapper: Optional[TransactionMapper] = None,
                         token: Optional[bytes] = None) -> MultisigTransactionInfo:
    """
    Decode an account.multisigInfo payload.

    Raises:
        MissingField: If the transaction, submitter, approvers or threshold is absent
        UnexpectedTag, MalformedAddress: If the submitter identity is invalid
        DecodeError: If a load-bearing field has the wrong shape
    """
    mapper = mapper or TransactionMapper()
    record = WireRecord.from_value(payload, "multisig info")

    transaction = record.require(INFO_TRANSACTION, mapper.decode_submitted_txn, name="transaction")
    submitter = record.require(INFO_SUBMITTER, identity_to_address, name="submitter")
    approvers, invalid = record.require(INFO_APPROVERS, decode_approvers, name="approvers")
    threshold = record.require(INFO_THRESHOLD, _decode_threshold, name="threshold")

    memo = record.optional(INFO_MEMO, _decode_memo, name="memo")
    if memo is None:
        legacy = record.optional(INFO_MEMO_LEGACY, name="legacy memo")
        if legacy is not None:
            if not isinstance(legacy, str):
                raise DecodeError("Legacy memo must be text")
            memo = [legacy]

    data = record.optional(INFO_DATA, name="data")
    if data is not None and not isinstance(data, bytes):
        raise DecodeError("Multisig data must be a byte string")

    expire_at, raw_timeout, timeout_error = _decode_timeout(record)

    return MultisigTransactionInfo(
        transaction=transaction,
        submitter=submitter,
        approvers=approvers,
        threshold=threshold,
        execute_automatically=record.optional(
            INFO_EXECUTE_AUTOMATICALLY, _decode_bool, name="executeAutomatically"),
        expire_at=expire_at,
        memo=memo,
        state=record.optional(INFO_STATE, MULTISIG_STATES.decode, name="state"),
        data=data,
        token=token,
        invalid_approvers=invalid,
        raw_timeout=raw_timeout,
        timeout_error=timeout_error,
    )
