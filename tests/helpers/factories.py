"""
Test factories for creating test data consistently.

Provides deterministic addresses, send parameters and the wire records the
server returns for multisig snapshots.
"""

from __future__ import annotations
import hashlib
from typing import Any, Dict, List, Optional

from many_client.codec import TaggedValue, WireRecord, address_to_identity
from many_client.runtime.address import Address


def mk_address(seed: int = 1) -> Address:
    """
    Create a deterministic public key address.

    Args:
        seed: Any integer; equal seeds give equal addresses

    Returns:
        Address built from the SHA3-224 hash of the seed
    """
    key_hash = hashlib.sha3_224(seed.to_bytes(8, "big")).digest()
    return Address.from_public_key_hash(key_hash)


def mk_identity(seed: int = 1) -> TaggedValue:
    """Identity-tagged wire form of mk_address(seed)."""
    return address_to_identity(mk_address(seed))


def mk_send_data(amount: int = 1, **overrides: Any) -> Dict[str, Any]:
    """Send parameters as a caller passes them, with textual addresses."""
    data = {
        "from": str(mk_address(321)),
        "to": str(mk_address(123)),
        "symbol": str(mk_address(456)),
        "amount": amount,
    }
    data.update(overrides)
    return data


def mk_send_params_record(amount: Any = 2, include_from: bool = True) -> WireRecord:
    """Send parameter record as found inside a multisig snapshot."""
    record = WireRecord()
    if include_from:
        record[0] = mk_identity(321)
    record[1] = mk_identity(123)
    record[2] = amount
    record[3] = mk_identity(456)
    return record


def mk_multisig_info_payload(
    approvers: Optional[Dict[TaggedValue, Any]] = None,
    threshold: Any = 2,
    state: Any = 0,
    expire_at: Any = 1700000060,
    memo: Optional[List[str]] = None,
) -> WireRecord:
    """
    Build an account.multisigInfo payload.

    Defaults to one approver (the submitter, approved), threshold 2 and the
    pending state.
    """
    submitter = mk_identity(2)
    if approvers is None:
        approvers = {submitter: WireRecord({0: True})}
    payload = WireRecord({
        1: WireRecord({0: [6, 0], 1: mk_send_params_record()}),
        2: submitter,
        3: approvers,
        4: threshold,
        5: False,
    })
    if expire_at is not None:
        payload[6] = TaggedValue(1, expire_at)
    if state is not None:
        payload[8] = state
    payload[9] = memo if memo is not None else ["this is a memo"]
    return payload


def mk_approvers(count: int, approved: bool = True) -> Dict[TaggedValue, WireRecord]:
    """Approvers map with count distinct identities."""
    return {mk_identity(100 + i): WireRecord({0: approved}) for i in range(count)}
