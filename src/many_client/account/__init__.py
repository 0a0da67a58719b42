"""
Account namespace: account management and multisig transactions.
"""

from .types import (
    ACCOUNT_ROLES,
    ACCOUNT_FEATURE_TYPES,
    MULTISIG_ARGUMENTS,
    MULTISIG_STATES,
    AccountFeature,
    AccountInfo,
    make_account_info,
)
from .multisig import (
    MultisigDefaults,
    MultisigToken,
    MultisigTransactionInfo,
    InvalidApprover,
    SubmitMultisigArgs,
    decode_multisig_info,
)
from .module import AccountModule

__all__ = [
    "ACCOUNT_ROLES",
    "ACCOUNT_FEATURE_TYPES",
    "MULTISIG_ARGUMENTS",
    "MULTISIG_STATES",
    "AccountFeature",
    "AccountInfo",
    "make_account_info",
    "MultisigDefaults",
    "MultisigToken",
    "MultisigTransactionInfo",
    "InvalidApprover",
    "SubmitMultisigArgs",
    "decode_multisig_info",
    "AccountModule",
]
