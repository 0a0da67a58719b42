from .mocks import MockTransport
from .factories import (
    mk_address,
    mk_identity,
    mk_send_data,
    mk_send_params_record,
    mk_multisig_info_payload,
    mk_approvers,
)

__all__ = [
    "MockTransport",
    "mk_address",
    "mk_identity",
    "mk_send_data",
    "mk_send_params_record",
    "mk_multisig_info_payload",
    "mk_approvers",
]
