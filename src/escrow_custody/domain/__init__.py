"""Domain layer: escrow records, guards, errors and the lifecycle state machine.

Nothing here performs I/O. The only third-party import is python-statemachine,
used by ``EscrowStateMachine``.
"""

from escrow_custody.domain.enums import EscrowState, EventType, Role
from escrow_custody.domain.exceptions import (
    AuthorizationError,
    EscrowError,
    EscrowNotFoundError,
    EscrowStateError,
    InvalidStateTransitionError,
    InvalidValueError,
    TransferFailedError,
)
from escrow_custody.domain.models import EscrowEvent, EscrowRecord
from escrow_custody.domain.state_machine import EscrowStateMachine, next_state
from escrow_custody.domain.value_mover import TransferReceipt, ValueMover

__all__ = [
    "EscrowState",
    "EventType",
    "Role",
    "AuthorizationError",
    "EscrowError",
    "EscrowNotFoundError",
    "EscrowStateError",
    "InvalidStateTransitionError",
    "InvalidValueError",
    "TransferFailedError",
    "EscrowEvent",
    "EscrowRecord",
    "EscrowStateMachine",
    "next_state",
    "TransferReceipt",
    "ValueMover",
]
