"""Domain enumerations for the escrow registry.

These enums define the canonical states, roles and event types used
throughout the system. They are framework-agnostic.
"""

import enum


class EscrowState(enum.StrEnum):
    """Lifecycle states of an escrow record.

    State transitions are enforced by the EscrowStateMachine guard.
    See domain/state_machine.py for the transition table.
    """

    CREATED = "CREATED"
    FUNDED = "FUNDED"
    RELEASED = "RELEASED"
    REFUNDED = "REFUNDED"

    @property
    def is_terminal(self) -> bool:
        return self in (EscrowState.RELEASED, EscrowState.REFUNDED)


class Role(enum.StrEnum):
    """Parties that may act on an escrow record."""

    BUYER = "buyer"
    SELLER = "seller"
    ARBITER = "arbiter"


class EventType(enum.StrEnum):
    """Types of events emitted by the registry.

    Every state-changing call produces exactly one event.
    This is the append-only trail consumed by indexers and auditors.
    """

    # Lifecycle events
    CREATED = "CREATED"
    FUNDED = "FUNDED"

    # Settlement events
    RELEASED = "RELEASED"
    REFUND_REQUESTED = "REFUND_REQUESTED"
    DISPUTE_RESOLVED = "DISPUTE_RESOLVED"

    # Administrative events
    PAUSED = "PAUSED"
    UNPAUSED = "UNPAUSED"
