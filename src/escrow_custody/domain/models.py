"""Domain records for the escrow registry.

Both types are immutable. A transition produces a new EscrowRecord via
``with_state`` and the registry writes it back to the ledger, so a stored
record is never mutated in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from escrow_custody.domain.enums import EscrowState, EventType, Role


@dataclass(frozen=True)
class EscrowRecord:
    """One buyer/seller/arbiter agreement.

    Attributes:
        escrow_id: Registry-assigned identifier, starting at 1.
        buyer: Identity that created the escrow and funds it.
        seller: Identity paid on release.
        arbiter: Identity that may resolve a funded escrow either way.
        amount: Exact value required to fund; immutable.
        created_at: Creation time in epoch seconds.
        deadline: ``created_at + duration``; the buyer may reclaim after it.
        description: Opaque text.
        state: Current lifecycle state.
    """

    escrow_id: int
    buyer: str
    seller: str
    arbiter: str
    amount: int
    created_at: int
    deadline: int
    description: str = ""
    state: EscrowState = EscrowState.CREATED

    @property
    def funded(self) -> bool:
        """True once the escrow has ever been funded."""
        return self.state is not EscrowState.CREATED

    @property
    def released(self) -> bool:
        return self.state is EscrowState.RELEASED

    @property
    def refunded(self) -> bool:
        return self.state is EscrowState.REFUNDED

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def party(self, role: Role) -> str:
        """Return the identity holding ``role``."""
        return getattr(self, role.value)

    def roles_of(self, identity: str) -> set[Role]:
        """Return every role ``identity`` holds; may be several."""
        return {role for role in Role if self.party(role) == identity}

    def with_state(self, state: EscrowState) -> EscrowRecord:
        return replace(self, state=state)


@dataclass(frozen=True)
class EscrowEvent:
    """A committed, append-only event.

    Attributes:
        sequence: Global emission order, starting at 1.
        event_type: What happened.
        escrow_id: Affected escrow; None for registry-wide events.
        actor: Identity whose call emitted the event.
        timestamp: Clock reading (epoch seconds) at emission.
        data: Parties, amounts and outcome relevant to the event.
    """

    sequence: int
    event_type: EventType
    escrow_id: int | None
    actor: str
    timestamp: int
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> dict:
        """Serialize for indexers."""
        return {
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "escrow_id": self.escrow_id,
            "actor": self.actor,
            "timestamp": self.timestamp,
            "data": dict(self.data),
        }
