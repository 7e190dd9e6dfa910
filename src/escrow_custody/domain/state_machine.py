"""Escrow Record State Machine Guard.

Uses python-statemachine to enforce legal state transitions at the domain level.
No matter which party calls or what the guards decide, an illegal edge
(e.g., CREATED -> RELEASED) will raise TransitionNotAllowed.

The state machine is instantiated per-call at the record's current state and
validates the edge before the record is rewritten.

Transition table:
    CREATED   -> FUNDED     (fund)
    FUNDED    -> RELEASED   (release)
    FUNDED    -> REFUNDED   (refund)
"""

from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from escrow_custody.domain.exceptions import InvalidStateTransitionError

EVENT_NAMES: tuple[str, ...] = ("fund", "release", "refund")


class EscrowStateMachine(StateMachine):
    """State machine that guards escrow record lifecycle transitions.

    Usage:
        sm = EscrowStateMachine(current_state="FUNDED")
        sm.release()      # transitions to RELEASED
        sm.state_value    # "RELEASED"
    """

    # --- States ---
    CREATED = State("CREATED", initial=True)
    FUNDED = State("FUNDED")
    RELEASED = State("RELEASED", final=True)
    REFUNDED = State("REFUNDED", final=True)

    # --- Events / Transitions ---
    fund = CREATED.to(FUNDED)
    release = FUNDED.to(RELEASED)
    refund = FUNDED.to(REFUNDED)

    def __init__(self, current_state: str = "CREATED") -> None:
        """Initialize the state machine at a given state.

        Args:
            current_state: The current EscrowState value (e.g., "FUNDED").
        """
        valid_values = {s.value for s in self.states}
        if current_state not in valid_values:
            valid = ", ".join(sorted(valid_values))
            raise ValueError(
                f"Unknown state '{current_state}'. Valid states: {valid}"
            )
        super().__init__(start_value=current_state)

    @property
    def state_value(self) -> str:
        """Return the current state value as a string (matches EscrowState)."""
        return str(self.current_state.value)

    def get_allowed_events(self) -> list[str]:
        """Return a list of event names that can fire from the current state."""
        return [event.id for event in self.allowed_events]


def next_state(current_state: str, event_name: str) -> str:
    """Fire ``event_name`` from ``current_state`` and return the resulting state.

    Raises:
        InvalidStateTransitionError: If the edge does not exist or the event
            name is unknown.
        ValueError: If ``current_state`` is not a known state.
    """
    if event_name not in EVENT_NAMES:
        raise InvalidStateTransitionError(current_state, event_name)

    sm = EscrowStateMachine(current_state=current_state)
    try:
        getattr(sm, event_name)()
    except TransitionNotAllowed as err:
        raise InvalidStateTransitionError(current_state, event_name) from err
    return sm.state_value

