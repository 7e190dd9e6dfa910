"""Domain exceptions for the escrow registry.

Every failure is a precondition violation surfaced synchronously to the
caller. Each exception carries a stable machine-readable ``code`` so that a
host environment can map it onto its own rejection format.
"""

from __future__ import annotations


class EscrowError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "ESCROW_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class EscrowNotFoundError(EscrowError):
    """Raised when an escrow id does not exist."""

    def __init__(self, escrow_id: int) -> None:
        super().__init__(
            message=f"Escrow not found: {escrow_id}",
            code="ESCROW_NOT_FOUND",
        )
        self.escrow_id = escrow_id


# --- Authorization Errors ---


class AuthorizationError(EscrowError):
    """Raised when the caller does not hold the role an operation requires."""

    def __init__(self, caller: str, role: str, escrow_id: int | None = None) -> None:
        target = f"escrow {escrow_id}" if escrow_id is not None else "registry"
        super().__init__(
            message=f"Caller {caller} is not the {role} of {target}",
            code="UNAUTHORIZED",
        )
        self.caller = caller
        self.role = role
        self.escrow_id = escrow_id


class NotBuyerError(AuthorizationError):
    def __init__(self, caller: str, escrow_id: int) -> None:
        super().__init__(caller, "buyer", escrow_id)
        self.code = "NOT_BUYER"


class NotSellerError(AuthorizationError):
    def __init__(self, caller: str, escrow_id: int) -> None:
        super().__init__(caller, "seller", escrow_id)
        self.code = "NOT_SELLER"


class NotArbiterError(AuthorizationError):
    def __init__(self, caller: str, escrow_id: int) -> None:
        super().__init__(caller, "arbiter", escrow_id)
        self.code = "NOT_ARBITER"


class NotOwnerError(AuthorizationError):
    def __init__(self, caller: str) -> None:
        super().__init__(caller, "owner")
        self.code = "NOT_OWNER"


# --- State Errors ---


class EscrowStateError(EscrowError):
    """Raised when a record (or the registry) is in the wrong state."""

    def __init__(self, message: str, code: str = "INVALID_STATE") -> None:
        super().__init__(message=message, code=code)


class AlreadyFundedError(EscrowStateError):
    def __init__(self, escrow_id: int) -> None:
        super().__init__(f"Escrow already funded: {escrow_id}", code="ALREADY_FUNDED")
        self.escrow_id = escrow_id


class NotFundedError(EscrowStateError):
    def __init__(self, escrow_id: int) -> None:
        super().__init__(f"Escrow not funded: {escrow_id}", code="NOT_FUNDED")
        self.escrow_id = escrow_id


class EscrowTerminatedError(EscrowStateError):
    """Raised on any mutation of a RELEASED or REFUNDED record."""

    def __init__(self, escrow_id: int, state: str) -> None:
        super().__init__(
            f"Escrow {escrow_id} is already {state}",
            code="ESCROW_TERMINATED",
        )
        self.escrow_id = escrow_id
        self.state = state


class RegistryPausedError(EscrowStateError):
    def __init__(self) -> None:
        super().__init__("Registry is paused", code="REGISTRY_PAUSED")


class RegistryNotPausedError(EscrowStateError):
    def __init__(self) -> None:
        super().__init__("Registry is not paused", code="REGISTRY_NOT_PAUSED")


class ReentrantCallError(EscrowStateError):
    """Raised when a mutating call arrives while another call is still open.

    The only way in is a value mover calling back during a transfer. The
    enclosing call may still revert, so nothing may commit underneath it.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot {operation} while another registry call is in progress",
            code="REENTRANT_CALL",
        )
        self.operation = operation


class InvalidStateTransitionError(EscrowStateError):
    """Raised when the state machine refuses a transition.

    Example: CREATED -> RELEASED (must go through FUNDED)
    """

    def __init__(self, current_state: str, event_name: str) -> None:
        super().__init__(
            f"Invalid state transition: {event_name} from {current_state}",
            code="INVALID_STATE_TRANSITION",
        )
        self.current_state = current_state
        self.event_name = event_name


# --- Value Errors ---


class InvalidValueError(EscrowError):
    """Base exception for value and parameter violations."""

    def __init__(self, message: str, code: str = "INVALID_VALUE") -> None:
        super().__init__(message=message, code=code)


class IncorrectFundingAmountError(InvalidValueError):
    def __init__(self, escrow_id: int, required: int, attached: int) -> None:
        super().__init__(
            f"Escrow {escrow_id} requires exactly {required}, got {attached}",
            code="INCORRECT_AMOUNT",
        )
        self.escrow_id = escrow_id
        self.required = required
        self.attached = attached


class InvalidEscrowParametersError(InvalidValueError):
    def __init__(self, message: str, errors: list | None = None) -> None:
        super().__init__(message, code="INVALID_PARAMETERS")
        self.errors = errors or []


# --- Timing Errors ---


class DeadlineNotReachedError(EscrowError):
    """Raised when a refund is requested before the deadline has passed."""

    def __init__(self, escrow_id: int, deadline: int, now: int) -> None:
        super().__init__(
            message=f"Escrow {escrow_id} deadline {deadline} not yet passed (now={now})",
            code="DEADLINE_NOT_REACHED",
        )
        self.escrow_id = escrow_id
        self.deadline = deadline
        self.now = now


# --- Transfer Errors ---


class TransferFailedError(EscrowError):
    """Raised when the value mover fails; the whole call is reverted."""

    def __init__(self, escrow_id: int, recipient: str, amount: int, reason: str = "") -> None:
        message = f"Transfer of {amount} to {recipient} for escrow {escrow_id} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, code="TRANSFER_FAILED")
        self.escrow_id = escrow_id
        self.recipient = recipient
        self.amount = amount


class RecipientRejectedError(EscrowError):
    """Raised by a value mover when the recipient refuses the transfer."""

    def __init__(self, recipient: str, reason: str = "") -> None:
        message = f"Recipient {recipient} rejected the transfer"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, code="RECIPIENT_REJECTED")
        self.recipient = recipient
