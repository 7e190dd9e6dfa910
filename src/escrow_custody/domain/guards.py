"""Precondition guards for escrow operations.

Each guard is a pure predicate over ``(record, context)`` that returns the
error it would raise, or None when satisfied. Guards never mutate anything,
so an operation evaluates its guard chain first and only then touches state.

Chains are evaluated in order and short-circuit: the first failing guard
determines the error the caller sees. The order below is significant, e.g.
a seller releasing an unfunded escrow gets NotFundedError, while a stranger
doing the same gets NotSellerError.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from escrow_custody.domain.enums import EscrowState
from escrow_custody.domain.exceptions import (
    AlreadyFundedError,
    DeadlineNotReachedError,
    EscrowError,
    EscrowTerminatedError,
    IncorrectFundingAmountError,
    NotArbiterError,
    NotBuyerError,
    NotFundedError,
    NotSellerError,
)
from escrow_custody.domain.models import EscrowRecord


@dataclass(frozen=True)
class CallContext:
    """Explicit call context: who is calling, when, and with how much value."""

    caller: str
    now: int
    attached_value: int = 0


Guard = Callable[[EscrowRecord, CallContext], EscrowError | None]


# --- Role guards ---


def is_buyer(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    if ctx.caller != record.buyer:
        return NotBuyerError(ctx.caller, record.escrow_id)
    return None


def is_seller(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    if ctx.caller != record.seller:
        return NotSellerError(ctx.caller, record.escrow_id)
    return None


def is_arbiter(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    if ctx.caller != record.arbiter:
        return NotArbiterError(ctx.caller, record.escrow_id)
    return None


# --- State guards ---


def not_terminal(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    if record.is_terminal:
        return EscrowTerminatedError(record.escrow_id, record.state.value)
    return None


def not_funded(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    if record.funded:
        return AlreadyFundedError(record.escrow_id)
    return None


def is_funded(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    if record.state is not EscrowState.FUNDED:
        return NotFundedError(record.escrow_id)
    return None


# --- Value and timing guards ---


def exact_value(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    value = ctx.attached_value
    # 1.0 and True compare equal to 1; only an int of the exact amount funds
    if isinstance(value, bool) or not isinstance(value, int) or value != record.amount:
        return IncorrectFundingAmountError(record.escrow_id, record.amount, ctx.attached_value)
    return None


def deadline_passed(record: EscrowRecord, ctx: CallContext) -> EscrowError | None:
    # strictly after: a refund at exactly the deadline second is too early
    if not ctx.now > record.deadline:
        return DeadlineNotReachedError(record.escrow_id, record.deadline, ctx.now)
    return None


# --- Composition ---


def first_failure(
    guards: Sequence[Guard], record: EscrowRecord, ctx: CallContext
) -> EscrowError | None:
    """Return the error of the first failing guard, or None if all pass."""
    for guard in guards:
        error = guard(record, ctx)
        if error is not None:
            return error
    return None


def enforce(guards: Sequence[Guard], record: EscrowRecord, ctx: CallContext) -> None:
    """Raise the first failing guard's error."""
    error = first_failure(guards, record, ctx)
    if error is not None:
        raise error


FUND_GUARDS: tuple[Guard, ...] = (is_buyer, not_terminal, not_funded, exact_value)
RELEASE_GUARDS: tuple[Guard, ...] = (is_seller, not_terminal, is_funded)
REFUND_GUARDS: tuple[Guard, ...] = (is_buyer, not_terminal, is_funded, deadline_passed)
DISPUTE_GUARDS: tuple[Guard, ...] = (is_arbiter, not_terminal, is_funded)
