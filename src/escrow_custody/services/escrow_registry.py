"""Escrow Registry: dispatch, authorization and custody for escrow records.

This is the application layer that coordinates between:
    - Access control overlay (global pause)
    - Guards and the domain state machine (per-record preconditions)
    - The ledger (record storage) through a unit of work
    - The value mover (transfers out of custody)

Every mutating call runs inside ``UnitOfWork.scope`` and has no effect unless
it completes. A settling call writes the terminal state before the transfer,
so a recipient re-entering the same record mid-transfer finds it terminal.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from escrow_custody.domain.enums import EscrowState, EventType
from escrow_custody.domain.exceptions import (
    EscrowNotFoundError,
    InvalidEscrowParametersError,
    TransferFailedError,
)
from escrow_custody.domain.guards import (
    DISPUTE_GUARDS,
    FUND_GUARDS,
    REFUND_GUARDS,
    RELEASE_GUARDS,
    CallContext,
    enforce,
)
from escrow_custody.domain.models import EscrowEvent, EscrowRecord
from escrow_custody.domain.state_machine import EscrowStateMachine, next_state
from escrow_custody.infrastructure.event_log import EventLog, EventSubscriber
from escrow_custody.infrastructure.ledger import InMemoryLedger
from escrow_custody.infrastructure.unit_of_work import UnitOfWork
from escrow_custody.logging_config import get_logger
from escrow_custody.schemas.escrow import (
    CreateEscrowRequest,
    EscrowDetails,
    EscrowStatusResponse,
)
from escrow_custody.services.access_control import AccessControl

if TYPE_CHECKING:
    from escrow_custody.config import Settings
    from escrow_custody.domain.guards import Guard
    from escrow_custody.domain.value_mover import TransferReceipt, ValueMover
    from escrow_custody.infrastructure.ledger import EscrowLedger

logger = get_logger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    """Current UTC time in whole epoch seconds."""
    return int(datetime.now(UTC).timestamp())


class EscrowRegistry:
    """Owns every escrow record and dispatches all operations on them."""

    def __init__(
        self,
        owner: str,
        value_mover: ValueMover,
        ledger: EscrowLedger | None = None,
        clock: Clock = system_clock,
        event_log: EventLog | None = None,
        enforce_distinct_parties: bool = False,
        max_description_length: int | None = None,
    ) -> None:
        self._access = AccessControl(owner)
        self._mover = value_mover
        self._ledger = ledger if ledger is not None else InMemoryLedger()
        self._clock = clock
        self._events = event_log if event_log is not None else EventLog()
        self._uow = UnitOfWork(self._ledger, self._events, self._access)
        self._enforce_distinct_parties = enforce_distinct_parties
        self._max_description_length = max_description_length

    @classmethod
    def from_settings(
        cls,
        owner: str,
        value_mover: ValueMover | None = None,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> EscrowRegistry:
        """Build a registry whose creation policy comes from Settings.

        Without an explicit ``value_mover`` a SimulatedValueMover is used,
        which is only allowed while ``simulate_transfers`` is on.
        """
        from escrow_custody.config import get_settings
        from escrow_custody.services.payment_service import SimulatedValueMover

        settings = settings or get_settings()
        if value_mover is None:
            if not settings.simulate_transfers:
                raise ValueError("A ValueMover is required when simulate_transfers is off")
            value_mover = SimulatedValueMover()
        return cls(
            owner=owner,
            value_mover=value_mover,
            enforce_distinct_parties=settings.enforce_distinct_parties,
            max_description_length=settings.max_description_length,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Creation and funding
    # ------------------------------------------------------------------

    def create_escrow(
        self,
        caller: str,
        seller: str,
        arbiter: str,
        amount: int,
        duration_seconds: int,
        description: str = "",
    ) -> int:
        """Create a new escrow in CREATED state with ``caller`` as buyer.

        Returns:
            The new escrow id.
        """
        with self._uow.scope("create_escrow", caller):
            self._access.require_not_paused()
            request = self._validate_create(
                caller, seller, arbiter, amount, duration_seconds, description
            )

            now = self._clock()
            record = EscrowRecord(
                escrow_id=self._ledger.allocate_id(),
                buyer=request.buyer,
                seller=request.seller,
                arbiter=request.arbiter,
                amount=request.amount,
                created_at=now,
                deadline=now + request.duration_seconds,
                description=request.description,
            )
            self._uow.write(record)
            self._uow.emit(
                EventType.CREATED,
                record.escrow_id,
                caller,
                now,
                buyer=record.buyer,
                seller=record.seller,
                arbiter=record.arbiter,
                amount=record.amount,
                deadline=record.deadline,
                description=record.description,
            )

        logger.info(
            "escrow.created",
            escrow_id=record.escrow_id,
            buyer=record.buyer,
            amount=record.amount,
            deadline=record.deadline,
        )
        return record.escrow_id

    def fund_escrow(self, caller: str, escrow_id: int, attached_value: int) -> None:
        """Take ``attached_value`` into custody and move the escrow to FUNDED."""
        with self._uow.scope("fund_escrow", caller, escrow_id):
            record, now = self._authorize(caller, escrow_id, FUND_GUARDS, attached_value)
            self._transition(record, "fund")
            self._uow.emit(
                EventType.FUNDED, escrow_id, caller, now, buyer=record.buyer, amount=attached_value
            )

        logger.info("escrow.funded", escrow_id=escrow_id, amount=attached_value)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def release_funds(self, caller: str, escrow_id: int) -> TransferReceipt:
        """Seller collects a funded escrow."""
        with self._uow.scope("release_funds", caller, escrow_id):
            record, now = self._authorize(caller, escrow_id, RELEASE_GUARDS)
            receipt = self._settle(
                record,
                caller,
                now,
                pay_seller=True,
                event_type=EventType.RELEASED,
                seller=record.seller,
                amount=record.amount,
            )

        logger.info("escrow.released", escrow_id=escrow_id, seller=record.seller)
        return receipt

    def request_refund(self, caller: str, escrow_id: int) -> TransferReceipt:
        """Buyer reclaims a funded escrow strictly after its deadline."""
        with self._uow.scope("request_refund", caller, escrow_id):
            record, now = self._authorize(caller, escrow_id, REFUND_GUARDS)
            receipt = self._settle(
                record,
                caller,
                now,
                pay_seller=False,
                event_type=EventType.REFUND_REQUESTED,
                buyer=record.buyer,
                amount=record.amount,
            )

        logger.info("escrow.refunded", escrow_id=escrow_id, buyer=record.buyer)
        return receipt

    def resolve_dispute(self, caller: str, escrow_id: int, to_seller: bool) -> TransferReceipt:
        """Arbiter settles a funded escrow in either direction, at any time."""
        with self._uow.scope("resolve_dispute", caller, escrow_id):
            record, now = self._authorize(caller, escrow_id, DISPUTE_GUARDS)
            recipient = record.seller if to_seller else record.buyer
            receipt = self._settle(
                record,
                caller,
                now,
                pay_seller=to_seller,
                event_type=EventType.DISPUTE_RESOLVED,
                arbiter=record.arbiter,
                to_seller=to_seller,
                recipient=recipient,
                amount=record.amount,
            )

        logger.info(
            "escrow.dispute_resolved",
            escrow_id=escrow_id,
            to_seller=to_seller,
            recipient=recipient,
        )
        return receipt

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    def pause(self, caller: str) -> None:
        """Owner blocks every mutating entry point."""
        with self._uow.scope("pause", caller):
            self._access.pause(caller)
            self._uow.emit(EventType.PAUSED, None, caller, self._clock(), owner=caller)

    def unpause(self, caller: str) -> None:
        with self._uow.scope("unpause", caller):
            self._access.unpause(caller)
            self._uow.emit(EventType.UNPAUSED, None, caller, self._clock(), owner=caller)

    @property
    def owner(self) -> str:
        return self._access.owner

    @property
    def paused(self) -> bool:
        return self._access.paused

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_escrow_details(self, escrow_id: int) -> EscrowDetails:
        """Return a snapshot of the record. Available while paused."""
        return EscrowDetails.model_validate(self._get_or_raise(escrow_id))

    def get_record(self, escrow_id: int) -> EscrowRecord:
        return self._get_or_raise(escrow_id)

    def get_status(self, escrow_id: int) -> EscrowStatusResponse:
        """Get the record state with allowed events and refund timing."""
        record = self._get_or_raise(escrow_id)
        sm = EscrowStateMachine(current_state=record.state.value)
        return EscrowStatusResponse(
            escrow_id=escrow_id,
            state=record.state.value,
            allowed_events=sm.get_allowed_events(),
            seconds_until_refundable=max(0, record.deadline + 1 - self._clock()),
        )

    def get_events(self, escrow_id: int | None = None) -> list[EscrowEvent]:
        """Get the event trail of one escrow, or of the whole registry."""
        if escrow_id is not None:
            self._get_or_raise(escrow_id)
        return self._events.events(escrow_id)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Receive every committed event, in order."""
        self._events.subscribe(subscriber)

    def escrows_for_party(self, identity: str) -> list[int]:
        """Ids of every escrow in which ``identity`` holds any role."""
        return [r.escrow_id for r in self._ledger.records() if r.roles_of(identity)]

    def escrows_in_state(self, state: EscrowState) -> list[int]:
        return [r.escrow_id for r in self._ledger.records() if r.state is state]

    def held_in_custody(self) -> int:
        """Total value currently held for funded, unsettled escrows."""
        return sum(r.amount for r in self._ledger.records() if r.state is EscrowState.FUNDED)

    @property
    def escrow_count(self) -> int:
        return sum(1 for _ in self._ledger.records())

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, escrow_id: int) -> EscrowRecord:
        record = self._ledger.get(escrow_id)
        if record is None:
            raise EscrowNotFoundError(escrow_id)
        return record

    def _authorize(
        self,
        caller: str,
        escrow_id: int,
        guards: tuple[Guard, ...],
        attached_value: int = 0,
    ) -> tuple[EscrowRecord, int]:
        self._access.require_not_paused()
        record = self._get_or_raise(escrow_id)
        now = self._clock()
        enforce(guards, record, CallContext(caller, now, attached_value))
        return record, now

    def _transition(self, record: EscrowRecord, event_name: str) -> EscrowRecord:
        """Validate the edge with the state machine and write the new record."""
        updated = record.with_state(EscrowState(next_state(record.state.value, event_name)))
        self._uow.write(updated)
        return updated

    def _settle(
        self,
        record: EscrowRecord,
        caller: str,
        now: int,
        pay_seller: bool,
        event_type: EventType,
        **event_data: Any,
    ) -> TransferReceipt:
        """Move to a terminal state, then pay out. The transfer is always last."""
        settled = self._transition(record, "release" if pay_seller else "refund")
        self._uow.emit(event_type, record.escrow_id, caller, now, **event_data)

        recipient = settled.seller if pay_seller else settled.buyer
        try:
            return self._mover.transfer(recipient, settled.amount, settled.escrow_id)
        except Exception as err:
            raise TransferFailedError(
                settled.escrow_id, recipient, settled.amount, reason=str(err)
            ) from err

    def _validate_create(
        self,
        buyer: str,
        seller: str,
        arbiter: str,
        amount: int,
        duration_seconds: int,
        description: str,
    ) -> CreateEscrowRequest:
        try:
            request = CreateEscrowRequest(
                buyer=buyer,
                seller=seller,
                arbiter=arbiter,
                amount=amount,
                duration_seconds=duration_seconds,
                description=description,
            )
        except ValidationError as err:
            raise InvalidEscrowParametersError(
                "Invalid escrow parameters", errors=err.errors(include_url=False)
            ) from err

        if self._enforce_distinct_parties and len({buyer, seller, arbiter}) < 3:
            raise InvalidEscrowParametersError("Buyer, seller and arbiter must be distinct")
        if (
            self._max_description_length is not None
            and len(description) > self._max_description_length
        ):
            raise InvalidEscrowParametersError(
                f"Description exceeds {self._max_description_length} characters"
            )
        return request
