"""All-or-nothing scope for one registry call.

Record writes are journaled and events appended while the call runs. If
anything raises, the journal is replayed in reverse, the events are
truncated and the pause flag is restored, so the call has no effect.
Events reach subscribers once the outermost scope commits.

A scope opened inside another one (a value mover calling back during a
transfer) may read and run its guards, but it cannot emit. Every mutating
call emits before it transfers, so a nested call is refused before it can
move value that the enclosing call might still revert.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

from escrow_custody.domain.exceptions import (
    EscrowError,
    ReentrantCallError,
    TransferFailedError,
)
from escrow_custody.logging_config import get_logger

if TYPE_CHECKING:
    from escrow_custody.domain.enums import EventType
    from escrow_custody.domain.models import EscrowEvent, EscrowRecord
    from escrow_custody.infrastructure.event_log import EventLog
    from escrow_custody.infrastructure.ledger import EscrowLedger
    from escrow_custody.services.access_control import AccessControl

logger = get_logger(__name__)

# (escrow_id, record before the write; None if the write inserted it)
_Journal = list[tuple[int, "EscrowRecord | None"]]


class UnitOfWork:
    """Journaled writes and event appends over a ledger and an event log."""

    def __init__(self, ledger: EscrowLedger, events: EventLog, access: AccessControl) -> None:
        self._ledger = ledger
        self._events = events
        self._access = access
        self._scopes: list[tuple[str, _Journal]] = []

    @contextmanager
    def scope(self, operation: str, caller: str, escrow_id: int | None = None) -> Iterator[None]:
        """Run the body as one call: commit on success, roll back on any error."""
        journal: _Journal = []
        events_mark = len(self._events)
        paused_mark = self._access.paused

        self._scopes.append((operation, journal))
        try:
            with structlog.contextvars.bound_contextvars(
                operation=operation, caller=caller, escrow_id=escrow_id
            ):
                yield
        except BaseException as exc:
            self._rollback(journal, events_mark, paused_mark)
            if isinstance(exc, EscrowError):
                logger.info(
                    "escrow.rejected",
                    operation=operation,
                    caller=caller,
                    escrow_id=escrow_id,
                    code=exc.code,
                    reason=exc.message,
                )
            if journal or isinstance(exc, TransferFailedError):
                logger.warning(
                    "escrow.rolled_back",
                    operation=operation,
                    escrow_id=escrow_id,
                    writes=len(journal),
                )
            raise
        finally:
            self._scopes.pop()

        if not self._scopes:
            self._events.publish()

    def write(self, record: EscrowRecord) -> None:
        _, journal = self._scopes[-1]
        journal.append((record.escrow_id, self._ledger.get(record.escrow_id)))
        self._ledger.put(record)

    def emit(
        self,
        event_type: EventType,
        escrow_id: int | None,
        actor: str,
        timestamp: int,
        **data: Any,
    ) -> EscrowEvent:
        if len(self._scopes) > 1:
            operation, _ = self._scopes[-1]
            raise ReentrantCallError(operation)
        return self._events.append(event_type, escrow_id, actor, timestamp, data)

    def _rollback(self, journal: _Journal, events_mark: int, paused_mark: bool) -> None:
        for escrow_id, previous in reversed(journal):
            if previous is None:
                self._ledger.discard(escrow_id)
            else:
                self._ledger.put(previous)
        journal.clear()
        self._events.truncate(events_mark)
        self._access.restore(paused_mark)
