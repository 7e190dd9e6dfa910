"""Infrastructure adapters: record storage, the event log and call scoping."""

from escrow_custody.infrastructure.event_log import EventLog, EventSubscriber
from escrow_custody.infrastructure.ledger import EscrowLedger, InMemoryLedger
from escrow_custody.infrastructure.unit_of_work import UnitOfWork

__all__ = ["EventLog", "EventSubscriber", "EscrowLedger", "InMemoryLedger", "UnitOfWork"]
