"""Key-value ledger holding escrow records.

The durable ledger itself lives outside this package; ``EscrowLedger`` is
the shape the registry expects from it. ``InMemoryLedger`` backs tests and
embedded use. Ledgers never manage transactions (see ``UnitOfWork``) and
never inspect record contents.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from escrow_custody.domain.models import EscrowRecord


@runtime_checkable
class EscrowLedger(Protocol):
    """Storage for escrow records keyed by integer id."""

    def allocate_id(self) -> int:
        """Return the next id. Strictly increasing from 1 and never reissued."""
        ...

    def get(self, escrow_id: int) -> EscrowRecord | None:
        """Fetch a record by id, or None."""
        ...

    def put(self, record: EscrowRecord) -> None:
        """Insert or overwrite the record stored under ``record.escrow_id``."""
        ...

    def discard(self, escrow_id: int) -> None:
        """Remove a record. Only used to revert an uncommitted insert."""
        ...

    def records(self) -> Iterator[EscrowRecord]:
        """Iterate over all records in id order."""
        ...


class InMemoryLedger:
    """Dict-backed EscrowLedger."""

    def __init__(self) -> None:
        self._records: dict[int, EscrowRecord] = {}
        self._last_id = 0

    def allocate_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def get(self, escrow_id: int) -> EscrowRecord | None:
        return self._records.get(escrow_id)

    def put(self, record: EscrowRecord) -> None:
        if record.escrow_id < 1 or record.escrow_id > self._last_id:
            raise ValueError(f"Escrow id {record.escrow_id} was never allocated")
        self._records[record.escrow_id] = record

    def discard(self, escrow_id: int) -> None:
        self._records.pop(escrow_id, None)

    def records(self) -> Iterator[EscrowRecord]:
        for escrow_id in sorted(self._records):
            yield self._records[escrow_id]

    def __len__(self) -> int:
        return len(self._records)
