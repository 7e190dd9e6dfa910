"""Value Mover Protocol.

Defines the interface the registry uses to move value out of custody.
This is a Protocol (structural subtyping) so concrete movers don't need
to inherit from a base class; they just need to match the shape.

The domain layer has ZERO imports from any settlement layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransferReceipt:
    """Outcome of a successful transfer.

    Attributes:
        escrow_id: The escrow the value was held for.
        recipient: Identity that received the value.
        amount: Value moved.
        reference: Settlement-layer reference (e.g., a transaction hash).
    """

    escrow_id: int
    recipient: str
    amount: int
    reference: str = ""

    def to_dict(self) -> dict:
        return {
            "escrow_id": self.escrow_id,
            "recipient": self.recipient,
            "amount": self.amount,
            "reference": self.reference,
        }


@runtime_checkable
class ValueMover(Protocol):
    """Protocol that every settlement implementation must satisfy.

    The registry commits the record's terminal state before calling
    ``transfer``. Implementations signal rejection by raising; any exception
    aborts the whole registry call and reverts its state.

    Concrete implementations:
        - services/payment_service.py  (SimulatedValueMover)
    """

    def transfer(self, recipient: str, amount: int, escrow_id: int) -> TransferReceipt:
        """Move ``amount`` out of custody to ``recipient``.

        Returns:
            A TransferReceipt describing the completed movement.
        """
        ...
