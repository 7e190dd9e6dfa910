"""Payment Service: simulated settlement layer.

Implements the ValueMover protocol without a real settlement layer: each
transfer credits an in-memory balance and generates a fake transaction
reference. Recipients can be marked as rejecting, and can register a hook
that runs while their transfer is in flight, which is how a recipient's own
code would observe (and try to re-enter) the registry on a real ledger.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Callable

from escrow_custody.domain.exceptions import RecipientRejectedError
from escrow_custody.domain.value_mover import TransferReceipt
from escrow_custody.logging_config import get_logger

logger = get_logger(__name__)

ReceiveHook = Callable[[TransferReceipt], None]


class SimulatedValueMover:
    """In-memory ValueMover with fake transaction references."""

    def __init__(self) -> None:
        self._balances: defaultdict[str, int] = defaultdict(int)
        self._transfers: list[TransferReceipt] = []
        self._rejecting: set[str] = set()
        self._hooks: dict[str, ReceiveHook] = {}

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def reject_transfers_to(self, recipient: str) -> None:
        """Make every future transfer to ``recipient`` fail."""
        self._rejecting.add(recipient)

    def accept_transfers_to(self, recipient: str) -> None:
        self._rejecting.discard(recipient)

    def on_receive(self, recipient: str, hook: ReceiveHook) -> None:
        """Run ``hook`` during every transfer to ``recipient``.

        The hook runs before the transfer is recorded; if it raises, the
        transfer fails.
        """
        self._hooks[recipient] = hook

    # ------------------------------------------------------------------
    # ValueMover
    # ------------------------------------------------------------------

    def transfer(self, recipient: str, amount: int, escrow_id: int) -> TransferReceipt:
        """Credit ``amount`` to ``recipient`` and return a receipt."""
        if recipient in self._rejecting:
            logger.warning(
                "payment.transfer_rejected",
                escrow_id=escrow_id,
                recipient=recipient,
                amount=amount,
            )
            raise RecipientRejectedError(recipient, "recipient refuses transfers")

        receipt = TransferReceipt(
            escrow_id=escrow_id,
            recipient=recipient,
            amount=amount,
            reference="0x" + uuid.uuid4().hex + uuid.uuid4().hex,
        )

        hook = self._hooks.get(recipient)
        if hook is not None:
            hook(receipt)

        self._balances[recipient] += amount
        self._transfers.append(receipt)
        logger.info(
            "payment.transfer_simulated",
            escrow_id=escrow_id,
            recipient=recipient,
            amount=amount,
            reference=receipt.reference,
        )
        return receipt

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    @property
    def transfers(self) -> list[TransferReceipt]:
        """Completed transfers, oldest first."""
        return list(self._transfers)
