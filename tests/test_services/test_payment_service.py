"""Tests for the simulated value mover."""

from __future__ import annotations

import pytest

from escrow_custody.domain.exceptions import RecipientRejectedError
from escrow_custody.domain.value_mover import TransferReceipt, ValueMover
from escrow_custody.services.payment_service import SimulatedValueMover


class TestSimulatedValueMover:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(SimulatedValueMover(), ValueMover)

    def test_transfer_credits_recipient(self) -> None:
        mover = SimulatedValueMover()
        receipt = mover.transfer("alice", 25, escrow_id=4)

        assert receipt.recipient == "alice"
        assert receipt.amount == 25
        assert receipt.escrow_id == 4
        assert receipt.reference.startswith("0x")
        assert len(receipt.reference) == 66
        assert mover.balance_of("alice") == 25
        assert mover.balance_of("bob") == 0
        assert mover.transfers == [receipt]

    def test_references_are_unique(self) -> None:
        mover = SimulatedValueMover()
        first = mover.transfer("alice", 1, 1)
        second = mover.transfer("alice", 1, 2)
        assert first.reference != second.reference
        assert mover.balance_of("alice") == 2

    def test_rejecting_recipient(self) -> None:
        mover = SimulatedValueMover()
        mover.reject_transfers_to("alice")

        with pytest.raises(RecipientRejectedError):
            mover.transfer("alice", 5, 1)
        assert mover.balance_of("alice") == 0
        assert mover.transfers == []

        mover.accept_transfers_to("alice")
        mover.transfer("alice", 5, 1)
        assert mover.balance_of("alice") == 5

    def test_hook_runs_before_credit(self) -> None:
        mover = SimulatedValueMover()
        seen: list[tuple[TransferReceipt, int]] = []
        mover.on_receive("alice", lambda r: seen.append((r, mover.balance_of("alice"))))

        receipt = mover.transfer("alice", 5, 1)
        assert seen == [(receipt, 0)]

    def test_failing_hook_aborts_transfer(self) -> None:
        mover = SimulatedValueMover()

        def refuse(receipt: TransferReceipt) -> None:
            raise RecipientRejectedError(receipt.recipient)

        mover.on_receive("alice", refuse)
        with pytest.raises(RecipientRejectedError):
            mover.transfer("alice", 5, 1)
        assert mover.balance_of("alice") == 0

    def test_receipt_to_dict(self) -> None:
        receipt = TransferReceipt(escrow_id=1, recipient="a", amount=2, reference="0x1")
        assert receipt.to_dict() == {
            "escrow_id": 1,
            "recipient": "a",
            "amount": 2,
            "reference": "0x1",
        }
