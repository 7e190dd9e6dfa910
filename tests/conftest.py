"""Shared test fixtures for the escrow registry test suite.

Provides:
    - A controllable clock
    - A simulated value mover
    - A fresh registry per test, plus helpers to reach each lifecycle state
"""

from __future__ import annotations

import pytest

from escrow_custody.services.escrow_registry import EscrowRegistry
from escrow_custody.services.payment_service import SimulatedValueMover

OWNER = "0xOwner"
BUYER = "0xBuyer"
SELLER = "0xSeller"
ARBITER = "0xArbiter"
STRANGER = "0xStranger"

START_TIME = 1_700_000_000
ONE_DAY = 86_400


class FakeClock:
    """Deterministic clock in epoch seconds."""

    def __init__(self, now: int = START_TIME) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Registry Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mover() -> SimulatedValueMover:
    return SimulatedValueMover()


@pytest.fixture
def registry(clock: FakeClock, mover: SimulatedValueMover) -> EscrowRegistry:
    return EscrowRegistry(owner=OWNER, value_mover=mover, clock=clock)


@pytest.fixture
def escrow_id(registry: EscrowRegistry) -> int:
    """An escrow in CREATED state: amount 100, one-day deadline."""
    return registry.create_escrow(
        BUYER, SELLER, ARBITER, amount=100, duration_seconds=ONE_DAY, description="laptop"
    )


@pytest.fixture
def funded_id(registry: EscrowRegistry, escrow_id: int) -> int:
    """The same escrow, funded by the buyer."""
    registry.fund_escrow(BUYER, escrow_id, attached_value=100)
    return escrow_id
