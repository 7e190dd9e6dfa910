"""Application services: registry dispatch, access control, settlement."""

from escrow_custody.services.access_control import AccessControl
from escrow_custody.services.escrow_registry import EscrowRegistry, system_clock
from escrow_custody.services.payment_service import SimulatedValueMover

__all__ = ["AccessControl", "EscrowRegistry", "SimulatedValueMover", "system_clock"]
