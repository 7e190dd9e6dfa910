"""Administrative pause overlay.

A single owner, fixed at construction, may pause and unpause the registry.
While paused every mutating registry entry point is rejected; queries stay
available. The overlay knows nothing about individual escrow records.
"""

from __future__ import annotations

from escrow_custody.domain.exceptions import (
    NotOwnerError,
    RegistryNotPausedError,
    RegistryPausedError,
)
from escrow_custody.logging_config import get_logger

logger = get_logger(__name__)


class AccessControl:
    """Owner-gated global pause switch."""

    def __init__(self, owner: str) -> None:
        if not owner:
            raise ValueError("AccessControl requires a non-empty owner identity")
        self._owner = owner
        self._paused = False

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def paused(self) -> bool:
        return self._paused

    def require_owner(self, caller: str) -> None:
        if caller != self._owner:
            raise NotOwnerError(caller)

    def require_not_paused(self) -> None:
        if self._paused:
            raise RegistryPausedError()

    def pause(self, caller: str) -> None:
        self.require_owner(caller)
        if self._paused:
            raise RegistryPausedError()
        self._paused = True
        logger.info("access.paused", owner=caller)

    def unpause(self, caller: str) -> None:
        self.require_owner(caller)
        if not self._paused:
            raise RegistryNotPausedError()
        self._paused = False
        logger.info("access.unpaused", owner=caller)

    def restore(self, paused: bool) -> None:
        """Reset the flag to a previously observed value (call rollback)."""
        self._paused = paused
