"""Pydantic schemas."""

from escrow_custody.schemas.escrow import (
    CreateEscrowRequest,
    EscrowDetails,
    EscrowStatusResponse,
)

__all__ = [
    "CreateEscrowRequest",
    "EscrowDetails",
    "EscrowStatusResponse",
]
