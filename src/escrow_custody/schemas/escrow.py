"""Pydantic schemas for the escrow registry.

These schemas define the validated input of ``create_escrow`` and the
snapshots returned by registry queries. They are separate from the domain
records so that the query shape can stay stable while the records evolve.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------


class CreateEscrowRequest(BaseModel):
    """Validated parameters of a new escrow."""

    model_config = ConfigDict(frozen=True)

    buyer: str = Field(
        ...,
        min_length=1,
        description="Identity of the creator; always the buyer",
    )
    seller: str = Field(
        ...,
        min_length=1,
        description="Identity paid on release",
    )
    arbiter: str = Field(
        ...,
        min_length=1,
        description="Identity that may resolve a funded escrow either way",
    )
    amount: int = Field(
        ...,
        gt=0,
        strict=True,
        description="Exact value the buyer must attach when funding",
    )
    duration_seconds: int = Field(
        ...,
        ge=0,
        strict=True,
        description="Seconds from creation until the buyer may reclaim funds",
        examples=[86400],
    )
    description: str = Field(
        default="",
        description="Opaque text stored with the record",
    )


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------


class EscrowDetails(BaseModel):
    """Full snapshot of one escrow record."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    escrow_id: int
    buyer: str
    seller: str
    arbiter: str
    amount: int
    created_at: int
    deadline: int
    description: str
    state: str
    funded: bool
    released: bool
    refunded: bool


class EscrowStatusResponse(BaseModel):
    """Lightweight status check."""

    escrow_id: int
    state: str
    allowed_events: list[str] = Field(
        description="State machine events that can fire from the current state"
    )
    seconds_until_refundable: int = Field(
        description="Seconds until request_refund stops failing on the deadline; 0 once open"
    )
