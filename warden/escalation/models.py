"""Escalation request model."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class EscalationRequest(BaseModel):
    """Handoff of a conversation to a human operator.

    Carries the full reasoning trail so the operator can see why the
    automated path gave up.
    """

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    conversation_id: str
    turn_id: UUID
    user_message: str
    reason: str = Field(..., description="Why the turn escalated")
    assessment: dict[str, Any] | None = Field(
        default=None, description="Last policy-enforced assessment"
    )
    verdict: dict[str, Any] | None = Field(
        default=None, description="Critique verdict that led here"
    )
    trail: list[dict[str, Any]] = Field(
        default_factory=list, description="Audit events recorded for the turn"
    )
    created_at: datetime = Field(default_factory=utc_now)
