"""AuditEvent model for audit domain."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class AuditEventType(str, Enum):
    """Reasoning artifacts recorded during a turn."""

    ASSESSMENT = "assessment"
    POLICY_DECISION = "policy_decision"
    CONTEXT_FETCH = "context_fetch"
    CRITIQUE_GATE = "critique_gate"
    CRITIQUE_VERDICT = "critique_verdict"
    PENDING_INTENT_STORED = "pending_intent_stored"
    CONFIRMATION = "confirmation"
    TOOL_EXECUTION = "tool_execution"
    ESCALATION = "escalation"
    TURN_COMPLETED = "turn_completed"


class AuditEvent(BaseModel):
    """Immutable audit record of one reasoning artifact.

    Events are written before the side effect they justify, so the trail
    explains every executed action even if the action itself fails.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    tenant_id: str = Field(..., description="Owning tenant")
    conversation_id: str = Field(..., description="Related conversation")
    turn_id: UUID = Field(..., description="Related turn")
    event_type: AuditEventType = Field(..., description="Event classification")
    reason_code: str | None = Field(
        default=None, description="Reason code attached to the event"
    )
    event_data: dict[str, Any] = Field(
        default_factory=dict, description="Event payload"
    )
    timestamp: datetime = Field(
        default_factory=utc_now, description="Event time"
    )
