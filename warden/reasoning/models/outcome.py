"""Turn outcome models and reason codes."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class ReasonCode(str, Enum):
    """Why a turn (or a step inside it) ended the way it did."""

    ACTION_NOT_FOUND = "action_not_found"
    MISSING_PARAMETER = "missing_parameter"
    CONFIDENCE_FLOOR_APPLIED = "confidence_floor_applied"
    CRITIQUE_TRIGGERED = "critique_triggered"
    CRITIQUE_SKIPPED = "critique_skipped"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    ESCALATED = "escalated"
    EXECUTED_SUCCESSFULLY = "executed_successfully"
    RESPONDED_SUCCESSFULLY = "responded_successfully"
    CONFIRMATION_RECEIVED = "confirmation_received"
    ASK_USER = "ask_user"
    CRITIQUE_FAILED = "critique_failed"
    ASSESSMENT_COMPLETED = "assessment_completed"
    ASSESSMENT_UNPARSEABLE = "assessment_unparseable"
    CONTEXT_FETCHED = "context_fetched"
    CONTEXT_LOOP_DETECTED = "context_loop_detected"
    PENDING_INTENT_MISMATCH = "pending_intent_mismatch"
    TOOL_EXECUTION_FAILED = "tool_execution_failed"


class TurnMetrics(BaseModel):
    """Reasoning counters reported with every outcome."""

    critique_triggered: bool = False
    context_fetch_count: int = Field(default=0, ge=0)
    retry_count: int = Field(default=0, ge=0)
    model_calls: int = Field(default=0, ge=0)
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)


class TurnOutcome(BaseModel):
    """Exactly one user-facing result per turn."""

    turn_id: UUID
    conversation_id: str
    response: str = Field(..., description="Message shown to the user")
    tool_executed: bool = False
    tool_result: dict[str, Any] | None = None
    reason_code: ReasonCode
    escalated: bool = False
    metrics: TurnMetrics = Field(default_factory=TurnMetrics)
