"""Critique gate models."""

from enum import Enum

from pydantic import BaseModel, Field


class GateTrigger(str, Enum):
    """Risk signals that require a second-pass critique."""

    UNKNOWN_ACTION = "unknown_action"
    DESTRUCTIVE = "destructive"
    LOW_CONFIDENCE = "low_confidence"
    MISSING_PARAMS = "missing_params"
    NEEDS_CONFIRMATION = "needs_confirmation"


class GateDecision(BaseModel):
    """Whether critique is required, and why."""

    required: bool
    triggers: list[GateTrigger] = Field(default_factory=list)
