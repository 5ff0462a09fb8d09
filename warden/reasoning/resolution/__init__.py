"""Decision resolution and user-facing messages."""

from warden.reasoning.resolution.messages import (
    ESCALATION_FALLBACK,
    MessageComposer,
    basic_format_tool_result,
)
from warden.reasoning.resolution.models import RetryDirective, TurnState
from warden.reasoning.resolution.resolver import DecisionResolver

__all__ = [
    "DecisionResolver",
    "ESCALATION_FALLBACK",
    "MessageComposer",
    "RetryDirective",
    "TurnState",
    "basic_format_tool_result",
]
