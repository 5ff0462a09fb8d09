"""Self-assessment models.

The model under reasoning appends a structured self-report to every
response. Nothing in that report is trusted as typed: every field is
coerced on validation, so a well-formed dict always yields an Assessment.
"""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_CONFIDENCE = 5
MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 10

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1"})
_NULL_ACTIONS = frozenset({"", "none", "null"})


def _coerce_confidence(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_CONFIDENCE
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_CONFIDENCE
    if not isinstance(value, (int, float)) or math.isnan(value):
        return DEFAULT_CONFIDENCE
    if math.isinf(value):
        return MAX_CONFIDENCE if value > 0 else MIN_CONFIDENCE
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, round(value)))


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return bool(value)
    return False


def _coerce_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _coerce_action(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return None if value.lower() in _NULL_ACTIONS else value


class Assessment(BaseModel):
    """The model's structured self-report for one response.

    Accepts `tool_call`/`tool_params` as synonyms of `action`/`params`.
    Confidence is clamped to 1-10 and defaults to 5 when absent or not a
    number.
    """

    model_config = ConfigDict(frozen=True)

    confidence: int = Field(default=DEFAULT_CONFIDENCE, ge=MIN_CONFIDENCE, le=MAX_CONFIDENCE)
    action: str | None = Field(default=None, description="Intended action name")
    params: dict[str, Any] = Field(default_factory=dict)
    missing_params: list[str] = Field(default_factory=list)
    is_destructive: bool = False
    needs_confirmation: bool = False
    needs_more_context: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        action = data.get("action", data.get("tool_call"))
        params = data.get("params", data.get("tool_params"))

        return {
            "confidence": _coerce_confidence(data.get("confidence")),
            "action": _coerce_action(action),
            "params": params if isinstance(params, dict) else {},
            "missing_params": _coerce_str_list(data.get("missing_params")),
            "is_destructive": _coerce_bool(data.get("is_destructive")),
            "needs_confirmation": _coerce_bool(data.get("needs_confirmation")),
            "needs_more_context": _coerce_str_list(data.get("needs_more_context")),
        }

    @property
    def has_action(self) -> bool:
        return self.action is not None


class ExtractionStatus(str, Enum):
    """How the assessment block in a response was handled.

    - PLAIN: No assessment block; a plain conversational response
    - PARSED: Assessment block found and parsed
    - UNPARSEABLE: Assessment block found but could not be parsed
    """

    PLAIN = "plain"
    PARSED = "parsed"
    UNPARSEABLE = "unparseable"


class ExtractionResult(BaseModel):
    """Result of splitting raw model text into its parts."""

    visible_response: str = Field(..., description="Text shown to the user")
    assessment: Assessment | None = None
    reasoning: str | None = Field(default=None, description="Private reasoning block")
    parse_error: str | None = Field(
        default=None, description="Why the assessment block was rejected"
    )

    @property
    def status(self) -> ExtractionStatus:
        if self.parse_error is not None:
            return ExtractionStatus.UNPARSEABLE
        if self.assessment is None:
            return ExtractionStatus.PLAIN
        return ExtractionStatus.PARSED
