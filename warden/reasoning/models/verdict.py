"""Critique verdict models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CritiqueDecision(str, Enum):
    """What the critique says should happen to the planned action.

    - PROCEED: Execute the action
    - RETRY: The model misunderstood; run the reasoning again with a correction
    - ASK_USER: Clarify or confirm with the user first
    - ESCALATE: Hand off to a human
    """

    PROCEED = "PROCEED"
    RETRY = "RETRY"
    ASK_USER = "ASK_USER"
    ESCALATE = "ESCALATE"

    @classmethod
    def coerce(cls, value: Any) -> "CritiqueDecision":
        """Normalize a raw decision, falling back to ASK_USER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "_").replace(" ", "_")
            for decision in cls:
                if decision.value == normalized:
                    return decision
        return cls.ASK_USER


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    if value is None:
        return default
    return bool(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class Understanding(BaseModel):
    """Did the model understand the user?"""

    model_config = ConfigDict(frozen=True)

    correct: bool = True
    misunderstanding: str | None = None
    what_user_wants: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            "correct": _as_bool(data.get("correct", data.get("ai_understood_correctly")), True),
            "misunderstanding": _optional_str(data.get("misunderstanding")),
            "what_user_wants": _optional_str(data.get("what_user_wants")),
        }


class ActionChoice(BaseModel):
    """Was the right action picked?"""

    model_config = ConfigDict(frozen=True)

    correct: bool = True
    suggested: str | None = None
    reason: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        suggested = _optional_str(data.get("suggested", data.get("suggested_tool")))
        if suggested is not None and suggested.lower() == "none":
            suggested = None
        return {
            "correct": _as_bool(data.get("correct", data.get("correct_tool")), True),
            "suggested": suggested,
            "reason": _optional_str(data.get("reason")),
        }


class ExecutionReadiness(BaseModel):
    """Can the action run now?"""

    model_config = ConfigDict(frozen=True)

    ready: bool = False
    needs_confirmation: bool = False
    has_user_confirmed: bool = False
    issues: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce_issues(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        issues = data.get("issues")
        if isinstance(issues, str):
            issues = [issues]
        elif not isinstance(issues, list):
            issues = []
        return {
            "ready": _as_bool(data.get("ready"), False),
            "needs_confirmation": _as_bool(data.get("needs_confirmation"), False),
            "has_user_confirmed": _as_bool(data.get("has_user_confirmed"), False),
            "issues": [str(issue) for issue in issues if issue],
        }


class CritiqueVerdict(BaseModel):
    """Structured output of the critique pass.

    Decision values that are not one of the four known decisions become
    ASK_USER. `synthesized` marks verdicts built locally after the critique
    call itself failed.
    """

    model_config = ConfigDict(frozen=True)

    decision: CritiqueDecision
    reasoning: str = ""
    understanding: Understanding | None = None
    choice: ActionChoice | None = None
    execution: ExecutionReadiness | None = None
    synthesized: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["decision"] = CritiqueDecision.coerce(data.get("decision"))
        if "choice" not in data and "tool_choice" in data:
            data["choice"] = data.pop("tool_choice")
        for key in ("understanding", "choice", "execution"):
            if key in data and not isinstance(data[key], (dict, BaseModel)):
                data[key] = None
        if not isinstance(data.get("reasoning"), str):
            data["reasoning"] = "" if data.get("reasoning") is None else str(data["reasoning"])
        return data

    @property
    def issues(self) -> list[str]:
        return self.execution.issues if self.execution else []


class Correction(BaseModel):
    """Structured feedback fed into a retried reasoning pass."""

    model_config = ConfigDict(frozen=True)

    misunderstanding: str | None = None
    suggested_action: str | None = None
    what_user_wants: str | None = None
    reasoning: str = ""

    @classmethod
    def from_verdict(cls, verdict: CritiqueVerdict) -> "Correction":
        understanding = verdict.understanding
        choice = verdict.choice
        return cls(
            misunderstanding=understanding.misunderstanding if understanding else None,
            suggested_action=choice.suggested if choice else None,
            what_user_wants=understanding.what_user_wants if understanding else None,
            reasoning=verdict.reasoning,
        )
