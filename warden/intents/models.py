"""Pending intent model and content hashing."""

import hashlib
import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def compute_intent_hash(action: str, params: dict[str, Any]) -> str:
    """SHA-256 over canonical JSON of the action and its parameters.

    Keys are sorted at every nesting level, so parameter order never
    changes the hash.
    """
    canonical = json.dumps(
        {"tool": action, "params": params},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class PendingIntent(BaseModel):
    """A destructive action waiting for the user to confirm it."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str = Field(..., description="Owning conversation")
    action: str = Field(..., description="Action to execute on confirmation")
    params: dict[str, Any] = Field(default_factory=dict)
    intent_hash: str = Field(..., description="Content hash of action and params")
    created_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        conversation_id: str,
        action: str,
        params: dict[str, Any],
    ) -> "PendingIntent":
        """Build an intent with its content hash filled in."""
        return cls(
            conversation_id=conversation_id,
            action=action,
            params=params,
            intent_hash=compute_intent_hash(action, params),
        )

    def is_intact(self) -> bool:
        """Whether the stored hash still matches action and params."""
        return self.intent_hash == compute_intent_hash(self.action, self.params)
