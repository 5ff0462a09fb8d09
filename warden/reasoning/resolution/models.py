"""Resolution models shared by the resolver and the orchestrator."""

from dataclasses import dataclass
from uuid import UUID

from pydantic import BaseModel

from warden.audit import TurnAuditRecorder
from warden.reasoning.models import Correction, HistoryMessage, ReasoningCycle


@dataclass
class TurnState:
    """Everything a resolution step needs to know about the current turn."""

    tenant_id: str
    conversation_id: str
    turn_id: UUID
    user_message: str
    history: list[HistoryMessage]
    cycle: ReasoningCycle
    audit: TurnAuditRecorder
    language: str = "en"

    @property
    def conversation(self) -> list[HistoryMessage]:
        """History including the current user message."""
        return [*self.history, HistoryMessage(role="user", content=self.user_message)]


class RetryDirective(BaseModel):
    """Instruction to run the reasoning pass again with a correction."""

    correction: Correction
