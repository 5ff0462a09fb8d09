"""Per-turn reasoning counters."""

from pydantic import BaseModel, Field

from warden.providers.llm import LLMResponse
from warden.reasoning.models.outcome import TurnMetrics


class ReasoningCycle(BaseModel):
    """Transient state for one turn.

    Never persisted; its counters end up in the outcome metrics and the
    audit trail.
    """

    context_fetch_count: int = Field(default=0, ge=0)
    retry_count: int = Field(default=0, ge=0)
    critique_triggered: bool = False
    model_calls: int = Field(default=0, ge=0)
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    context_sections: list[str] = Field(
        default_factory=list,
        description="Knowledge sections gathered so far, reused by a retried pass",
    )
    full_context_loaded: bool = False

    def record_call(self, response: LLMResponse) -> None:
        """Account for one completed model call."""
        self.model_calls += 1
        self.prompt_tokens += response.usage.prompt_tokens
        self.completion_tokens += response.usage.completion_tokens

    def to_metrics(self) -> TurnMetrics:
        return TurnMetrics(
            critique_triggered=self.critique_triggered,
            context_fetch_count=self.context_fetch_count,
            retry_count=self.retry_count,
            model_calls=self.model_calls,
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
        )
