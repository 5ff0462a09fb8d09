"""Reasoning pipeline configuration models."""

from pydantic import BaseModel, Field


class LLMStepConfig(BaseModel):
    """Model selection and sampling for one reasoning step."""

    model: str = Field(
        default="openrouter/anthropic/claude-3-haiku-20240307",
        description="Full model identifier (e.g., 'openrouter/anthropic/claude-3-haiku-20240307')",
    )
    fallback_models: list[str] = Field(
        default_factory=list,
        description="Fallback models if primary fails",
    )
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, gt=0)
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single model call (seconds)",
    )


class CritiqueConfig(LLMStepConfig):
    """Critique step configuration."""

    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, gt=0)
    max_retries: int = Field(
        default=1,
        ge=0,
        description="Retries after a failed critique call before escalating",
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Fixed delay between critique attempts",
    )


class MessagingConfig(LLMStepConfig):
    """Configuration for user-facing message generation.

    Covers clarifying questions, tool result summaries, escalation notices
    and friendly error messages.
    """

    max_tokens: int = Field(default=512, gt=0)
    error_max_tokens: int = Field(default=100, gt=0)
    error_temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class ReasoningConfig(BaseModel):
    """Adaptive reasoning configuration."""

    max_context_fetches: int = Field(
        default=2,
        ge=0,
        description="Context augmentation iterations before loading full knowledge",
    )
    min_confidence_for_action: int = Field(
        default=7,
        ge=1,
        le=10,
        description="Confidence below this triggers critique",
    )
    max_retries: int = Field(
        default=1,
        ge=0,
        le=1,
        description="RETRY transitions allowed per turn",
    )
    history_messages: int = Field(
        default=5,
        ge=0,
        description="Recent messages included in model calls",
    )

    assessment: LLMStepConfig = Field(default_factory=LLMStepConfig)
    critique: CritiqueConfig = Field(default_factory=CritiqueConfig)
    messaging: MessagingConfig = Field(default_factory=MessagingConfig)
