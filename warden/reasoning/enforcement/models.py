"""Policy enforcement result models."""

from pydantic import BaseModel, Field

from warden.reasoning.models import Assessment, ReasonCode


class PolicyResult(BaseModel):
    """Outcome of applying catalog policy to one assessment."""

    allowed: bool = Field(..., description="False when a hard stop fired")
    reason_code: ReasonCode | None = Field(
        default=None,
        description="Hard stop code, or confidence_floor_applied when non-blocking",
    )
    missing_params: list[str] = Field(
        default_factory=list, description="Required params absent, in schema order"
    )
    original_confidence: int = Field(..., ge=1, le=10)
    assessment: Assessment = Field(..., description="Policy-enforced assessment")

    @property
    def effective_confidence(self) -> int:
        return self.assessment.confidence
