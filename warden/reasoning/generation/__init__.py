"""Assessment generation: prompts and model calls for the first pass."""

from warden.reasoning.generation.assessor import Assessor
from warden.reasoning.generation.prompt_builder import AssessmentPromptBuilder

__all__ = [
    "Assessor",
    "AssessmentPromptBuilder",
]
