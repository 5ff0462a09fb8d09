"""Assessment extraction from raw model output."""

from warden.reasoning.extraction.extractor import (
    AssessmentExtractor,
    clean_json,
    load_json,
    strip_code_fences,
)

__all__ = [
    "AssessmentExtractor",
    "clean_json",
    "load_json",
    "strip_code_fences",
]
