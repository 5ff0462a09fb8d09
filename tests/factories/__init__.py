"""Test factories for creating test data."""

from tests.factories.reasoning import (
    CatalogFactory,
    FailingLLMExecutor,
    ScriptedLLMExecutor,
    TenantFactory,
    assessment_reply,
    verdict_reply,
)

__all__ = [
    "CatalogFactory",
    "FailingLLMExecutor",
    "ScriptedLLMExecutor",
    "TenantFactory",
    "assessment_reply",
    "verdict_reply",
]
