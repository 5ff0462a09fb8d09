"""Reasoning domain models.

Contains the Pydantic models shared across the reasoning pipeline:
- Assessment and extraction results
- Action catalog and policies
- Critique verdicts
- Turn requests, outcomes and reason codes
"""

from warden.reasoning.models.assessment import (
    Assessment,
    ExtractionResult,
    ExtractionStatus,
)
from warden.reasoning.models.catalog import (
    DEFAULT_POLICY,
    STANDARD_POLICIES,
    ActionCatalog,
    ActionDefinition,
    ActionPolicy,
    CatalogError,
)
from warden.reasoning.models.cycle import ReasoningCycle
from warden.reasoning.models.outcome import ReasonCode, TurnMetrics, TurnOutcome
from warden.reasoning.models.tenant import HistoryMessage, TenantContext, TurnRequest
from warden.reasoning.models.verdict import (
    ActionChoice,
    Correction,
    CritiqueDecision,
    CritiqueVerdict,
    ExecutionReadiness,
    Understanding,
)

__all__ = [
    # Assessment
    "Assessment",
    "ExtractionResult",
    "ExtractionStatus",
    # Catalog
    "ActionCatalog",
    "ActionDefinition",
    "ActionPolicy",
    "CatalogError",
    "DEFAULT_POLICY",
    "STANDARD_POLICIES",
    # Verdict
    "CritiqueDecision",
    "CritiqueVerdict",
    "Correction",
    "Understanding",
    "ActionChoice",
    "ExecutionReadiness",
    # Turn
    "HistoryMessage",
    "TenantContext",
    "TurnRequest",
    "TurnOutcome",
    "TurnMetrics",
    "ReasonCode",
    "ReasoningCycle",
]
