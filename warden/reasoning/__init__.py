"""Adaptive reasoning exports."""

from warden.reasoning.confirmation import ConfirmationMatcher, is_confirmation
from warden.reasoning.context import ContextAugmentationLoop, KnowledgeBase
from warden.reasoning.critique import CritiqueEngine, CritiqueGate, GateDecision
from warden.reasoning.enforcement import PolicyEnforcer, PolicyResult
from warden.reasoning.extraction import AssessmentExtractor
from warden.reasoning.generation import AssessmentPromptBuilder, Assessor
from warden.reasoning.models import (
    ActionCatalog,
    ActionDefinition,
    ActionPolicy,
    Assessment,
    CritiqueDecision,
    CritiqueVerdict,
    ExtractionResult,
    HistoryMessage,
    ReasonCode,
    TenantContext,
    TurnOutcome,
    TurnRequest,
)
from warden.reasoning.orchestrator import TurnOrchestrator, create_turn_orchestrator
from warden.reasoning.resolution import DecisionResolver, MessageComposer

__all__ = [
    # Pipeline
    "TurnOrchestrator",
    "create_turn_orchestrator",
    "AssessmentExtractor",
    "AssessmentPromptBuilder",
    "Assessor",
    "ContextAugmentationLoop",
    "KnowledgeBase",
    "PolicyEnforcer",
    "PolicyResult",
    "CritiqueGate",
    "GateDecision",
    "CritiqueEngine",
    "DecisionResolver",
    "MessageComposer",
    "ConfirmationMatcher",
    "is_confirmation",
    # Models
    "ActionCatalog",
    "ActionDefinition",
    "ActionPolicy",
    "Assessment",
    "CritiqueDecision",
    "CritiqueVerdict",
    "ExtractionResult",
    "HistoryMessage",
    "ReasonCode",
    "TenantContext",
    "TurnOutcome",
    "TurnRequest",
]
