"""Selective second-pass critique.

The gate decides whether an assessment is risky enough to check; the
engine runs the independent critique model and returns a verdict.
"""

from warden.reasoning.critique.engine import CritiqueEngine
from warden.reasoning.critique.gate import CritiqueGate
from warden.reasoning.critique.models import GateDecision, GateTrigger
from warden.reasoning.critique.prompt_builder import CritiquePromptBuilder

__all__ = [
    "CritiqueEngine",
    "CritiqueGate",
    "CritiquePromptBuilder",
    "GateDecision",
    "GateTrigger",
]
