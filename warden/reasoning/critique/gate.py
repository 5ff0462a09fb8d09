"""Critique gate: decides whether an assessment needs a second opinion."""

from warden.reasoning.critique.models import GateDecision, GateTrigger
from warden.reasoning.models import ActionCatalog, Assessment


class CritiqueGate:
    """Pure check over a policy-enforced assessment.

    Every matching trigger is reported, not just the first, so the audit
    trail shows the full set of risk signals.
    """

    def __init__(self, min_confidence: int = 7) -> None:
        """Initialize the gate.

        Args:
            min_confidence: Confidence below this requires critique
        """
        self._min_confidence = min_confidence

    def evaluate(self, assessment: Assessment, catalog: ActionCatalog) -> GateDecision:
        """Decide whether critique is required.

        Args:
            assessment: Policy-enforced assessment
            catalog: The tenant's action catalog

        Returns:
            GateDecision; never required when no action is planned
        """
        if assessment.action is None:
            return GateDecision(required=False)

        triggers: list[GateTrigger] = []
        if assessment.action not in catalog:
            triggers.append(GateTrigger.UNKNOWN_ACTION)
        if assessment.is_destructive:
            triggers.append(GateTrigger.DESTRUCTIVE)
        if assessment.confidence < self._min_confidence:
            triggers.append(GateTrigger.LOW_CONFIDENCE)
        if assessment.missing_params:
            triggers.append(GateTrigger.MISSING_PARAMS)
        if assessment.needs_confirmation:
            triggers.append(GateTrigger.NEEDS_CONFIRMATION)

        return GateDecision(required=bool(triggers), triggers=triggers)
