"""Server-side policy enforcement for self-assessments.

The model's own claims about confidence, destructiveness and missing
parameters are advisory. This module recomputes them from the tenant's
catalog and never lets a policy flag be downgraded.
"""

from warden.observability.logging import get_logger
from warden.reasoning.enforcement.models import PolicyResult
from warden.reasoning.models import ActionCatalog, Assessment, ReasonCode

logger = get_logger(__name__)


class PolicyEnforcer:
    """Apply hard stops and confidence floors to an assessment.

    Hard stops run in order and short-circuit:
    1. Action absent from the catalog -> action_not_found
    2. Required parameters not provided -> missing_parameter

    When both pass, confidence is capped at the action's max_confidence and
    the destructive/confirmation flags are OR-ed with the policy's.
    """

    def enforce(self, assessment: Assessment, catalog: ActionCatalog) -> PolicyResult:
        """Enforce catalog policy on an assessment.

        Args:
            assessment: Assessment as extracted from the model
            catalog: The tenant's action catalog

        Returns:
            PolicyResult; `allowed` is False only for hard stops
        """
        original_confidence = assessment.confidence

        if assessment.action is None:
            return PolicyResult(
                allowed=True,
                original_confidence=original_confidence,
                assessment=assessment,
            )

        definition = catalog.get(assessment.action)
        if definition is None:
            logger.warning(
                "policy_action_not_found",
                action=assessment.action,
                available=catalog.names,
            )
            return PolicyResult(
                allowed=False,
                reason_code=ReasonCode.ACTION_NOT_FOUND,
                original_confidence=original_confidence,
                assessment=assessment,
            )

        missing = [
            name for name in definition.required_params if name not in assessment.params
        ]
        if missing:
            logger.info(
                "policy_missing_parameters",
                action=assessment.action,
                missing_params=missing,
                provided=sorted(assessment.params),
            )
            return PolicyResult(
                allowed=False,
                reason_code=ReasonCode.MISSING_PARAMETER,
                missing_params=missing,
                original_confidence=original_confidence,
                assessment=assessment.model_copy(update={"missing_params": missing}),
            )

        policy = definition.policy
        effective_confidence = min(original_confidence, policy.max_confidence)
        reason_code = None
        if effective_confidence < original_confidence:
            reason_code = ReasonCode.CONFIDENCE_FLOOR_APPLIED
            logger.info(
                "policy_confidence_floor_applied",
                action=assessment.action,
                original_confidence=original_confidence,
                effective_confidence=effective_confidence,
            )

        enforced = assessment.model_copy(
            update={
                "confidence": effective_confidence,
                "is_destructive": assessment.is_destructive or policy.is_destructive,
                "needs_confirmation": (
                    assessment.needs_confirmation or policy.requires_confirmation
                ),
            }
        )

        return PolicyResult(
            allowed=True,
            reason_code=reason_code,
            original_confidence=original_confidence,
            assessment=enforced,
        )
