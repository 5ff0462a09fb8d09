"""Decision resolution: turns a critique verdict into exactly one outcome.

PROCEED executes the action, ASK_USER asks a clarifying question (storing
a pending intent for destructive actions), ESCALATE hands the conversation
to a human, and RETRY asks the orchestrator for another reasoning pass.
Every reasoning artifact is audited before the side effect it justifies.
"""

from typing import Any

from warden.audit import AuditEventType
from warden.escalation import EscalationNotifier, EscalationRequest
from warden.intents import PendingIntent, PendingIntentStore
from warden.observability.logging import get_logger
from warden.observability.metrics import ESCALATIONS
from warden.reasoning.models import (
    Assessment,
    Correction,
    CritiqueDecision,
    CritiqueVerdict,
    ReasonCode,
    TurnOutcome,
)
from warden.reasoning.resolution.messages import MessageComposer
from warden.reasoning.resolution.models import RetryDirective, TurnState
from warden.tools import ToolExecutionResult, ToolGateway

logger = get_logger(__name__)

DEFAULT_INTENT_TTL_SECONDS = 900


class DecisionResolver:
    """State machine over critique decisions."""

    def __init__(
        self,
        tool_gateway: ToolGateway,
        intent_store: PendingIntentStore,
        escalation_notifier: EscalationNotifier,
        composer: MessageComposer,
        intent_ttl_seconds: int = DEFAULT_INTENT_TTL_SECONDS,
        max_retries: int = 1,
    ) -> None:
        """Initialize the resolver.

        Args:
            tool_gateway: Executes approved actions
            intent_store: Holds destructive actions awaiting confirmation
            escalation_notifier: Receives escalated conversations
            composer: Generates user-facing messages
            intent_ttl_seconds: Lifetime of a stored pending intent
            max_retries: RETRY transitions allowed per turn
        """
        self._tool_gateway = tool_gateway
        self._intent_store = intent_store
        self._escalation_notifier = escalation_notifier
        self._composer = composer
        self._intent_ttl_seconds = intent_ttl_seconds
        self._max_retries = max_retries

    async def resolve(
        self,
        verdict: CritiqueVerdict,
        assessment: Assessment,
        visible_response: str,
        state: TurnState,
    ) -> TurnOutcome | RetryDirective:
        """Act on a critique verdict.

        Args:
            verdict: The critique's verdict
            assessment: Policy-enforced assessment the verdict is about
            visible_response: Text the model wrote for the user
            state: Current turn state

        Returns:
            A terminal TurnOutcome, or a RetryDirective when another
            reasoning pass is allowed
        """
        decision = verdict.decision
        logger.info(
            "resolving_decision",
            decision=decision.value,
            action=assessment.action,
            retry_count=state.cycle.retry_count,
        )

        if decision == CritiqueDecision.PROCEED:
            return await self.proceed(assessment, visible_response, state)
        elif decision == CritiqueDecision.ASK_USER:
            return await self.ask_user(assessment, verdict, state)
        elif decision == CritiqueDecision.RETRY:
            if state.cycle.retry_count >= self._max_retries:
                logger.warning(
                    "retry_limit_reached",
                    retry_count=state.cycle.retry_count,
                    max_retries=self._max_retries,
                )
                return await self.escalate(
                    "retry_limit_reached", state, assessment=assessment, verdict=verdict
                )
            return RetryDirective(correction=Correction.from_verdict(verdict))
        elif decision == CritiqueDecision.ESCALATE:
            return await self.escalate(
                "critique_escalated", state, assessment=assessment, verdict=verdict
            )
        else:
            logger.error("unknown_critique_decision", decision=str(decision))
            return await self.escalate(
                "unknown_decision", state, assessment=assessment, verdict=verdict
            )

    async def proceed(
        self,
        assessment: Assessment,
        visible_response: str,
        state: TurnState,
    ) -> TurnOutcome:
        """Execute the assessed action.

        A failed execution is not fatal: the model's own reply is returned
        instead of a result summary.
        """
        action = assessment.action
        if action is None:
            return self._outcome(state, visible_response, ReasonCode.RESPONDED_SUCCESSFULLY)

        result = await self.execute_action(action, assessment.params, state)

        if not result.executed:
            return self._outcome(state, visible_response, ReasonCode.RESPONDED_SUCCESSFULLY)

        summary = await self._composer.summarize_tool_result(
            action, assessment.params, result.result, state.conversation, state.cycle
        )
        return self._outcome(
            state,
            summary,
            ReasonCode.EXECUTED_SUCCESSFULLY,
            tool_executed=True,
            tool_result=result.result,
        )

    async def execute_action(
        self,
        action: str,
        params: dict[str, Any],
        state: TurnState,
    ) -> ToolExecutionResult:
        """Run an action through the gateway and audit the result."""
        result = await self._tool_gateway.execute(action, params, state.conversation_id)
        await state.audit.record(
            AuditEventType.TOOL_EXECUTION,
            ReasonCode.EXECUTED_SUCCESSFULLY
            if result.executed
            else ReasonCode.TOOL_EXECUTION_FAILED,
            action=action,
            params=params,
            executed=result.executed,
            error=result.error,
            execution_time_ms=result.execution_time_ms,
        )
        return result

    async def ask_user(
        self,
        assessment: Assessment,
        verdict: CritiqueVerdict,
        state: TurnState,
    ) -> TurnOutcome:
        """Ask a clarifying question, storing a pending intent when destructive."""
        awaiting_confirmation = assessment.is_destructive and assessment.action is not None

        if awaiting_confirmation:
            intent = PendingIntent.create(
                state.conversation_id, assessment.action, assessment.params
            )
            await state.audit.record(
                AuditEventType.PENDING_INTENT_STORED,
                ReasonCode.AWAITING_CONFIRMATION,
                action=intent.action,
                params=intent.params,
                intent_hash=intent.intent_hash,
                ttl_seconds=self._intent_ttl_seconds,
            )
            await self._intent_store.set(intent, self._intent_ttl_seconds)
            logger.info(
                "pending_intent_stored",
                action=intent.action,
                ttl_seconds=self._intent_ttl_seconds,
            )

        issues = verdict.issues or ([verdict.reasoning] if verdict.reasoning else [])
        message = await self._composer.clarifying_question(
            assessment.action,
            issues,
            awaiting_confirmation,
            state.conversation,
            state.cycle,
        )
        return self._outcome(
            state,
            message,
            ReasonCode.AWAITING_CONFIRMATION
            if awaiting_confirmation
            else ReasonCode.ASK_USER,
        )

    async def escalate(
        self,
        reason: str,
        state: TurnState,
        assessment: Assessment | None = None,
        verdict: CritiqueVerdict | None = None,
    ) -> TurnOutcome:
        """Hand the conversation to a human with the full reasoning trail."""
        await state.audit.record(
            AuditEventType.ESCALATION,
            ReasonCode.ESCALATED,
            reason=reason,
            verdict_reasoning=verdict.reasoning if verdict else None,
        )
        request = EscalationRequest(
            tenant_id=state.tenant_id,
            conversation_id=state.conversation_id,
            turn_id=state.turn_id,
            user_message=state.user_message,
            reason=reason,
            assessment=_dump(assessment),
            verdict=_dump(verdict),
            trail=state.audit.trail(),
        )
        await self._escalation_notifier.notify(request)
        ESCALATIONS.labels(tenant_id=state.tenant_id).inc()
        logger.warning("conversation_escalated", reason=reason)

        message = await self._composer.escalation_message(state.conversation, state.cycle)
        return self._outcome(state, message, ReasonCode.ESCALATED, escalated=True)

    def _outcome(
        self,
        state: TurnState,
        response: str,
        reason_code: ReasonCode,
        tool_executed: bool = False,
        tool_result: dict[str, Any] | None = None,
        escalated: bool = False,
    ) -> TurnOutcome:
        return TurnOutcome(
            turn_id=state.turn_id,
            conversation_id=state.conversation_id,
            response=response,
            tool_executed=tool_executed,
            tool_result=tool_result,
            reason_code=reason_code,
            escalated=escalated,
            metrics=state.cycle.to_metrics(),
        )


def _dump(model: Assessment | CritiqueVerdict | None) -> dict[str, Any] | None:
    return model.model_dump(mode="json") if model is not None else None
