"""Turn Orchestrator - adaptive reasoning pipeline.

Composes the reasoning components for one inbound message:

1. Confirmation - a "yes" that claims a stored pending intent runs it
2. Assessment - the model replies and reports on its own plan
3. Context augmentation - bounded re-querying with tenant knowledge
4. Policy enforcement - hard stops and confidence floors from the catalog
5. Critique gate - decides whether a second opinion is needed
6. Critique - independent verdict on the plan
7. Resolution - execute, ask the user, escalate, or retry once

Every turn ends in exactly one TurnOutcome.
"""

import time
from uuid import UUID, uuid4

from warden.audit import AuditEventType, AuditStore, InMemoryAuditStore, TurnAuditRecorder
from warden.config.models.reasoning import ReasoningConfig
from warden.config.settings import Settings
from warden.escalation import EscalationNotifier, InMemoryEscalationNotifier
from warden.intents import PendingIntentStore, create_pending_intent_store
from warden.observability.logging import bind_turn_context, get_logger
from warden.observability.metrics import (
    CRITIQUE_TRIGGERED,
    MODEL_CALLS_PER_TURN,
    POLICY_BLOCKS,
    TURN_LATENCY,
    TURNS,
)
from warden.providers.llm import (
    ExecutionContext,
    LLMExecutor,
    LLMMessage,
    ProviderError,
    clear_execution_context,
    create_executor,
    create_reasoning_executors,
    set_execution_context,
)
from warden.reasoning.confirmation import ConfirmationMatcher, ConfirmationStatus
from warden.reasoning.context import ContextAugmentationLoop, KnowledgeBase
from warden.reasoning.critique import CritiqueEngine, CritiqueGate, CritiquePromptBuilder
from warden.reasoning.enforcement import PolicyEnforcer
from warden.reasoning.generation import AssessmentPromptBuilder, Assessor
from warden.reasoning.models import (
    Correction,
    ExtractionStatus,
    ReasonCode,
    ReasoningCycle,
    TurnOutcome,
    TurnRequest,
)
from warden.reasoning.resolution import (
    DecisionResolver,
    MessageComposer,
    RetryDirective,
    TurnState,
)
from warden.tools import ToolGateway

logger = get_logger(__name__)


class TurnOrchestrator:
    """Run one message through the adaptive reasoning pipeline.

    The orchestrator owns no conversation state: tenant context and
    history arrive with every request, and the only state kept between
    turns is the pending intent in the intent store.
    """

    def __init__(
        self,
        tool_gateway: ToolGateway,
        intent_store: PendingIntentStore,
        audit_store: AuditStore | None = None,
        escalation_notifier: EscalationNotifier | None = None,
        config: ReasoningConfig | None = None,
        executors: dict[str, LLMExecutor] | None = None,
        intent_ttl_seconds: int = 900,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            tool_gateway: Gateway for executing approved actions
            intent_store: Store for destructive actions awaiting confirmation
            audit_store: Sink for reasoning artifacts (in-memory if omitted)
            escalation_notifier: Receives escalated conversations
            config: Reasoning configuration (includes model configs per step)
            executors: Optional pre-configured executors (for testing)
            intent_ttl_seconds: Lifetime of a stored pending intent
        """
        self._config = config or ReasoningConfig()
        self._audit_store = audit_store or InMemoryAuditStore()
        self._escalation_notifier = escalation_notifier or InMemoryEscalationNotifier()

        # Use provided executors or create from reasoning config
        if executors:
            self._executors = executors
        else:
            self._executors = create_reasoning_executors(self._config)

        self._prompt_builder = AssessmentPromptBuilder(
            max_history_messages=self._config.history_messages,
        )
        self._assessor = Assessor(
            llm_executor=self._executor("assessment"),
            config=self._config.assessment,
        )
        self._augmentation = ContextAugmentationLoop(
            assessor=self._assessor,
            max_fetches=self._config.max_context_fetches,
        )
        self._enforcer = PolicyEnforcer()
        self._gate = CritiqueGate(min_confidence=self._config.min_confidence_for_action)
        self._critique_engine = CritiqueEngine(
            llm_executor=self._executor("critique"),
            config=self._config.critique,
            prompt_builder=CritiquePromptBuilder(
                max_history_messages=self._config.history_messages,
            ),
        )
        self._composer = MessageComposer(
            llm_executor=self._executor("messaging"),
            config=self._config.messaging,
        )
        self._resolver = DecisionResolver(
            tool_gateway=tool_gateway,
            intent_store=intent_store,
            escalation_notifier=self._escalation_notifier,
            composer=self._composer,
            intent_ttl_seconds=intent_ttl_seconds,
            max_retries=self._config.max_retries,
        )
        self._matcher = ConfirmationMatcher(intent_store)

    def _executor(self, step: str) -> LLMExecutor:
        return self._executors.get(step) or create_executor("mock/default", step_name=step)

    async def process_turn(self, request: TurnRequest) -> TurnOutcome:
        """Process one user message.

        Args:
            request: Tenant context, conversation id, message and history

        Returns:
            TurnOutcome with the response to show and how it was reached

        Raises:
            StoreError: If the intent store is unavailable
        """
        start_time = time.perf_counter()
        turn_id = uuid4()
        tenant_id = request.tenant.tenant_id

        # Set execution context for all model calls in this turn
        set_execution_context(
            ExecutionContext(
                tenant_id=tenant_id,
                conversation_id=request.conversation_id,
                turn_id=turn_id,
            )
        )
        bind_turn_context(tenant_id, request.conversation_id, str(turn_id))

        try:
            return await self._process_turn_impl(request, turn_id, start_time)
        finally:
            clear_execution_context()

    async def _process_turn_impl(
        self,
        request: TurnRequest,
        turn_id: UUID,
        start_time: float,
    ) -> TurnOutcome:
        """Internal implementation of process_turn."""
        tenant_id = request.tenant.tenant_id
        logger.info(
            "processing_turn",
            message_length=len(request.message),
            history_length=len(request.history),
        )

        state = TurnState(
            tenant_id=tenant_id,
            conversation_id=request.conversation_id,
            turn_id=turn_id,
            user_message=request.message,
            history=request.history,
            cycle=ReasoningCycle(),
            audit=TurnAuditRecorder(
                self._audit_store, tenant_id, request.conversation_id, turn_id
            ),
            language=request.tenant.language,
        )

        # Step 1: Confirmation of a pending intent
        outcome = await self._handle_confirmation(state)

        # Steps 2-7: Reasoning, at most one retry
        if outcome is None:
            outcome = await self._reason(request, state)

        outcome = outcome.model_copy(update={"metrics": state.cycle.to_metrics()})
        total_time = time.perf_counter() - start_time

        await state.audit.record(
            AuditEventType.TURN_COMPLETED,
            outcome.reason_code,
            tool_executed=outcome.tool_executed,
            escalated=outcome.escalated,
            metrics=outcome.metrics.model_dump(),
            total_time_ms=round(total_time * 1000, 2),
        )
        TURNS.labels(tenant_id=tenant_id, reason_code=outcome.reason_code.value).inc()
        TURN_LATENCY.labels(tenant_id=tenant_id).observe(total_time)
        MODEL_CALLS_PER_TURN.labels(tenant_id=tenant_id).observe(outcome.metrics.model_calls)

        logger.info(
            "turn_completed",
            reason_code=outcome.reason_code.value,
            tool_executed=outcome.tool_executed,
            escalated=outcome.escalated,
            model_calls=outcome.metrics.model_calls,
            critique_triggered=outcome.metrics.critique_triggered,
            context_fetch_count=outcome.metrics.context_fetch_count,
            retry_count=outcome.metrics.retry_count,
            total_time_ms=round(total_time * 1000, 2),
        )
        return outcome

    async def _handle_confirmation(self, state: TurnState) -> TurnOutcome | None:
        """Execute a confirmed pending intent, bypassing enforcement and critique.

        Returns None when the turn should go through normal reasoning.
        """
        match = await self._matcher.match(
            state.conversation_id, state.user_message, state.language
        )
        if match is None:
            return None

        intent = match.intent
        if match.status == ConfirmationStatus.MISMATCH:
            await state.audit.record(
                AuditEventType.CONFIRMATION,
                ReasonCode.PENDING_INTENT_MISMATCH,
                action=intent.action,
                intent_hash=intent.intent_hash,
            )
            return None

        await state.audit.record(
            AuditEventType.CONFIRMATION,
            ReasonCode.CONFIRMATION_RECEIVED,
            action=intent.action,
            params=intent.params,
            intent_hash=intent.intent_hash,
            confirmation_message=state.user_message,
        )
        result = await self._resolver.execute_action(intent.action, intent.params, state)

        if result.executed:
            response = await self._composer.summarize_tool_result(
                intent.action, intent.params, result.result, state.conversation, state.cycle
            )
        else:
            response = await self._composer.friendly_error(
                "action_failed",
                result.error or "The action failed",
                state.conversation,
                state.cycle,
            )

        return TurnOutcome(
            turn_id=state.turn_id,
            conversation_id=state.conversation_id,
            response=response,
            tool_executed=result.executed,
            tool_result=result.result,
            reason_code=ReasonCode.CONFIRMATION_RECEIVED,
        )

    async def _reason(self, request: TurnRequest, state: TurnState) -> TurnOutcome:
        """Run reasoning passes until one resolves; RETRY gets one more pass."""
        knowledge = KnowledgeBase(request.tenant.knowledge, request.tenant.name)
        conversation = self._prompt_builder.build_conversation(request.message, request.history)
        correction: Correction | None = None

        # The resolver only returns a RetryDirective while retry_count < max_retries
        while True:
            result = await self._reasoning_pass(
                request, state, knowledge, conversation, correction
            )
            if isinstance(result, TurnOutcome):
                return result

            state.cycle.retry_count += 1
            correction = result.correction
            logger.info(
                "reasoning_retry",
                retry_count=state.cycle.retry_count,
                suggested_action=correction.suggested_action,
            )

    async def _reasoning_pass(
        self,
        request: TurnRequest,
        state: TurnState,
        knowledge: KnowledgeBase,
        conversation: list[LLMMessage],
        correction: Correction | None,
    ) -> TurnOutcome | RetryDirective:
        tenant = request.tenant
        cycle = state.cycle
        system_prompt = self._prompt_builder.build_system_prompt(tenant, correction)

        # Step 2: Assessment, then Step 3: Context augmentation
        try:
            extraction = await self._assessor.assess(
                self._augmentation.with_context(system_prompt, cycle.context_sections),
                conversation,
                cycle,
            )
            if extraction.assessment and extraction.assessment.needs_more_context:
                augmentation = await self._augmentation.run(
                    extraction,
                    knowledge,
                    system_prompt,
                    conversation,
                    cycle,
                    tenant_id=state.tenant_id,
                )
                for fetch in augmentation.fetches:
                    await state.audit.record(
                        AuditEventType.CONTEXT_FETCH,
                        ReasonCode.CONTEXT_FETCHED,
                        **fetch.model_dump(),
                    )
                if augmentation.loop_detected:
                    await state.audit.record(
                        AuditEventType.CONTEXT_FETCH,
                        ReasonCode.CONTEXT_LOOP_DETECTED,
                        fetches=len(augmentation.fetches),
                    )
                extraction = augmentation.extraction
        except ProviderError as e:
            logger.error(
                "assessment_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return await self._resolver.escalate("assessment_failed", state)

        await state.audit.record(
            AuditEventType.ASSESSMENT,
            ReasonCode.ASSESSMENT_UNPARSEABLE
            if extraction.status == ExtractionStatus.UNPARSEABLE
            else ReasonCode.ASSESSMENT_COMPLETED,
            status=extraction.status.value,
            assessment=extraction.assessment.model_dump() if extraction.assessment else None,
            reasoning=extraction.reasoning,
            parse_error=extraction.parse_error,
            retry_count=cycle.retry_count,
        )

        assessment = extraction.assessment
        if assessment is None or not assessment.has_action:
            return self._respond(state, extraction.visible_response)

        # Step 4: Policy enforcement
        policy = self._enforcer.enforce(assessment, tenant.catalog)
        await state.audit.record(
            AuditEventType.POLICY_DECISION,
            policy.reason_code,
            action=assessment.action,
            allowed=policy.allowed,
            missing_params=policy.missing_params,
            original_confidence=policy.original_confidence,
            effective_confidence=policy.effective_confidence,
            is_destructive=policy.assessment.is_destructive,
            needs_confirmation=policy.assessment.needs_confirmation,
        )

        if not policy.allowed:
            POLICY_BLOCKS.labels(
                tenant_id=state.tenant_id, reason_code=policy.reason_code.value
            ).inc()
            logger.info(
                "policy_blocked",
                action=assessment.action,
                reason_code=policy.reason_code.value,
                missing_params=policy.missing_params,
            )
            if policy.reason_code == ReasonCode.MISSING_PARAMETER:
                response = await self._composer.ask_for_missing_params(
                    assessment.action, policy.missing_params, state.conversation, cycle
                )
            else:
                response = await self._composer.explain_action_unavailable(
                    assessment.action, state.conversation, cycle
                )
            return TurnOutcome(
                turn_id=state.turn_id,
                conversation_id=state.conversation_id,
                response=response,
                reason_code=policy.reason_code,
            )

        enforced = policy.assessment

        # Step 5: Critique gate
        gate = self._gate.evaluate(enforced, tenant.catalog)
        await state.audit.record(
            AuditEventType.CRITIQUE_GATE,
            ReasonCode.CRITIQUE_TRIGGERED if gate.required else ReasonCode.CRITIQUE_SKIPPED,
            action=enforced.action,
            triggers=[trigger.value for trigger in gate.triggers],
        )

        if not gate.required:
            logger.info("critique_skipped", action=enforced.action)
            return await self._resolver.proceed(enforced, extraction.visible_response, state)

        cycle.critique_triggered = True
        for trigger in gate.triggers:
            CRITIQUE_TRIGGERED.labels(tenant_id=state.tenant_id, trigger=trigger.value).inc()
        logger.info(
            "critique_triggered",
            action=enforced.action,
            triggers=[trigger.value for trigger in gate.triggers],
        )

        # Step 6: Critique
        verdict = await self._critique_engine.critique(
            request.message,
            enforced,
            tenant.catalog,
            request.history,
            cycle,
            tenant_id=state.tenant_id,
        )
        await state.audit.record(
            AuditEventType.CRITIQUE_VERDICT,
            ReasonCode.CRITIQUE_FAILED if verdict.synthesized else None,
            action=enforced.action,
            verdict=verdict.model_dump(mode="json"),
        )

        # Step 7: Resolution
        return await self._resolver.resolve(
            verdict, enforced, extraction.visible_response, state
        )

    def _respond(self, state: TurnState, response: str) -> TurnOutcome:
        return TurnOutcome(
            turn_id=state.turn_id,
            conversation_id=state.conversation_id,
            response=response,
            reason_code=ReasonCode.RESPONDED_SUCCESSFULLY,
        )


def create_turn_orchestrator(
    settings: Settings,
    tool_gateway: ToolGateway,
    audit_store: AuditStore | None = None,
    escalation_notifier: EscalationNotifier | None = None,
    intent_store: PendingIntentStore | None = None,
) -> TurnOrchestrator:
    """Build an orchestrator from settings.

    Args:
        settings: Application settings
        tool_gateway: Gateway wired to the deployment's tool providers
        audit_store: Audit sink (in-memory if omitted)
        escalation_notifier: Escalation sink (in-memory if omitted)
        intent_store: Intent store (built from storage settings if omitted)

    Returns:
        Configured TurnOrchestrator
    """
    intent_config = settings.storage.pending_intents
    return TurnOrchestrator(
        tool_gateway=tool_gateway,
        intent_store=intent_store or create_pending_intent_store(intent_config),
        audit_store=audit_store,
        escalation_notifier=escalation_notifier,
        config=settings.reasoning,
        intent_ttl_seconds=intent_config.ttl_seconds,
    )
