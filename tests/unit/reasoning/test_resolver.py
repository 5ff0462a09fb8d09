"""Unit tests for DecisionResolver."""

from uuid import uuid4

import pytest

from tests.factories import ScriptedLLMExecutor
from warden.audit import AuditEventType, InMemoryAuditStore, TurnAuditRecorder
from warden.escalation import InMemoryEscalationNotifier
from warden.intents import InMemoryPendingIntentStore
from warden.reasoning.models import (
    Assessment,
    CritiqueDecision,
    CritiqueVerdict,
    HistoryMessage,
    ReasonCode,
    ReasoningCycle,
    TurnOutcome,
)
from warden.reasoning.resolution import (
    DecisionResolver,
    MessageComposer,
    RetryDirective,
    TurnState,
)
from warden.tools import InMemoryToolProvider, ToolExecutionError, ToolGateway


def cancel_handler(params: dict) -> dict:
    return {"message": f"Order {params['orderId']} cancelled"}


def failing_handler(params: dict) -> dict:
    raise ToolExecutionError("cancel_order", "order already shipped")


class ResolverHarness:
    def __init__(self, handler=cancel_handler, max_retries: int = 1) -> None:
        self.provider = InMemoryToolProvider({"cancel_order": handler})
        self.intents = InMemoryPendingIntentStore()
        self.notifier = InMemoryEscalationNotifier()
        self.audit_store = InMemoryAuditStore()
        self.messaging = ScriptedLLMExecutor(["Composed message."])
        self.resolver = DecisionResolver(
            tool_gateway=ToolGateway({"internal": self.provider}),
            intent_store=self.intents,
            escalation_notifier=self.notifier,
            composer=MessageComposer(self.messaging),
            intent_ttl_seconds=900,
            max_retries=max_retries,
        )

    def state(self) -> TurnState:
        turn_id = uuid4()
        return TurnState(
            tenant_id="tenant-1",
            conversation_id="conv-1",
            turn_id=turn_id,
            user_message="cancel order 12345",
            history=[HistoryMessage(role="assistant", content="Hi, how can I help?")],
            cycle=ReasoningCycle(),
            audit=TurnAuditRecorder(self.audit_store, "tenant-1", "conv-1", turn_id),
        )


CANCEL = Assessment(
    confidence=6,
    action="cancel_order",
    params={"orderId": "12345"},
    is_destructive=True,
    needs_confirmation=True,
)


def verdict(decision: CritiqueDecision, **fields) -> CritiqueVerdict:
    return CritiqueVerdict.model_validate(
        {"decision": decision.value, "reasoning": "because", **fields}
    )


class TestDecisionResolver:
    @pytest.mark.asyncio
    async def test_proceed_executes_and_summarizes(self) -> None:
        harness = ResolverHarness()
        state = harness.state()

        outcome = await harness.resolver.resolve(
            verdict(CritiqueDecision.PROCEED), CANCEL, "draft", state
        )

        assert isinstance(outcome, TurnOutcome)
        assert outcome.reason_code == ReasonCode.EXECUTED_SUCCESSFULLY
        assert outcome.tool_executed is True
        assert outcome.tool_result == {"message": "Order 12345 cancelled"}
        assert outcome.response == "Composed message."
        assert harness.provider.calls == [("cancel_order", {"orderId": "12345"}, "conv-1")]
        assert [e.event_type for e in state.audit.events] == [AuditEventType.TOOL_EXECUTION]

    @pytest.mark.asyncio
    async def test_proceed_failure_returns_model_reply(self) -> None:
        harness = ResolverHarness(handler=failing_handler)
        state = harness.state()

        outcome = await harness.resolver.proceed(CANCEL, "draft reply", state)

        assert outcome.reason_code == ReasonCode.RESPONDED_SUCCESSFULLY
        assert outcome.response == "draft reply"
        assert outcome.tool_executed is False
        assert state.audit.events[0].reason_code == ReasonCode.TOOL_EXECUTION_FAILED.value

    @pytest.mark.asyncio
    async def test_proceed_without_action(self) -> None:
        harness = ResolverHarness()

        outcome = await harness.resolver.proceed(Assessment(), "just chatting", harness.state())

        assert outcome.reason_code == ReasonCode.RESPONDED_SUCCESSFULLY
        assert harness.provider.calls == []

    @pytest.mark.asyncio
    async def test_ask_user_stores_intent_for_destructive_action(self) -> None:
        harness = ResolverHarness()
        state = harness.state()

        outcome = await harness.resolver.resolve(
            verdict(CritiqueDecision.ASK_USER), CANCEL, "draft", state
        )

        assert outcome.reason_code == ReasonCode.AWAITING_CONFIRMATION
        assert harness.provider.calls == []
        intent = await harness.intents.get_and_clear("conv-1")
        assert intent.action == "cancel_order"
        assert intent.params == {"orderId": "12345"}
        assert state.audit.events[0].event_type == AuditEventType.PENDING_INTENT_STORED

    @pytest.mark.asyncio
    async def test_ask_user_non_destructive_stores_nothing(self) -> None:
        harness = ResolverHarness()
        assessment = Assessment(confidence=4, action="get_order_status")

        outcome = await harness.resolver.resolve(
            verdict(
                CritiqueDecision.ASK_USER,
                execution={"issues": ["which order?"]},
            ),
            assessment,
            "draft",
            harness.state(),
        )

        assert outcome.reason_code == ReasonCode.ASK_USER
        assert await harness.intents.get_and_clear("conv-1") is None
        assert "- which order?" in harness.messaging.system_prompt(0)

    @pytest.mark.asyncio
    async def test_first_retry_returns_directive(self) -> None:
        harness = ResolverHarness()

        result = await harness.resolver.resolve(
            verdict(
                CritiqueDecision.RETRY,
                tool_choice={"correct_tool": False, "suggested_tool": "get_order_status"},
            ),
            CANCEL,
            "draft",
            harness.state(),
        )

        assert isinstance(result, RetryDirective)
        assert result.correction.suggested_action == "get_order_status"

    @pytest.mark.asyncio
    async def test_retry_over_budget_escalates(self) -> None:
        harness = ResolverHarness()
        state = harness.state()
        state.cycle.retry_count = 1

        outcome = await harness.resolver.resolve(
            verdict(CritiqueDecision.RETRY), CANCEL, "draft", state
        )

        assert outcome.reason_code == ReasonCode.ESCALATED
        assert harness.notifier.requests[0].reason == "retry_limit_reached"

    @pytest.mark.asyncio
    async def test_escalate_hands_off_with_trail(self) -> None:
        harness = ResolverHarness()
        state = harness.state()

        outcome = await harness.resolver.resolve(
            verdict(CritiqueDecision.ESCALATE), CANCEL, "draft", state
        )

        assert outcome.escalated is True
        assert outcome.reason_code == ReasonCode.ESCALATED
        assert harness.provider.calls == []
        request = harness.notifier.requests[0]
        assert request.reason == "critique_escalated"
        assert request.user_message == "cancel order 12345"
        assert request.assessment["action"] == "cancel_order"
        assert request.verdict["decision"] == "ESCALATE"
        assert request.trail[0]["event_type"] == "escalation"
