"""Unit tests for the critique gate, prompt builder and engine."""

from unittest.mock import AsyncMock

import pytest

from tests.factories import CatalogFactory, ScriptedLLMExecutor, verdict_reply
from warden.config.models.reasoning import CritiqueConfig
from warden.providers.llm import ProviderError
from warden.reasoning.critique import (
    CritiqueEngine,
    CritiqueGate,
    CritiquePromptBuilder,
    GateTrigger,
)
from warden.reasoning.models import (
    ActionCatalog,
    Assessment,
    CritiqueDecision,
    HistoryMessage,
    ReasoningCycle,
)


@pytest.fixture
def catalog() -> ActionCatalog:
    return CatalogFactory.standard()


@pytest.fixture
def cancel_assessment() -> Assessment:
    return Assessment(
        confidence=6,
        action="cancel_order",
        params={"orderId": "12345"},
        is_destructive=True,
        needs_confirmation=True,
    )


class TestCritiqueGate:
    def test_no_action_never_requires_critique(self, catalog: ActionCatalog) -> None:
        decision = CritiqueGate().evaluate(Assessment(confidence=1), catalog)

        assert decision.required is False
        assert decision.triggers == []

    def test_confident_safe_action_skips(self, catalog: ActionCatalog) -> None:
        decision = CritiqueGate().evaluate(
            Assessment(confidence=9, action="get_order_status", params={"orderId": "1"}),
            catalog,
        )

        assert decision.required is False

    def test_destructive_action_at_full_confidence_requires_critique(
        self, catalog: ActionCatalog
    ) -> None:
        decision = CritiqueGate().evaluate(
            Assessment(confidence=10, action="cancel_order", is_destructive=True),
            catalog,
        )

        assert decision.required is True
        assert decision.triggers == [GateTrigger.DESTRUCTIVE]

    def test_reports_every_trigger(self, catalog: ActionCatalog) -> None:
        decision = CritiqueGate(min_confidence=7).evaluate(
            Assessment(
                confidence=3,
                action="teleport",
                missing_params=["destination"],
                is_destructive=True,
                needs_confirmation=True,
            ),
            catalog,
        )

        assert decision.triggers == [
            GateTrigger.UNKNOWN_ACTION,
            GateTrigger.DESTRUCTIVE,
            GateTrigger.LOW_CONFIDENCE,
            GateTrigger.MISSING_PARAMS,
            GateTrigger.NEEDS_CONFIRMATION,
        ]

    def test_threshold_is_exclusive(self, catalog: ActionCatalog) -> None:
        gate = CritiqueGate(min_confidence=7)
        base = {"action": "get_order_status", "params": {"orderId": "1"}}

        assert gate.evaluate(Assessment(confidence=7, **base), catalog).required is False
        assert gate.evaluate(Assessment(confidence=6, **base), catalog).required is True


class TestCritiquePromptBuilder:
    def test_contains_plan_and_catalog(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        prompt = CritiquePromptBuilder().build(
            "cancel my order 12345",
            cancel_assessment,
            catalog,
            [HistoryMessage(role="assistant", content="How can I help?")],
        )

        assert '"cancel my order 12345"' in prompt
        assert "Action: cancel_order" in prompt
        assert "DESTRUCTIVE ACTION: YES" in prompt
        assert "book_appointment" in prompt
        assert "assistant: How can I help?" in prompt
        assert '"decision"' in prompt

    def test_history_can_be_disabled(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        prompt = CritiquePromptBuilder(max_history_messages=0).build(
            "hi",
            cancel_assessment,
            catalog,
            [HistoryMessage(role="user", content="earlier")],
        )

        assert "Recent Conversation" not in prompt


class TestCritiqueEngine:
    @pytest.mark.asyncio
    async def test_returns_parsed_verdict(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        executor = ScriptedLLMExecutor([verdict_reply("ASK_USER")])
        engine = CritiqueEngine(executor, CritiqueConfig(), sleep=AsyncMock())
        cycle = ReasoningCycle()

        verdict = await engine.critique("cancel it", cancel_assessment, catalog, [], cycle)

        assert verdict.decision == CritiqueDecision.ASK_USER
        assert verdict.synthesized is False
        assert cycle.model_calls == 1
        assert executor.calls[0]["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_accepts_code_fenced_verdict(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        reply = f"Here you go:\n```json\n{verdict_reply('PROCEED')}\n```"
        engine = CritiqueEngine(ScriptedLLMExecutor([reply]), sleep=AsyncMock())

        verdict = await engine.critique(
            "cancel it", cancel_assessment, catalog, [], ReasoningCycle()
        )

        assert verdict.decision == CritiqueDecision.PROCEED

    @pytest.mark.asyncio
    async def test_invalid_decision_becomes_ask_user(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        engine = CritiqueEngine(
            ScriptedLLMExecutor([verdict_reply("DO_WHATEVER")]), sleep=AsyncMock()
        )

        verdict = await engine.critique(
            "cancel it", cancel_assessment, catalog, [], ReasoningCycle()
        )

        assert verdict.decision == CritiqueDecision.ASK_USER

    @pytest.mark.asyncio
    async def test_retries_once_after_bad_output(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        executor = ScriptedLLMExecutor(["not json", verdict_reply("PROCEED")])
        sleep = AsyncMock()
        engine = CritiqueEngine(executor, CritiqueConfig(retry_delay_seconds=1.0), sleep=sleep)

        verdict = await engine.critique(
            "cancel it", cancel_assessment, catalog, [], ReasoningCycle()
        )

        assert verdict.decision == CritiqueDecision.PROCEED
        assert executor.call_count == 2
        sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_exhausted_attempts_escalate(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        executor = ScriptedLLMExecutor([ProviderError("down")])
        sleep = AsyncMock()
        engine = CritiqueEngine(executor, CritiqueConfig(max_retries=1), sleep=sleep)

        verdict = await engine.critique(
            "cancel it", cancel_assessment, catalog, [], ReasoningCycle()
        )

        assert verdict.decision == CritiqueDecision.ESCALATE
        assert verdict.synthesized is True
        assert "after 2 attempts" in verdict.reasoning
        assert executor.call_count == 2
        assert sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_non_object_output_counts_as_failure(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        engine = CritiqueEngine(
            ScriptedLLMExecutor(['["PROCEED"]']),
            CritiqueConfig(max_retries=0),
            sleep=AsyncMock(),
        )

        verdict = await engine.critique(
            "cancel it", cancel_assessment, catalog, [], ReasoningCycle()
        )

        assert verdict.decision == CritiqueDecision.ESCALATE
        assert verdict.synthesized is True

    @pytest.mark.asyncio
    async def test_deeply_nested_output_counts_as_failure(
        self, catalog: ActionCatalog, cancel_assessment: Assessment
    ) -> None:
        nested = "[" * 100_000 + "]" * 100_000
        executor = ScriptedLLMExecutor([nested])
        engine = CritiqueEngine(executor, CritiqueConfig(max_retries=1), sleep=AsyncMock())

        verdict = await engine.critique(
            "cancel it", cancel_assessment, catalog, [], ReasoningCycle()
        )

        assert verdict.decision == CritiqueDecision.ESCALATE
        assert verdict.synthesized is True
        assert "too deep" in verdict.reasoning
        assert executor.call_count == 2
