"""Unit tests for LLMExecutor."""

import asyncio
from typing import Any
from uuid import uuid4

import pytest

from warden.config.models.reasoning import ReasoningConfig
from warden.providers.llm import (
    ExecutionContext,
    LLMExecutor,
    LLMMessage,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    TokenUsage,
    clear_execution_context,
    create_executor,
    create_reasoning_executors,
    set_execution_context,
)


class FlakyExecutor(LLMExecutor):
    """Executor whose per-model behaviour is scripted."""

    def __init__(self, behaviours: dict[str, Any], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._behaviours = behaviours
        self.attempted: list[str] = []

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> LLMResponse:
        self.attempted.append(model)
        behaviour = self._behaviours[model]
        if behaviour == "hang":
            await asyncio.sleep(10)
        if isinstance(behaviour, Exception):
            raise behaviour
        return LLMResponse(
            content=behaviour,
            model=model,
            usage=TokenUsage(prompt_tokens=3, completion_tokens=2, total_tokens=5),
        )


MESSAGES = [LLMMessage(role="user", content="Hello")]


class TestLLMExecutor:
    @pytest.mark.asyncio
    async def test_mock_model_response(self) -> None:
        executor = create_executor("mock/test", step_name="assessment")

        response = await executor.generate(MESSAGES)

        assert response.content == "Mock response for mock/test"
        assert response.usage.total_tokens == 15
        assert response.metadata["step"] == "assessment"

    @pytest.mark.asyncio
    async def test_falls_back_after_provider_error(self) -> None:
        executor = FlakyExecutor(
            {"primary/a": ProviderError("boom"), "backup/b": "from backup"},
            model="primary/a",
            fallback_models=["backup/b"],
        )

        response = await executor.generate(MESSAGES)

        assert response.content == "from backup"
        assert executor.attempted == ["primary/a", "backup/b"]

    @pytest.mark.asyncio
    async def test_rate_limit_moves_to_next_model(self) -> None:
        executor = FlakyExecutor(
            {"primary/a": RateLimitError("slow down"), "backup/b": "ok"},
            model="primary/a",
            fallback_models=["backup/b"],
        )

        assert (await executor.generate(MESSAGES)).content == "ok"

    @pytest.mark.asyncio
    async def test_timeout_is_a_provider_error(self) -> None:
        executor = FlakyExecutor({"slow/a": "hang"}, model="slow/a", timeout=0.01)

        with pytest.raises(ProviderTimeoutError):
            await executor.generate(MESSAGES)

    @pytest.mark.asyncio
    async def test_all_models_failing_raises(self) -> None:
        executor = FlakyExecutor(
            {"a/a": ProviderError("one"), "b/b": ProviderError("two")},
            model="a/a",
            fallback_models=["b/b"],
        )

        with pytest.raises(ProviderError, match="two"):
            await executor.generate(MESSAGES)

    @pytest.mark.asyncio
    async def test_execution_context_tags_metadata(self) -> None:
        turn_id = uuid4()
        set_execution_context(
            ExecutionContext(tenant_id="t1", conversation_id="c1", turn_id=turn_id)
        )
        try:
            response = await create_executor("mock/test").generate(MESSAGES)
        finally:
            clear_execution_context()

        assert response.metadata["tenant_id"] == "t1"
        assert response.metadata["conversation_id"] == "c1"
        assert response.metadata["turn_id"] == str(turn_id)


class TestParseModel:
    @pytest.mark.parametrize(
        ("model", "expected"),
        [
            ("openrouter/anthropic/claude-3-haiku", ("openrouter", "anthropic/claude-3-haiku")),
            ("anthropic/claude-3-haiku", ("anthropic", "claude-3-haiku")),
            ("mock/test", ("mock", "test")),
            ("bare", ("mock", "bare")),
        ],
    )
    def test_parse_model(self, model: str, expected: tuple[str, str]) -> None:
        assert LLMExecutor(model="mock/x")._parse_model(model) == expected


class TestFactories:
    def test_create_reasoning_executors(self) -> None:
        config = ReasoningConfig(
            assessment={"model": "mock/a"},
            critique={"model": "mock/c", "timeout": 5.0},
            messaging={"model": "mock/m", "fallback_models": ["mock/m2"]},
        )

        executors = create_reasoning_executors(config)

        assert set(executors) == {"assessment", "critique", "messaging"}
        assert executors["critique"].model == "mock/c"
        assert executors["critique"].step_name == "critique"
