"""LLM Executor - Executes model calls for reasoning steps using Agno.

Each reasoning step (assessment, critique, messaging) gets its own executor
configured with:
- A specific model (from config)
- Fallback models (optional)
- A per-call timeout

The executor handles:
- Model selection and API routing based on model string prefix
- Fallback chain on failure (Agno doesn't have this natively)
- Token accounting and latency tracking
- Turn context via ExecutionContext

Uses Agno model classes internally:
- OpenRouter for openrouter/* models
- Claude for anthropic/* models
- OpenAIChat for openai/* models
- Groq for groq/* models
"""

from __future__ import annotations

import asyncio
import time
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID

from warden.observability.logging import get_logger
from warden.observability.metrics import LLM_ERRORS, LLM_TOKENS
from warden.providers.llm.base import (
    AuthenticationError,
    LLMMessage,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    TokenUsage,
)

if TYPE_CHECKING:
    from agno.agent import Agent

    from warden.config.models.reasoning import LLMStepConfig, ReasoningConfig

logger = get_logger(__name__)


# ============================================================================
# Execution Context (avoids parameter threading)
# ============================================================================


@dataclass
class ExecutionContext:
    """Turn identifiers available to every executor.

    Set once at the start of process_turn(), read by executors to tag
    response metadata.
    """

    tenant_id: str
    conversation_id: str
    turn_id: UUID


_execution_context: ContextVar[ExecutionContext | None] = ContextVar(
    "execution_context", default=None
)


def set_execution_context(ctx: ExecutionContext) -> None:
    """Set execution context for current async task."""
    _execution_context.set(ctx)


def get_execution_context() -> ExecutionContext | None:
    """Get execution context for current async task."""
    return _execution_context.get()


def clear_execution_context() -> None:
    """Clear execution context."""
    _execution_context.set(None)


# ============================================================================
# LLM Executor
# ============================================================================


class LLMExecutor:
    """Executes model calls for a reasoning step using Agno.

    Model string format:
        openrouter/anthropic/claude-3-haiku -> OpenRouter(id="anthropic/claude-3-haiku")
        anthropic/claude-3-haiku -> Claude(id="claude-3-haiku")
        openai/gpt-4o -> OpenAIChat(id="gpt-4o")
        groq/llama-3.1-70b -> Groq(id="llama-3.1-70b")
        mock/test -> Mock response (for testing)

    Example:
        executor = LLMExecutor(
            model="openrouter/anthropic/claude-3-haiku-20240307",
            fallback_models=["anthropic/claude-3-haiku-20240307"],
            timeout=30.0,
            step_name="critique",
        )

        response = await executor.generate(
            messages=[LLMMessage(role="user", content="Hello")],
            max_tokens=1024,
            temperature=0.2,
        )
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
        timeout: float = 30.0,
        step_name: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            model: Primary model string (e.g., 'openrouter/anthropic/claude-3-haiku')
            fallback_models: Models to try if primary fails
            timeout: Upper bound for one model attempt in seconds
            step_name: Reasoning step name for logging and metrics
        """
        self._model = model
        self._fallback_models = fallback_models or []
        self._timeout = timeout
        self._step_name = step_name

        # Agno bakes sampling options into the model, so cache per combination
        self._agents: dict[tuple[str, int, float], Agent] = {}

    @property
    def model(self) -> str:
        """Primary model for this executor."""
        return self._model

    @property
    def step_name(self) -> str | None:
        """Reasoning step this executor serves."""
        return self._step_name

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate text from messages.

        Uses primary model, falls back to fallback_models on failure. Each
        attempt is bounded by the executor timeout.

        Args:
            messages: Conversation messages
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional provider-specific options

        Returns:
            LLMResponse with generated content, usage and metadata

        Raises:
            ProviderError: If every model in the chain failed
        """
        models_to_try = [self._model] + self._fallback_models
        last_error: Exception | None = None

        for model in models_to_try:
            try:
                response = await asyncio.wait_for(
                    self._generate_with_model(
                        model=model,
                        messages=messages,
                        max_tokens=max_tokens,
                        temperature=temperature,
                        **kwargs,
                    ),
                    timeout=self._timeout,
                )
            except TimeoutError:
                logger.warning(
                    "executor_timeout",
                    model=model,
                    step=self._step_name,
                    timeout=self._timeout,
                )
                last_error = ProviderTimeoutError(
                    f"{model} did not respond within {self._timeout}s"
                )
                continue
            except RateLimitError as e:
                logger.warning(
                    "executor_rate_limited",
                    model=model,
                    step=self._step_name,
                    error=str(e),
                )
                last_error = e
                continue
            except ProviderError as e:
                logger.warning(
                    "executor_provider_error",
                    model=model,
                    step=self._step_name,
                    error=str(e),
                )
                last_error = e
                continue

            self._record_usage(response)
            return response

        LLM_ERRORS.labels(
            step=self._step_name or "unknown",
            error_type=type(last_error).__name__,
        ).inc()

        if isinstance(last_error, ProviderTimeoutError):
            raise ProviderTimeoutError(
                f"All models timed out for step {self._step_name}. "
                f"Tried: {models_to_try}"
            ) from last_error

        raise ProviderError(
            f"All models failed for step {self._step_name}. "
            f"Tried: {models_to_try}. Last error: {last_error}"
        ) from last_error

    def _record_usage(self, response: LLMResponse) -> None:
        ctx = get_execution_context()
        if ctx:
            response.metadata["tenant_id"] = ctx.tenant_id
            response.metadata["conversation_id"] = ctx.conversation_id
            response.metadata["turn_id"] = str(ctx.turn_id)
        response.metadata["step"] = self._step_name

        step = self._step_name or "unknown"
        LLM_TOKENS.labels(step=step, model=response.model, direction="prompt").inc(
            response.usage.prompt_tokens
        )
        LLM_TOKENS.labels(
            step=step, model=response.model, direction="completion"
        ).inc(response.usage.completion_tokens)

    # ========================================================================
    # Internal: Agno-based execution
    # ========================================================================

    def _get_or_create_agent(
        self, model: str, max_tokens: int, temperature: float
    ) -> Agent:
        """Get cached Agno agent or create a new one for the sampling options."""
        key = (model, max_tokens, temperature)
        if key in self._agents:
            return self._agents[key]

        from agno.agent import Agent

        agent = Agent(
            model=self._create_agno_model(model, max_tokens, temperature),
            num_history_messages=0,  # History is passed in explicitly
            markdown=False,
        )
        self._agents[key] = agent
        return agent

    def _create_agno_model(
        self, model: str, max_tokens: int, temperature: float
    ) -> Any:
        """Create Agno model class from model string."""
        provider_type, api_model = self._parse_model(model)

        if provider_type == "openrouter":
            from agno.models.openrouter import OpenRouter

            return OpenRouter(
                id=api_model, max_tokens=max_tokens, temperature=temperature
            )

        elif provider_type == "anthropic":
            from agno.models.anthropic import Claude

            return Claude(id=api_model, max_tokens=max_tokens, temperature=temperature)

        elif provider_type == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(
                id=api_model, max_tokens=max_tokens, temperature=temperature
            )

        elif provider_type == "groq":
            from agno.models.groq import Groq

            return Groq(id=api_model, max_tokens=max_tokens, temperature=temperature)

        else:
            # Default to OpenRouter for unknown prefixes
            from agno.models.openrouter import OpenRouter

            logger.warning(
                "unknown_provider_defaulting_to_openrouter",
                model=model,
                provider_type=provider_type,
            )
            return OpenRouter(id=model, max_tokens=max_tokens, temperature=temperature)

    def _format_messages_for_agno(self, messages: list[LLMMessage]) -> str:
        """Convert our messages to Agno input format.

        Agno agents take a string input. For multi-turn, we format as a
        transcript. System messages are passed as agent instructions.
        """
        conversation = [m for m in messages if m.role != "system"]

        if len(conversation) == 1:
            return conversation[0].content

        parts = []
        for msg in conversation:
            if msg.role == "user":
                parts.append(f"User: {msg.content}")
            elif msg.role == "assistant":
                parts.append(f"Assistant: {msg.content}")
        return "\n\n".join(parts)

    def _get_system_prompt(self, messages: list[LLMMessage]) -> str | None:
        """Join all system messages into one instruction block."""
        system = [m.content for m in messages if m.role == "system"]
        return "\n\n".join(system) if system else None

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        max_tokens: int,
        temperature: float,
        **kwargs: Any,  # noqa: ARG002
    ) -> LLMResponse:
        """Execute generation with a specific model using Agno."""
        provider_type, _ = self._parse_model(model)

        if provider_type == "mock":
            return self._mock_response(model, messages)

        agent = self._get_or_create_agent(model, max_tokens, temperature)
        agent.instructions = [self._get_system_prompt(messages) or ""]
        input_text = self._format_messages_for_agno(messages)

        start_time = time.perf_counter()

        try:
            run_response = await agent.arun(input_text)
        except Exception as e:
            error_msg = str(e).lower()
            if "rate" in error_msg and "limit" in error_msg:
                raise RateLimitError(f"Rate limited: {e}") from e
            if "401" in error_msg or "api key" in error_msg:
                raise AuthenticationError(f"Authentication failed: {e}") from e
            raise ProviderError(f"Agno execution failed: {e}") from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        content = run_response.content if run_response.content else ""
        if not isinstance(content, str):
            content = str(content)

        response = LLMResponse(
            content=content,
            model=model,
            finish_reason="stop",
            usage=self._extract_usage(run_response),
            metadata={
                "latency_ms": latency_ms,
                "provider": provider_type,
            },
        )

        logger.debug(
            "executor_generate_complete",
            model=model,
            step=self._step_name,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )

        return response

    def _extract_usage(self, run_response: Any) -> TokenUsage:
        """Read token counts from an Agno run response.

        Older Agno releases report per-message lists in a metrics dict,
        newer ones a metrics object with integer totals.
        """
        metrics = getattr(run_response, "metrics", None)
        if metrics is None:
            return TokenUsage()

        if isinstance(metrics, dict):
            prompt = metrics.get("input_tokens", 0)
            completion = metrics.get("output_tokens", 0)
        else:
            prompt = getattr(metrics, "input_tokens", 0)
            completion = getattr(metrics, "output_tokens", 0)

        prompt = sum(prompt) if isinstance(prompt, list) else int(prompt or 0)
        completion = (
            sum(completion) if isinstance(completion, list) else int(completion or 0)
        )
        return TokenUsage(
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=prompt + completion,
        )

    def _mock_response(self, model: str, messages: list[LLMMessage]) -> LLMResponse:  # noqa: ARG002
        """Generate mock response for testing."""
        return LLMResponse(
            content=f"Mock response for {model}",
            model=model,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )

    def _parse_model(self, model: str) -> tuple[str, str]:
        """Parse model string into (provider_type, api_model).

        Examples:
            "openrouter/anthropic/claude-3-haiku" -> ("openrouter", "anthropic/claude-3-haiku")
            "anthropic/claude-3-haiku" -> ("anthropic", "claude-3-haiku")
            "mock/test" -> ("mock", "test")
        """
        parts = model.split("/")

        if len(parts) >= 3 and parts[0] == "openrouter":
            return "openrouter", "/".join(parts[1:])
        elif len(parts) >= 2:
            return parts[0], "/".join(parts[1:])
        else:
            return "mock", model


# ============================================================================
# Factory functions
# ============================================================================


def create_executor(
    model: str,
    fallback_models: list[str] | None = None,
    step_name: str | None = None,
    timeout: float = 30.0,
) -> LLMExecutor:
    """Create an LLMExecutor with the given configuration.

    Args:
        model: Primary model string
        fallback_models: Models to try if primary fails
        step_name: Reasoning step name for logging
        timeout: Request timeout

    Returns:
        Configured LLMExecutor
    """
    return LLMExecutor(
        model=model,
        fallback_models=fallback_models,
        timeout=timeout,
        step_name=step_name,
    )


def create_executor_from_step_config(
    step_config: LLMStepConfig,
    step_name: str,
) -> LLMExecutor:
    """Create an LLMExecutor from a reasoning step configuration."""
    return LLMExecutor(
        model=step_config.model,
        fallback_models=step_config.fallback_models,
        timeout=step_config.timeout,
        step_name=step_name,
    )


def create_reasoning_executors(config: ReasoningConfig) -> dict[str, LLMExecutor]:
    """Create one executor per reasoning step.

    Returns:
        Dict with "assessment", "critique" and "messaging" executors
    """
    return {
        "assessment": create_executor_from_step_config(config.assessment, "assessment"),
        "critique": create_executor_from_step_config(config.critique, "critique"),
        "messaging": create_executor_from_step_config(config.messaging, "messaging"),
    }
