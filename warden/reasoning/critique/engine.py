"""Critique engine: an independent second model pass over an assessment."""

import asyncio
import json
import time
from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from warden.config.models.reasoning import CritiqueConfig
from warden.observability.logging import get_logger
from warden.observability.metrics import CRITIQUE_DECISIONS, CRITIQUE_FAILURES
from warden.providers.llm import LLMExecutor, LLMMessage, ProviderError
from warden.reasoning.critique.prompt_builder import CritiquePromptBuilder
from warden.reasoning.extraction import clean_json, load_json, strip_code_fences
from warden.reasoning.models import (
    ActionCatalog,
    Assessment,
    CritiqueDecision,
    CritiqueVerdict,
    HistoryMessage,
    ReasoningCycle,
)

logger = get_logger(__name__)


class CritiqueEngine:
    """Runs the critique model and turns its output into a verdict.

    Transport errors, timeouts and unparseable output count as failed
    attempts. Attempts are retried after a fixed delay; when every attempt
    fails the engine synthesizes an ESCALATE verdict instead of raising.
    """

    def __init__(
        self,
        llm_executor: LLMExecutor,
        config: CritiqueConfig | None = None,
        prompt_builder: CritiquePromptBuilder | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the critique engine.

        Args:
            llm_executor: Executor for the critique model
            config: Sampling, retry and delay settings
            prompt_builder: Builder for the critique prompt
            sleep: Delay function between attempts
        """
        self._llm_executor = llm_executor
        self._config = config or CritiqueConfig()
        self._prompt_builder = prompt_builder or CritiquePromptBuilder()
        self._sleep = sleep

    async def critique(
        self,
        user_message: str,
        assessment: Assessment,
        catalog: ActionCatalog,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
        tenant_id: str = "unknown",
    ) -> CritiqueVerdict:
        """Produce a verdict for a policy-enforced assessment.

        Args:
            user_message: The user's current message
            assessment: Policy-enforced assessment
            catalog: The tenant's action catalog
            history: Recent conversation, oldest first
            cycle: Turn counters to update with model usage
            tenant_id: Tenant label for metrics

        Returns:
            CritiqueVerdict; synthesized ESCALATE after exhausting retries
        """
        prompt = self._prompt_builder.build(user_message, assessment, catalog, history)
        messages = [LLMMessage(role="user", content=prompt)]
        attempts = self._config.max_retries + 1
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            start_time = time.perf_counter()
            try:
                response = await self._llm_executor.generate(
                    messages=messages,
                    max_tokens=self._config.max_tokens,
                    temperature=self._config.temperature,
                )
                cycle.record_call(response)
                verdict = self._parse_verdict(response.content)
            except (ProviderError, ValueError) as e:
                last_error = e
                CRITIQUE_FAILURES.labels(
                    tenant_id=tenant_id, error_type=type(e).__name__
                ).inc()
                logger.warning(
                    "critique_attempt_failed",
                    attempt=attempt,
                    max_attempts=attempts,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                if attempt < attempts:
                    await self._sleep(self._config.retry_delay_seconds)
                continue

            CRITIQUE_DECISIONS.labels(
                tenant_id=tenant_id, decision=verdict.decision.value
            ).inc()
            logger.info(
                "critique_completed",
                action=assessment.action,
                decision=verdict.decision.value,
                attempt=attempt,
                elapsed_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return verdict

        logger.error(
            "critique_exhausted",
            action=assessment.action,
            attempts=attempts,
            error=str(last_error),
        )
        CRITIQUE_DECISIONS.labels(
            tenant_id=tenant_id, decision=CritiqueDecision.ESCALATE.value
        ).inc()
        return CritiqueVerdict(
            decision=CritiqueDecision.ESCALATE,
            reasoning=(
                f"Critique step failed after {attempts} attempts: {last_error}"
            ),
            synthesized=True,
        )

    def _parse_verdict(self, content: str) -> CritiqueVerdict:
        """Parse the critique model's JSON output.

        Raises:
            ValueError: If the output is not a JSON object
        """
        cleaned = clean_json(strip_code_fences(content))
        try:
            data = load_json(cleaned)
        except json.JSONDecodeError:
            # Some models wrap the object in prose
            start, end = cleaned.find("{"), cleaned.rfind("}")
            if start == -1 or end <= start:
                raise ValueError(f"Critique output is not JSON: {content[:200]}")
            data = load_json(cleaned[start : end + 1])

        if not isinstance(data, dict):
            raise ValueError(
                f"Critique output must be a JSON object, got {type(data).__name__}"
            )

        raw_decision = data.get("decision")
        try:
            verdict = CritiqueVerdict.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Critique verdict failed validation: {e}") from e

        if raw_decision != verdict.decision.value:
            logger.warning(
                "critique_decision_coerced",
                raw_decision=raw_decision,
                decision=verdict.decision.value,
            )
        return verdict
