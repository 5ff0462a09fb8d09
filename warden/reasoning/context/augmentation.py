"""Bounded context augmentation.

When the model reports `needs_more_context`, the requested knowledge is
resolved and the model is asked again with it attached. The loop stops when
the model has what it needs, when a round resolves nothing, or when the
fetch budget runs out. In the last case the whole knowledge object is
attached for one final call whose result is accepted as is.

The fetch budget and the gathered context live on the ReasoningCycle, so a
retried pass in the same turn continues from them instead of starting over.
"""

from pydantic import BaseModel, Field

from warden.observability.logging import get_logger
from warden.observability.metrics import CONTEXT_FETCHES
from warden.providers.llm import LLMMessage
from warden.reasoning.context.knowledge import KnowledgeBase
from warden.reasoning.generation import Assessor
from warden.reasoning.models import ExtractionResult, ReasoningCycle

logger = get_logger(__name__)


class ContextFetch(BaseModel):
    """One round of the loop, kept for the audit trail."""

    iteration: int
    requested: list[str]
    found: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class AugmentationResult(BaseModel):
    """Final extraction after augmentation plus what happened on the way."""

    extraction: ExtractionResult
    fetches: list[ContextFetch] = Field(default_factory=list)
    loop_detected: bool = Field(
        default=False,
        description="Budget ran out and the full knowledge object was loaded",
    )


def _requested_keys(extraction: ExtractionResult) -> list[str]:
    if extraction.assessment is None:
        return []
    return extraction.assessment.needs_more_context


class ContextAugmentationLoop:
    """Re-queries the assessment model with supplementary tenant knowledge."""

    def __init__(self, assessor: Assessor, max_fetches: int = 2) -> None:
        """Initialize the loop.

        Args:
            assessor: Runs one assessment call and extraction
            max_fetches: Targeted fetch rounds before loading full knowledge
        """
        self._assessor = assessor
        self._max_fetches = max_fetches

    async def run(
        self,
        extraction: ExtractionResult,
        knowledge: KnowledgeBase,
        system_prompt: str,
        conversation: list[LLMMessage],
        cycle: ReasoningCycle,
        tenant_id: str = "unknown",
    ) -> AugmentationResult:
        """Augment until the model stops asking for context.

        Args:
            extraction: Result of the initial assessment call
            knowledge: The tenant's knowledge base
            system_prompt: Base system prompt; context is appended to it
            conversation: History and current user message
            cycle: Turn state; holds the fetch count and gathered context
            tenant_id: Tenant label for metrics

        Returns:
            AugmentationResult with the last extraction

        Raises:
            ProviderError: If a model call fails on every model
        """
        result = AugmentationResult(extraction=extraction)
        if cycle.full_context_loaded:
            # Everything the tenant has is already in front of the model
            return result

        while (
            _requested_keys(result.extraction)
            and cycle.context_fetch_count < self._max_fetches
        ):
            cycle.context_fetch_count += 1
            iteration = cycle.context_fetch_count
            requested = _requested_keys(result.extraction)

            lookup = knowledge.resolve(requested)
            fetch = ContextFetch(
                iteration=iteration,
                requested=requested,
                found=list(lookup.found),
                missing=lookup.missing,
            )
            result.fetches.append(fetch)
            CONTEXT_FETCHES.labels(
                tenant_id=tenant_id,
                outcome="found" if lookup.found else "missing",
            ).inc()
            logger.info(
                "context_fetched",
                iteration=iteration,
                max_fetches=self._max_fetches,
                requested=requested,
                found=fetch.found,
                missing=fetch.missing,
            )

            cycle.context_sections.append(knowledge.format(lookup))
            result.extraction = await self._assessor.assess(
                self.with_context(system_prompt, cycle.context_sections),
                conversation,
                cycle,
            )

            if not lookup.found:
                # The model has been told the information does not exist
                logger.info("context_unavailable", iteration=iteration, missing=lookup.missing)
                break

        if (
            _requested_keys(result.extraction)
            and cycle.context_fetch_count >= self._max_fetches
        ):
            logger.warning(
                "context_loop_detected",
                fetches=cycle.context_fetch_count,
                requested=_requested_keys(result.extraction),
            )
            CONTEXT_FETCHES.labels(tenant_id=tenant_id, outcome="full").inc()
            result.loop_detected = True
            cycle.full_context_loaded = True
            cycle.context_sections = [knowledge.format_full()]
            result.extraction = await self._assessor.assess(
                self.with_context(system_prompt, cycle.context_sections),
                conversation,
                cycle,
            )

        return result

    def with_context(self, system_prompt: str, sections: list[str]) -> str:
        """Append gathered knowledge sections to a system prompt."""
        body = "\n\n".join(section for section in sections if section)
        if not body:
            return system_prompt
        return f"{system_prompt}\n\n# Business Context\n\n{body}"
