"""Assessment calls: one model call, one extraction."""

from warden.config.models.reasoning import LLMStepConfig
from warden.observability.logging import get_logger
from warden.providers.llm import LLMExecutor, LLMMessage
from warden.reasoning.extraction import AssessmentExtractor
from warden.reasoning.models import ExtractionResult, ReasoningCycle

logger = get_logger(__name__)


class Assessor:
    """Calls the assessment model and extracts its self-report."""

    def __init__(
        self,
        llm_executor: LLMExecutor,
        config: LLMStepConfig | None = None,
        extractor: AssessmentExtractor | None = None,
    ) -> None:
        self._llm_executor = llm_executor
        self._config = config or LLMStepConfig()
        self._extractor = extractor or AssessmentExtractor()

    async def assess(
        self,
        system_prompt: str,
        conversation: list[LLMMessage],
        cycle: ReasoningCycle,
    ) -> ExtractionResult:
        """Run one assessment call.

        Raises:
            ProviderError: If the model call failed on every model
        """
        response = await self._llm_executor.generate(
            messages=[LLMMessage(role="system", content=system_prompt), *conversation],
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
        )
        cycle.record_call(response)

        result = self._extractor.extract(response.content)
        logger.debug(
            "assessment_extracted",
            status=result.status.value,
            action=result.assessment.action if result.assessment else None,
            confidence=result.assessment.confidence if result.assessment else None,
        )
        return result
