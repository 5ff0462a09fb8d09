"""Assessment extraction from raw model output.

Responses carry up to two tagged blocks next to the user-facing text:

    <reasoning>private notes</reasoning>
    <assessment>{"confidence": 8, "tool_call": "refund", ...}</assessment>

The extractor separates them and parses the assessment JSON leniently.
"""

import json
import re

from pydantic import ValidationError

from warden.observability.logging import get_logger
from warden.reasoning.models import Assessment, ExtractionResult

logger = get_logger(__name__)

_REASONING_PATTERN = re.compile(
    r"<reasoning>(.*?)</reasoning>", re.IGNORECASE | re.DOTALL
)
_ASSESSMENT_PATTERN = re.compile(
    r"<assessment>(.*?)</assessment>", re.IGNORECASE | re.DOTALL
)


def strip_code_fences(content: str) -> str:
    """Return the body of the first markdown code block, if any."""
    content = content.strip()
    if "```json" in content:
        start = content.find("```json") + 7
        end = content.find("```", start)
        if end > start:
            return content[start:end].strip()
    elif "```" in content:
        start = content.find("```") + 3
        end = content.find("```", start)
        if end > start:
            return content[start:end].strip()
    return content


def clean_json(content: str) -> str:
    """Drop // line comments and trailing commas outside of strings."""
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    length = len(content)

    while i < length:
        char = content[i]

        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
        elif char == "/" and content.startswith("//", i):
            newline = content.find("\n", i)
            i = length if newline == -1 else newline
            continue
        elif char == ",":
            j = i + 1
            while j < length and content[j].isspace():
                j += 1
            if j < length and content[j] in "}]":
                i += 1
                continue
            out.append(char)
        else:
            out.append(char)
        i += 1

    return "".join(out)


def load_json(content: str):
    """json.loads that reports over-deep nesting as ValueError."""
    try:
        return json.loads(content)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e


class AssessmentExtractor:
    """Splits raw model text into visible response, reasoning and assessment.

    Never raises: a missing assessment block yields a plain response, a
    block that cannot be parsed yields `parse_error` with the whole text
    kept as the visible response.
    """

    def extract(self, raw_text: str) -> ExtractionResult:
        """Extract the self-assessment from raw model output.

        Args:
            raw_text: Model output, possibly containing tagged blocks

        Returns:
            ExtractionResult; check `status` to tell plain, parsed and
            unparseable responses apart
        """
        raw_text = raw_text or ""

        reasoning_match = _REASONING_PATTERN.search(raw_text)
        reasoning = reasoning_match.group(1).strip() if reasoning_match else None

        visible = _REASONING_PATTERN.sub("", raw_text)
        assessment_match = _ASSESSMENT_PATTERN.search(visible)
        visible = _ASSESSMENT_PATTERN.sub("", visible).strip()

        if assessment_match is None:
            return ExtractionResult(visible_response=visible, reasoning=reasoning)

        block = assessment_match.group(1)
        try:
            assessment = self._parse_assessment(block)
        except (ValueError, TypeError) as e:
            logger.warning(
                "assessment_unparseable",
                error=str(e),
                block_preview=block[:200],
            )
            return ExtractionResult(
                visible_response=raw_text.strip(),
                reasoning=reasoning,
                parse_error=str(e),
            )

        return ExtractionResult(
            visible_response=visible,
            assessment=assessment,
            reasoning=reasoning,
        )

    def _parse_assessment(self, block: str) -> Assessment:
        content = clean_json(strip_code_fences(block))
        if not content:
            raise ValueError("Assessment block is empty")

        data = load_json(content)
        if not isinstance(data, dict):
            raise ValueError(
                f"Assessment must be a JSON object, got {type(data).__name__}"
            )

        try:
            return Assessment.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Assessment failed validation: {e}") from e
