"""Unit tests for AssessmentExtractor."""

import pytest

from warden.reasoning.extraction import (
    AssessmentExtractor,
    clean_json,
    load_json,
    strip_code_fences,
)
from warden.reasoning.models import ExtractionStatus


@pytest.fixture
def extractor() -> AssessmentExtractor:
    return AssessmentExtractor()


class TestAssessmentExtractor:
    def test_plain_response(self, extractor: AssessmentExtractor) -> None:
        result = extractor.extract("We are open 9 to 5.")

        assert result.status == ExtractionStatus.PLAIN
        assert result.visible_response == "We are open 9 to 5."
        assert result.assessment is None

    def test_parses_blocks_and_strips_them(self, extractor: AssessmentExtractor) -> None:
        raw = (
            "Let me check that order.\n"
            "<reasoning>User wants order status.</reasoning>\n"
            '<assessment>{"confidence": 8, "tool_call": "get_order_status", '
            '"tool_params": {"orderId": "12345"}}</assessment>'
        )

        result = extractor.extract(raw)

        assert result.status == ExtractionStatus.PARSED
        assert result.visible_response == "Let me check that order."
        assert result.reasoning == "User wants order status."
        assert result.assessment.action == "get_order_status"
        assert result.assessment.params == {"orderId": "12345"}
        assert result.assessment.confidence == 8

    def test_tags_are_case_insensitive(self, extractor: AssessmentExtractor) -> None:
        result = extractor.extract('Hi <ASSESSMENT>{"confidence": 9}</ASSESSMENT>')

        assert result.status == ExtractionStatus.PARSED
        assert result.visible_response == "Hi"

    def test_code_fenced_json_with_comments(self, extractor: AssessmentExtractor) -> None:
        raw = (
            "Sure.\n<assessment>\n```json\n"
            '{\n  "confidence": 7, // fairly sure\n'
            '  "tool_call": "cancel_order",\n'
            '  "tool_params": {"orderId": "1",},\n}\n```\n</assessment>'
        )

        result = extractor.extract(raw)

        assert result.status == ExtractionStatus.PARSED
        assert result.assessment.action == "cancel_order"
        assert result.assessment.params == {"orderId": "1"}

    def test_unparseable_block_keeps_full_text(self, extractor: AssessmentExtractor) -> None:
        raw = "Okay.<assessment>{not json at all</assessment>"

        result = extractor.extract(raw)

        assert result.status == ExtractionStatus.UNPARSEABLE
        assert result.assessment is None
        assert result.visible_response == raw
        assert result.parse_error

    def test_non_object_block_is_unparseable(self, extractor: AssessmentExtractor) -> None:
        result = extractor.extract("Okay.<assessment>[1, 2]</assessment>")

        assert result.status == ExtractionStatus.UNPARSEABLE

    def test_empty_block_is_unparseable(self, extractor: AssessmentExtractor) -> None:
        result = extractor.extract("Okay.<assessment>   </assessment>")

        assert result.status == ExtractionStatus.UNPARSEABLE

    def test_deeply_nested_block_is_unparseable(
        self, extractor: AssessmentExtractor
    ) -> None:
        nested = "[" * 100_000 + "]" * 100_000
        raw = f"Okay.<assessment>{nested}</assessment>"

        result = extractor.extract(raw)

        assert result.status == ExtractionStatus.UNPARSEABLE
        assert result.visible_response == raw
        assert "too deep" in result.parse_error

    def test_none_input(self, extractor: AssessmentExtractor) -> None:
        result = extractor.extract(None)

        assert result.status == ExtractionStatus.PLAIN
        assert result.visible_response == ""


class TestJsonHelpers:
    def test_strip_code_fences(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('{"a": 1}') == '{"a": 1}'

    def test_clean_json_keeps_strings_intact(self) -> None:
        content = '{"url": "http://x.test//path", "list": [1, 2,], }'

        assert clean_json(content) == '{"url": "http://x.test//path", "list": [1, 2] }'

    def test_clean_json_handles_escaped_quotes(self) -> None:
        content = '{"say": "a \\"quoted, \\" word",}'

        assert clean_json(content) == '{"say": "a \\"quoted, \\" word"}'

    def test_load_json_reports_deep_nesting_as_value_error(self) -> None:
        with pytest.raises(ValueError, match="too deep"):
            load_json('{"a": ' + "[" * 100_000 + "]" * 100_000 + "}")

        assert load_json('{"a": [1]}') == {"a": [1]}
