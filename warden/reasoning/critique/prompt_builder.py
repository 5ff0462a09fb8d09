"""Prompt building for the critique pass."""

import json

from warden.reasoning.models import ActionCatalog, Assessment, HistoryMessage

_DECISION_GUIDE = """## Decision Options

**PROCEED** only if every condition holds:
- The user was understood correctly
- The right action was selected
- All parameters are present and valid
- For a destructive action, the user has explicitly confirmed it

**RETRY** when the assistant misunderstood the user or picked the wrong action
(including picking an action when a plain answer was enough).

**ASK_USER** when parameters are missing or ambiguous, or a destructive action
has not been explicitly confirmed. A request such as "cancel my order" is not a
confirmation.

**ESCALATE** when the request looks harmful or the right action cannot be
determined safely."""

_RESPONSE_FORMAT = """## Response Format (JSON only, no other text)

{
  "decision": "PROCEED" | "RETRY" | "ASK_USER" | "ESCALATE",
  "understanding": {
    "what_user_wants": "brief description of the user's actual intent",
    "ai_understood_correctly": true,
    "misunderstanding": "what was misread, if anything"
  },
  "tool_choice": {
    "correct_tool": true,
    "reason": "why the action is right or wrong",
    "suggested_tool": "better action name, or none"
  },
  "execution": {
    "ready": true,
    "needs_confirmation": false,
    "has_user_confirmed": false,
    "issues": ["anything blocking execution"]
  },
  "reasoning": "one or two sentences explaining the decision"
}"""


class CritiquePromptBuilder:
    """Build the single prompt sent to the critique model.

    The critique sees the user message, the recent conversation, the
    policy-enforced assessment and the catalog. It never sees the
    assistant's draft reply.
    """

    def __init__(self, max_history_messages: int = 5) -> None:
        self._max_history_messages = max_history_messages

    def build(
        self,
        user_message: str,
        assessment: Assessment,
        catalog: ActionCatalog,
        history: list[HistoryMessage] | None = None,
    ) -> str:
        sections = [
            "You are a second-opinion validator. Review the assistant's "
            "understanding and planned action before anything is executed.",
            f'## User Message\n"{user_message}"',
        ]

        history_section = self._build_history_section(history)
        if history_section:
            sections.append(history_section)

        sections.append(self._build_plan_section(assessment))
        sections.append(self._build_catalog_section(catalog))
        sections.append(
            "## Verify\n"
            "1. UNDERSTANDING: what does the user actually want, and did the "
            "assistant read it correctly?\n"
            "2. ACTION CHOICE: does the planned action exist, and is it the "
            "right one? Should a different action, or no action, be used?\n"
            "3. EXECUTION READINESS: are all required parameters present and "
            "correct, and has a destructive action been confirmed?"
        )
        sections.append(_DECISION_GUIDE)
        sections.append(_RESPONSE_FORMAT)

        return "\n\n".join(sections)

    def _build_history_section(self, history: list[HistoryMessage] | None) -> str:
        if not history or self._max_history_messages == 0:
            return ""
        lines = ["## Recent Conversation"]
        for message in history[-self._max_history_messages :]:
            lines.append(f"{message.role}: {message.content}")
        return "\n".join(lines)

    def _build_plan_section(self, assessment: Assessment) -> str:
        lines = [
            "## Planned Action",
            f"Action: {assessment.action or 'none'}",
            f"Parameters: {json.dumps(assessment.params, ensure_ascii=False, default=str)}",
            f"Confidence: {assessment.confidence}/10",
        ]
        if assessment.missing_params:
            lines.append(f"Missing parameters: {', '.join(assessment.missing_params)}")
        if assessment.is_destructive:
            lines.append(
                "DESTRUCTIVE ACTION: YES. Requires explicit user confirmation "
                "before executing."
            )
        else:
            lines.append("DESTRUCTIVE ACTION: no")
        if assessment.needs_confirmation:
            lines.append("This action requires user confirmation. Do not PROCEED without it.")
        return "\n".join(lines)

    def _build_catalog_section(self, catalog: ActionCatalog) -> str:
        if len(catalog) == 0:
            return "## Available Actions\n(none)"
        lines = ["## Available Actions"]
        for action in catalog.actions:
            entry = f"- {action.name}"
            if action.description:
                entry += f": {action.description}"
            if action.required_params:
                entry += f" (required: {', '.join(action.required_params)})"
            lines.append(entry)
        return "\n".join(lines)
