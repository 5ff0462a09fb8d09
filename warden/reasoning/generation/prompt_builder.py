"""Prompt building for the assessment step.

Wraps the tenant's own system prompt with the action catalog, the
knowledge keys the model may ask for, and the self-assessment format.
"""

import json

from warden.providers.llm import LLMMessage
from warden.reasoning.models import Correction, HistoryMessage, TenantContext

ASSESSMENT_FORMAT = """## Response Format

Write your reply to the customer first. Then append, on separate lines:

<reasoning>Your private notes on what the customer wants and why.</reasoning>
<assessment>
{
  "confidence": 1-10,
  "tool_call": "action name, or null for a plain answer",
  "tool_params": {},
  "missing_params": ["required parameters the customer has not given"],
  "is_destructive": false,
  "needs_confirmation": false,
  "needs_more_context": ["knowledge keys you need before answering"]
}
</assessment>

Only plan an action from the list above. Never claim an action was done:
the system runs it after your reply. Use needs_more_context instead of
guessing business details."""

LANGUAGE_NAMES = {
    "en": "English",
    "he": "Hebrew",
}


class AssessmentPromptBuilder:
    """Build the system prompt and message list for assessment calls."""

    def __init__(self, max_history_messages: int = 5) -> None:
        """Initialize the prompt builder.

        Args:
            max_history_messages: Prior messages included with each call
        """
        self._max_history_messages = max_history_messages

    def build_system_prompt(
        self,
        tenant: TenantContext,
        correction: Correction | None = None,
    ) -> str:
        """Build the base system prompt for a tenant.

        Args:
            tenant: Tenant persona, catalog and knowledge
            correction: Reviewer feedback from a rejected first pass

        Returns:
            Complete system prompt string
        """
        sections = [
            tenant.system_prompt.strip()
            or f"You are a helpful customer service assistant for {tenant.name or 'this business'}.",
            self._build_language_section(tenant.language),
            self._build_actions_section(tenant),
            self._build_knowledge_section(tenant),
            ASSESSMENT_FORMAT,
        ]
        if correction is not None:
            sections.append(self._build_correction_section(correction))
        return "\n\n".join(section for section in sections if section)

    def build_conversation(
        self,
        message: str,
        history: list[HistoryMessage] | None = None,
    ) -> list[LLMMessage]:
        """Build the non-system messages: recent history plus the new message."""
        messages = []
        if history and self._max_history_messages > 0:
            for item in history[-self._max_history_messages :]:
                messages.append(LLMMessage(role=item.role, content=item.content))
        messages.append(LLMMessage(role="user", content=message))
        return messages

    def _build_language_section(self, language: str) -> str:
        name = LANGUAGE_NAMES.get(language)
        if not name:
            return ""
        return f"Always reply in {name}."

    def _build_actions_section(self, tenant: TenantContext) -> str:
        if len(tenant.catalog) == 0:
            return "## Available Actions\nNone. Answer conversationally."

        lines = ["## Available Actions"]
        for action in tenant.catalog.actions:
            lines.append(f"- {action.name}: {action.description}".rstrip(": "))
            if action.parameter_schema:
                schema = json.dumps(action.parameter_schema, ensure_ascii=False)
                lines.append(f"  Parameters: {schema}")
            if action.policy.is_destructive:
                lines.append("  Destructive: requires explicit customer confirmation.")
        return "\n".join(lines)

    def _build_knowledge_section(self, tenant: TenantContext) -> str:
        if not tenant.knowledge:
            return ""
        keys = sorted(tenant.knowledge)
        return (
            "## Business Knowledge\n"
            "Details are loaded on request. Available keys: "
            f"{', '.join(keys)}. Use dotted paths for parts of a section "
            '(e.g. "policies.returns"), "<key>.full" for a whole section, '
            'or "all".'
        )

    def _build_correction_section(self, correction: Correction) -> str:
        lines = [
            "## Correction From Review",
            "A reviewer rejected your previous plan for this message. Reconsider it.",
        ]
        if correction.what_user_wants:
            lines.append(f"What the customer wants: {correction.what_user_wants}")
        if correction.misunderstanding:
            lines.append(f"What was misunderstood: {correction.misunderstanding}")
        if correction.suggested_action:
            lines.append(f"Suggested action: {correction.suggested_action}")
        if correction.reasoning:
            lines.append(f"Reviewer notes: {correction.reasoning}")
        return "\n".join(lines)
