"""User-facing message generation.

Every message the engine writes on its own behalf (result summaries,
clarifying questions, escalation notices, error apologies) comes from a
short model call so it matches the customer's language and tone. Each
method has a local fallback used only when the model call fails.
"""

import json
from typing import Any

from warden.config.models.reasoning import MessagingConfig
from warden.observability.logging import get_logger
from warden.providers.llm import LLMExecutor, LLMMessage, ProviderError
from warden.reasoning.models import HistoryMessage, ReasoningCycle

logger = get_logger(__name__)

ESCALATION_FALLBACK = (
    "I apologize, but I need to connect you with a team member who can better "
    "assist with this request. Someone will be with you shortly."
)
CLARIFY_FALLBACK = (
    "Could you give me a few more details so I can make sure I get this right?"
)
CONFIRM_FALLBACK = "Just to be sure, would you like me to go ahead with this?"
MISSING_PARAMS_FALLBACK = (
    "I can help with that. Could you share a few more details first?"
)
UNAVAILABLE_FALLBACK = (
    "I apologize, but I don't have access to that capability. "
    "Let me help you another way."
)
ERROR_FALLBACK = "Something went wrong. Please try again."

SUMMARY_HISTORY_MESSAGES = 3


def basic_format_tool_result(result: Any) -> str:
    """Plain rendering of a tool result for when the summary call fails."""
    if result is None or result == "":
        return "The operation completed."
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        if result.get("message"):
            return str(result["message"])
        if result.get("error"):
            return f"There was an issue: {result['error']}"
    return "The operation completed successfully."


class MessageComposer:
    """Generates short customer-facing messages with the messaging model."""

    def __init__(
        self,
        llm_executor: LLMExecutor,
        config: MessagingConfig | None = None,
    ) -> None:
        self._llm_executor = llm_executor
        self._config = config or MessagingConfig()

    async def summarize_tool_result(
        self,
        action: str,
        params: dict[str, Any],
        result: dict[str, Any] | None,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
    ) -> str:
        """Describe an executed action's result to the customer.

        Falls back to `basic_format_tool_result` when generation fails or
        returns nothing.
        """
        prompt = (
            "You are a helpful customer service assistant. A tool was just "
            "executed and you need to communicate the result to the customer "
            "in a natural, friendly way in their language.\n\n"
            f"Tool executed: {action}\n"
            f"Parameters used: {_to_json(params)}\n\n"
            f"Tool result:\n{_to_json(result)}\n\n"
            "Instructions:\n"
            "1. Summarize the result naturally for the customer\n"
            "2. Do NOT expose raw data, JSON, or technical details\n"
            "3. Use the customer's language (match the language from the conversation)\n"
            "4. Be concise but complete\n"
            "5. If the result indicates success, confirm it clearly\n"
            "6. If the result indicates an error or issue, explain it helpfully"
        )
        return await self._generate(
            "tool_result_summary",
            prompt,
            history,
            cycle,
            fallback=basic_format_tool_result(result),
        )

    async def ask_for_missing_params(
        self,
        action: str,
        missing_params: list[str],
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
    ) -> str:
        """Ask for the parameters an action still needs, without naming them technically."""
        prompt = (
            f'The tool "{action}" requires additional information that the '
            "customer hasn't provided yet. The following parameters are "
            f"missing: {', '.join(missing_params)}. Please ask the customer "
            "for this information in a natural, friendly way in their "
            "language. Do not mention technical parameter names - ask "
            'naturally (e.g., instead of "customerName", ask "What is your name?").'
        )
        return await self._generate(
            "missing_params", prompt, history, cycle, fallback=MISSING_PARAMS_FALLBACK
        )

    async def explain_action_unavailable(
        self,
        action: str,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
    ) -> str:
        prompt = (
            "The customer asked for something this business cannot do "
            f'through this assistant (the requested capability "{action}" '
            "is not available). Apologize briefly, say it is not something "
            "you can do here, and offer to help another way. Do not mention "
            "tools, actions or any internal names. Reply in the customer's "
            "language, two sentences at most."
        )
        return await self._generate(
            "action_unavailable", prompt, history, cycle, fallback=UNAVAILABLE_FALLBACK
        )

    async def clarifying_question(
        self,
        action: str | None,
        issues: list[str],
        needs_confirmation: bool,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
    ) -> str:
        """Ask the customer to clarify or confirm before anything runs.

        Reviewer issues steer the question but are never shown verbatim.
        """
        lines = [
            "You are a helpful customer service assistant. Before acting on "
            "the customer's last message you need to ask them one short "
            "question.",
        ]
        if needs_confirmation and action:
            lines.append(
                "The request would make a change that cannot be undone. Restate "
                "in plain words what will happen and ask the customer to "
                "explicitly confirm (for example by replying yes)."
            )
        if issues:
            lines.append("Points that are unclear (internal notes, do not quote them):")
            lines.extend(f"- {issue}" for issue in issues)
        lines.append(
            "Do not mention tools, reviews, validation or internal notes. "
            "Reply in the customer's language. Keep it to one or two sentences."
        )
        return await self._generate(
            "clarifying_question",
            "\n".join(lines),
            history,
            cycle,
            fallback=CONFIRM_FALLBACK if needs_confirmation else CLARIFY_FALLBACK,
        )

    async def escalation_message(
        self,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
    ) -> str:
        prompt = (
            "You are a helpful customer service assistant. This conversation "
            "is being handed over to a human team member. Tell the customer, "
            "politely and briefly, that you are connecting them with a person "
            "who can better help and that someone will be with them shortly. "
            "Do not promise a specific time. Reply in the customer's language."
        )
        return await self._generate(
            "escalation", prompt, history, cycle, fallback=ESCALATION_FALLBACK
        )

    async def friendly_error(
        self,
        error_type: str,
        details: str,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
    ) -> str:
        """One-sentence apology for a failed operation."""
        prompt = (
            "Generate a brief, friendly error message for the customer.\n"
            f"Error type: {error_type}\n"
            f"Details: {details}\n"
            "Keep it apologetic but helpful. One sentence max."
        )
        return await self._generate(
            "friendly_error",
            prompt,
            history,
            cycle,
            fallback=details or ERROR_FALLBACK,
            max_tokens=self._config.error_max_tokens,
            temperature=self._config.error_temperature,
        )

    async def _generate(
        self,
        kind: str,
        system_prompt: str,
        history: list[HistoryMessage],
        cycle: ReasoningCycle,
        fallback: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        messages = [LLMMessage(role="system", content=system_prompt)]
        for item in history[-SUMMARY_HISTORY_MESSAGES:]:
            messages.append(LLMMessage(role=item.role, content=item.content))

        try:
            response = await self._llm_executor.generate(
                messages=messages,
                max_tokens=max_tokens or self._config.max_tokens,
                temperature=self._config.temperature if temperature is None else temperature,
            )
        except ProviderError as e:
            logger.warning(
                "message_generation_failed",
                kind=kind,
                error=str(e),
                error_type=type(e).__name__,
            )
            return fallback

        cycle.record_call(response)
        content = response.content.strip()
        if not content:
            logger.warning("message_generation_empty", kind=kind)
            return fallback
        return content


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)
