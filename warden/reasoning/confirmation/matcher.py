"""Confirmation matching against stored pending intents."""

import re
import string
from enum import Enum

from pydantic import BaseModel

from warden.intents import PendingIntent, PendingIntentStore
from warden.observability.logging import get_logger
from warden.reasoning.confirmation.phrases import phrases_for

logger = get_logger(__name__)

# ASCII punctuation plus common Unicode quotes, dashes and Hebrew geresh
_PUNCTUATION = string.punctuation + string.whitespace + "‘’“”–—…׳״¡¿"


class ConfirmationStatus(str, Enum):
    """What a confirmation lookup found.

    - MATCHED: An intact pending intent, now cleared and ready to execute
    - MISMATCH: A pending intent whose hash no longer matches; discarded
    """

    MATCHED = "matched"
    MISMATCH = "mismatch"


class ConfirmationMatch(BaseModel):
    """A pending intent claimed by a confirmation message."""

    status: ConfirmationStatus
    intent: PendingIntent


def normalize(message: str) -> str:
    """Lowercase and strip surrounding whitespace and punctuation."""
    return message.strip(_PUNCTUATION).lower()


def is_confirmation(message: str, language: str | None = None) -> bool:
    """Whether a message reads as a confirmation.

    A phrase matches when it is the whole message or its prefix followed
    by a word boundary, so "yes, go ahead" matches "yes" but "yesterday"
    does not.
    """
    text = normalize(message)
    if not text:
        return False
    for phrase in phrases_for(language):
        if re.match(rf"{re.escape(phrase)}(?!\w)", text):
            return True
    return False


class ConfirmationMatcher:
    """Reconciles a confirmation message with the conversation's pending intent."""

    def __init__(self, intent_store: PendingIntentStore) -> None:
        self._intent_store = intent_store

    async def match(
        self,
        conversation_id: str,
        message: str,
        language: str | None = None,
    ) -> ConfirmationMatch | None:
        """Claim the pending intent if the message confirms it.

        The intent is fetched and cleared in one store call, so at most one
        turn can ever claim it.

        Args:
            conversation_id: Conversation to look up
            message: The user's message
            language: Conversation language for phrase matching

        Returns:
            ConfirmationMatch, or None when the message is not a
            confirmation or nothing is pending
        """
        if not is_confirmation(message, language):
            return None

        intent = await self._intent_store.get_and_clear(conversation_id)
        if intent is None:
            logger.info("confirmation_without_pending_intent")
            return None

        if not intent.is_intact():
            logger.warning(
                "pending_intent_mismatch",
                action=intent.action,
                intent_hash=intent.intent_hash,
            )
            return ConfirmationMatch(status=ConfirmationStatus.MISMATCH, intent=intent)

        logger.info("pending_intent_confirmed", action=intent.action)
        return ConfirmationMatch(status=ConfirmationStatus.MATCHED, intent=intent)
