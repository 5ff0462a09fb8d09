"""PendingIntentStore abstract interface."""

from abc import ABC, abstractmethod

from warden.intents.models import PendingIntent


class PendingIntentStore(ABC):
    """Abstract interface for pending-intent storage.

    Holds at most one intent per conversation. Intents expire after their
    TTL and are consumed exactly once.
    """

    @abstractmethod
    async def set(self, intent: PendingIntent, ttl_seconds: int) -> None:
        """Store an intent, replacing any existing one for the conversation."""
        pass

    @abstractmethod
    async def get_and_clear(self, conversation_id: str) -> PendingIntent | None:
        """Atomically fetch and remove the conversation's intent.

        Returns None when nothing is stored or the intent has expired.
        """
        pass
