"""In-memory implementation of PendingIntentStore."""

import time
from collections.abc import Callable

from warden.intents.models import PendingIntent
from warden.intents.store import PendingIntentStore


class InMemoryPendingIntentStore(PendingIntentStore):
    """In-memory implementation of PendingIntentStore for testing and development.

    get_and_clear is a single dict.pop with no await in between, so two
    concurrent confirmations on one event loop can never both receive the
    same intent. Not suitable for multi-process deployments.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize empty storage.

        Args:
            clock: Monotonic time source, injectable for expiry tests
        """
        self._clock = clock
        self._intents: dict[str, tuple[PendingIntent, float]] = {}

    async def set(self, intent: PendingIntent, ttl_seconds: int) -> None:
        """Store an intent, replacing any existing one for the conversation."""
        self._intents[intent.conversation_id] = (
            intent,
            self._clock() + ttl_seconds,
        )

    async def get_and_clear(self, conversation_id: str) -> PendingIntent | None:
        """Atomically fetch and remove the conversation's intent."""
        entry = self._intents.pop(conversation_id, None)
        if entry is None:
            return None

        intent, expires_at = entry
        if self._clock() >= expires_at:
            return None
        return intent
