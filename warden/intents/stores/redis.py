"""Redis implementation of PendingIntentStore."""

import redis.asyncio as redis
from pydantic import ValidationError as PydanticValidationError

from warden.errors import ConnectionError
from warden.intents.models import PendingIntent
from warden.intents.store import PendingIntentStore
from warden.observability.logging import get_logger

logger = get_logger(__name__)


class RedisPendingIntentStore(PendingIntentStore):
    """Redis-backed pending-intent store.

    Key format: {prefix}:{conversation_id}
    Expiry uses the key TTL (SET EX); consumption uses GETDEL, which is a
    single atomic command on the server.
    """

    def __init__(self, redis: redis.Redis, key_prefix: str = "pending_intent"):
        """Initialize Redis pending-intent store.

        Args:
            redis: Redis client instance
            key_prefix: Prefix for Redis keys
        """
        self._redis = redis
        self._key_prefix = key_prefix

    def _make_key(self, conversation_id: str) -> str:
        """Build Redis key."""
        return f"{self._key_prefix}:{conversation_id}"

    async def set(self, intent: PendingIntent, ttl_seconds: int) -> None:
        """Store an intent, replacing any existing one for the conversation."""
        key = self._make_key(intent.conversation_id)
        try:
            await self._redis.set(key, intent.model_dump_json(), ex=ttl_seconds)
        except redis.RedisError as e:
            logger.error(
                "pending_intent_set_failed",
                conversation_id=intent.conversation_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to store pending intent: {e}", cause=e) from e

        logger.debug(
            "pending_intent_stored",
            conversation_id=intent.conversation_id,
            action=intent.action,
            ttl_seconds=ttl_seconds,
        )

    async def get_and_clear(self, conversation_id: str) -> PendingIntent | None:
        """Atomically fetch and remove the conversation's intent."""
        key = self._make_key(conversation_id)
        try:
            value = await self._redis.getdel(key)
        except redis.RedisError as e:
            logger.error(
                "pending_intent_get_failed",
                conversation_id=conversation_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to read pending intent: {e}", cause=e) from e

        if value is None:
            return None

        value_str = value.decode() if isinstance(value, bytes) else value
        try:
            return PendingIntent.model_validate_json(value_str)
        except PydanticValidationError as e:
            # Corrupted value was already removed by GETDEL; treat as absent
            logger.warning(
                "pending_intent_corrupted_value",
                conversation_id=conversation_id,
                error=str(e),
            )
            return None
