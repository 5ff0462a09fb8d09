"""PendingIntentStore factory for creating backend instances.

The Redis connection string is read from the config, falling back to the
REDIS_URL environment variable.
"""

import os

import redis.asyncio as redis

from warden.config.models.storage import PendingIntentStoreConfig
from warden.intents.store import PendingIntentStore
from warden.intents.stores import InMemoryPendingIntentStore, RedisPendingIntentStore
from warden.observability.logging import get_logger

logger = get_logger(__name__)


def create_pending_intent_store(config: PendingIntentStoreConfig) -> PendingIntentStore:
    """Create a PendingIntentStore instance based on configuration.

    Args:
        config: Pending-intent store configuration from settings

    Returns:
        Configured PendingIntentStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_pending_intent_store", backend="inmemory")
        return InMemoryPendingIntentStore()

    elif backend == "redis":
        url = config.connection_url or os.environ.get(
            "REDIS_URL", "redis://localhost:6379"
        )
        logger.info(
            "creating_pending_intent_store",
            backend="redis",
            url=url.split("@")[-1],  # Log without credentials
            key_prefix=config.key_prefix,
        )
        return RedisPendingIntentStore(
            redis=redis.from_url(url, decode_responses=True),
            key_prefix=config.key_prefix,
        )

    else:
        raise ValueError(f"Unsupported pending intent store backend: {backend}")
