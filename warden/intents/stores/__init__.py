"""Pending-intent store backends."""

from warden.intents.stores.inmemory import InMemoryPendingIntentStore
from warden.intents.stores.redis import RedisPendingIntentStore

__all__ = [
    "InMemoryPendingIntentStore",
    "RedisPendingIntentStore",
]
