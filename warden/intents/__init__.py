"""Pending intents: destructive actions awaiting user confirmation."""

from warden.intents.factory import create_pending_intent_store
from warden.intents.models import PendingIntent, compute_intent_hash
from warden.intents.store import PendingIntentStore
from warden.intents.stores import InMemoryPendingIntentStore, RedisPendingIntentStore

__all__ = [
    "PendingIntent",
    "compute_intent_hash",
    "PendingIntentStore",
    "InMemoryPendingIntentStore",
    "RedisPendingIntentStore",
    "create_pending_intent_store",
]
