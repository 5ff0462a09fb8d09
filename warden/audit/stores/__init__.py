"""Audit store backends."""

from warden.audit.store import AuditStore
from warden.audit.stores.inmemory import InMemoryAuditStore

__all__ = [
    "AuditStore",
    "InMemoryAuditStore",
]
