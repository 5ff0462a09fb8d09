"""Audit trail for reasoning artifacts."""

from warden.audit.models import AuditEvent, AuditEventType
from warden.audit.recorder import TurnAuditRecorder
from warden.audit.store import AuditStore
from warden.audit.stores import InMemoryAuditStore

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditStore",
    "InMemoryAuditStore",
    "TurnAuditRecorder",
]
