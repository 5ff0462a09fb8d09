"""Audit domain models."""

from warden.audit.models.event import AuditEvent, AuditEventType

__all__ = [
    "AuditEvent",
    "AuditEventType",
]
