"""AuditStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from warden.audit.models import AuditEvent, AuditEventType


class AuditStore(ABC):
    """Abstract interface for append-only audit storage.

    Events are never updated or deleted once saved.
    """

    @abstractmethod
    async def save_event(self, event: AuditEvent) -> UUID:
        """Append an audit event."""
        pass

    @abstractmethod
    async def get_event(self, event_id: UUID) -> AuditEvent | None:
        """Get an audit event by ID."""
        pass

    @abstractmethod
    async def list_events_by_conversation(
        self,
        conversation_id: str,
        *,
        event_type: AuditEventType | None = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """List audit events for a conversation in chronological order."""
        pass

    @abstractmethod
    async def list_events_by_turn(self, turn_id: UUID) -> list[AuditEvent]:
        """List audit events for one turn in chronological order."""
        pass
