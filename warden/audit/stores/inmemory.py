"""In-memory implementation of AuditStore."""

from uuid import UUID

from warden.audit.models import AuditEvent, AuditEventType
from warden.audit.store import AuditStore


class InMemoryAuditStore(AuditStore):
    """In-memory implementation of AuditStore for testing and development.

    Keeps events in insertion order; queries are linear scans.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._events: list[AuditEvent] = []
        self._by_id: dict[UUID, AuditEvent] = {}

    async def save_event(self, event: AuditEvent) -> UUID:
        """Append an audit event."""
        self._events.append(event)
        self._by_id[event.id] = event
        return event.id

    async def get_event(self, event_id: UUID) -> AuditEvent | None:
        """Get an audit event by ID."""
        return self._by_id.get(event_id)

    async def list_events_by_conversation(
        self,
        conversation_id: str,
        *,
        event_type: AuditEventType | None = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """List audit events for a conversation in chronological order."""
        results = []
        for event in self._events:
            if event.conversation_id != conversation_id:
                continue
            if event_type is not None and event.event_type != event_type:
                continue
            results.append(event)
        return results[:limit]

    async def list_events_by_turn(self, turn_id: UUID) -> list[AuditEvent]:
        """List audit events for one turn in chronological order."""
        return [event for event in self._events if event.turn_id == turn_id]
