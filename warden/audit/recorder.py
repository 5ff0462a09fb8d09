"""Per-turn audit recording."""

from enum import Enum
from typing import Any
from uuid import UUID

from warden.audit.models import AuditEvent, AuditEventType
from warden.audit.store import AuditStore
from warden.observability.logging import get_logger

logger = get_logger(__name__)


def _code_value(reason_code: Enum | str | None) -> str | None:
    if isinstance(reason_code, Enum):
        return str(reason_code.value)
    return reason_code


class TurnAuditRecorder:
    """Writes audit events for one turn and keeps them as the turn's trail.

    The trail is what an escalation hands to the human operator.
    """

    def __init__(
        self,
        store: AuditStore,
        tenant_id: str,
        conversation_id: str,
        turn_id: UUID,
    ) -> None:
        self._store = store
        self._tenant_id = tenant_id
        self._conversation_id = conversation_id
        self._turn_id = turn_id
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def record(
        self,
        event_type: AuditEventType,
        reason_code: Enum | str | None = None,
        **event_data: Any,
    ) -> AuditEvent:
        """Persist one event.

        Raises:
            StoreError: If the audit store rejects the event
        """
        event = AuditEvent(
            tenant_id=self._tenant_id,
            conversation_id=self._conversation_id,
            turn_id=self._turn_id,
            event_type=event_type,
            reason_code=_code_value(reason_code),
            event_data=event_data,
        )
        await self._store.save_event(event)
        self._events.append(event)
        logger.debug(
            "audit_event_recorded",
            event_type=event_type.value,
            reason_code=event.reason_code,
        )
        return event

    def trail(self) -> list[dict[str, Any]]:
        """JSON-safe copy of every event recorded so far."""
        return [event.model_dump(mode="json") for event in self._events]
