"""Unit tests for audit storage and per-turn recording."""

from uuid import uuid4

import pytest

from warden.audit import (
    AuditEvent,
    AuditEventType,
    InMemoryAuditStore,
    TurnAuditRecorder,
)
from warden.reasoning.models import ReasonCode


def make_event(conversation_id: str = "conv-1", **overrides) -> AuditEvent:
    values = {
        "tenant_id": "t1",
        "conversation_id": conversation_id,
        "turn_id": uuid4(),
        "event_type": AuditEventType.ASSESSMENT,
    }
    values.update(overrides)
    return AuditEvent(**values)


class TestInMemoryAuditStore:
    @pytest.mark.asyncio
    async def test_save_and_get(self) -> None:
        store = InMemoryAuditStore()
        event = make_event()

        event_id = await store.save_event(event)

        assert event_id == event.id
        assert await store.get_event(event.id) == event

    @pytest.mark.asyncio
    async def test_list_by_conversation_filters_and_limits(self) -> None:
        store = InMemoryAuditStore()
        for _ in range(3):
            await store.save_event(make_event())
        await store.save_event(make_event(event_type=AuditEventType.ESCALATION))
        await store.save_event(make_event(conversation_id="conv-2"))

        assert len(await store.list_events_by_conversation("conv-1")) == 4
        assert len(await store.list_events_by_conversation("conv-1", limit=2)) == 2
        escalations = await store.list_events_by_conversation(
            "conv-1", event_type=AuditEventType.ESCALATION
        )
        assert [e.event_type for e in escalations] == [AuditEventType.ESCALATION]

    @pytest.mark.asyncio
    async def test_list_by_turn_keeps_order(self) -> None:
        store = InMemoryAuditStore()
        turn_id = uuid4()
        first = make_event(turn_id=turn_id, event_type=AuditEventType.ASSESSMENT)
        second = make_event(turn_id=turn_id, event_type=AuditEventType.TURN_COMPLETED)
        await store.save_event(first)
        await store.save_event(make_event())
        await store.save_event(second)

        assert await store.list_events_by_turn(turn_id) == [first, second]


class TestTurnAuditRecorder:
    @pytest.mark.asyncio
    async def test_record_persists_and_tracks(self) -> None:
        store = InMemoryAuditStore()
        turn_id = uuid4()
        recorder = TurnAuditRecorder(store, "t1", "conv-1", turn_id)

        event = await recorder.record(
            AuditEventType.POLICY_DECISION,
            ReasonCode.POLICY_BLOCKED,
            action="cancel_order",
        )

        assert event.reason_code == ReasonCode.POLICY_BLOCKED.value
        assert event.event_data == {"action": "cancel_order"}
        assert await store.list_events_by_turn(turn_id) == [event]
        assert recorder.events == [event]

    @pytest.mark.asyncio
    async def test_plain_string_reason_code(self) -> None:
        recorder = TurnAuditRecorder(InMemoryAuditStore(), "t1", "conv-1", uuid4())

        event = await recorder.record(AuditEventType.ESCALATION, "custom_reason")

        assert event.reason_code == "custom_reason"

    @pytest.mark.asyncio
    async def test_trail_is_json_safe(self) -> None:
        recorder = TurnAuditRecorder(InMemoryAuditStore(), "t1", "conv-1", uuid4())
        await recorder.record(AuditEventType.ASSESSMENT, confidence=8)

        trail = recorder.trail()

        assert trail[0]["event_type"] == "assessment"
        assert isinstance(trail[0]["turn_id"], str)
        assert isinstance(trail[0]["timestamp"], str)
