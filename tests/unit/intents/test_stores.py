"""Unit tests for pending-intent stores."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from warden.config.models.storage import PendingIntentStoreConfig
from warden.errors import ConnectionError
from warden.intents import (
    InMemoryPendingIntentStore,
    PendingIntent,
    RedisPendingIntentStore,
    create_pending_intent_store,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def intent() -> PendingIntent:
    return PendingIntent.create("conv-1", "cancel_order", {"orderId": "12345"})


class TestInMemoryPendingIntentStore:
    @pytest.mark.asyncio
    async def test_get_and_clear_returns_once(self, intent: PendingIntent) -> None:
        store = InMemoryPendingIntentStore()
        await store.set(intent, ttl_seconds=60)

        assert await store.get_and_clear("conv-1") == intent
        assert await store.get_and_clear("conv-1") is None

    @pytest.mark.asyncio
    async def test_missing_conversation(self) -> None:
        store = InMemoryPendingIntentStore()

        assert await store.get_and_clear("nobody") is None

    @pytest.mark.asyncio
    async def test_expired_intent_is_absent(self, intent: PendingIntent) -> None:
        clock = FakeClock()
        store = InMemoryPendingIntentStore(clock=clock)
        await store.set(intent, ttl_seconds=900)

        clock.now += 900

        assert await store.get_and_clear("conv-1") is None

    @pytest.mark.asyncio
    async def test_intent_before_expiry_is_returned(self, intent: PendingIntent) -> None:
        clock = FakeClock()
        store = InMemoryPendingIntentStore(clock=clock)
        await store.set(intent, ttl_seconds=900)

        clock.now += 899

        assert await store.get_and_clear("conv-1") == intent

    @pytest.mark.asyncio
    async def test_set_replaces_existing(self, intent: PendingIntent) -> None:
        store = InMemoryPendingIntentStore()
        replacement = PendingIntent.create("conv-1", "cancel_order", {"orderId": "999"})
        await store.set(intent, ttl_seconds=60)
        await store.set(replacement, ttl_seconds=60)

        assert await store.get_and_clear("conv-1") == replacement

    @pytest.mark.asyncio
    async def test_conversations_are_isolated(self, intent: PendingIntent) -> None:
        store = InMemoryPendingIntentStore()
        await store.set(intent, ttl_seconds=60)

        assert await store.get_and_clear("conv-2") is None
        assert await store.get_and_clear("conv-1") == intent

    @pytest.mark.asyncio
    async def test_concurrent_get_and_clear_hands_out_one_intent(
        self, intent: PendingIntent
    ) -> None:
        store = InMemoryPendingIntentStore()
        await store.set(intent, ttl_seconds=60)

        results = await asyncio.gather(
            store.get_and_clear("conv-1"), store.get_and_clear("conv-1")
        )

        assert sorted(results, key=lambda r: r is None) == [intent, None]


class TestRedisPendingIntentStore:
    @pytest.fixture
    def client(self) -> AsyncMock:
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_set_uses_key_ttl(self, client: AsyncMock, intent: PendingIntent) -> None:
        store = RedisPendingIntentStore(client, key_prefix="pi")

        await store.set(intent, ttl_seconds=900)

        client.set.assert_awaited_once_with(
            "pi:conv-1", intent.model_dump_json(), ex=900
        )

    @pytest.mark.asyncio
    async def test_get_and_clear_uses_getdel(
        self, client: AsyncMock, intent: PendingIntent
    ) -> None:
        client.getdel.return_value = intent.model_dump_json().encode()
        store = RedisPendingIntentStore(client)

        result = await store.get_and_clear("conv-1")

        assert result == intent
        client.getdel.assert_awaited_once_with("pending_intent:conv-1")

    @pytest.mark.asyncio
    async def test_absent_key(self, client: AsyncMock) -> None:
        client.getdel.return_value = None
        store = RedisPendingIntentStore(client)

        assert await store.get_and_clear("conv-1") is None

    @pytest.mark.asyncio
    async def test_corrupted_value_is_absent(self, client: AsyncMock) -> None:
        client.getdel.return_value = "{not json"
        store = RedisPendingIntentStore(client)

        assert await store.get_and_clear("conv-1") is None

    @pytest.mark.asyncio
    async def test_redis_error_on_set(self, client: AsyncMock, intent: PendingIntent) -> None:
        client.set.side_effect = redis.RedisError("down")
        store = RedisPendingIntentStore(client)

        with pytest.raises(ConnectionError):
            await store.set(intent, ttl_seconds=60)

    @pytest.mark.asyncio
    async def test_redis_error_on_get(self, client: AsyncMock) -> None:
        client.getdel.side_effect = redis.RedisError("down")
        store = RedisPendingIntentStore(client)

        with pytest.raises(ConnectionError):
            await store.get_and_clear("conv-1")

    @pytest.mark.asyncio
    async def test_concurrent_get_and_clear_hands_out_one_intent(
        self, client: AsyncMock, intent: PendingIntent
    ) -> None:
        values = {"pending_intent:conv-1": intent.model_dump_json().encode()}

        async def getdel(key: str) -> bytes | None:
            await asyncio.sleep(0)
            return values.pop(key, None)

        client.getdel.side_effect = getdel
        store = RedisPendingIntentStore(client)

        results = await asyncio.gather(
            store.get_and_clear("conv-1"), store.get_and_clear("conv-1")
        )

        assert sorted(results, key=lambda r: r is None) == [intent, None]
        assert client.getdel.await_count == 2
        client.get.assert_not_called()
        client.delete.assert_not_called()


class TestCreatePendingIntentStore:
    def test_inmemory(self) -> None:
        store = create_pending_intent_store(PendingIntentStoreConfig(backend="inmemory"))

        assert isinstance(store, InMemoryPendingIntentStore)

    def test_redis(self) -> None:
        store = create_pending_intent_store(
            PendingIntentStoreConfig(
                backend="redis", connection_url="redis://localhost:6379/0"
            )
        )

        assert isinstance(store, RedisPendingIntentStore)
