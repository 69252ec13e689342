"""Tests for the expiring key-value stores."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infrastructure.kv_store import InMemoryTtlStore, RedisTtlStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryTtlStore(clock=clock)


@pytest.mark.asyncio
async def test_entries_expire(store, clock):
    """Test a value disappears once its TTL has passed."""
    await store.set("key", "value", 10)
    assert await store.get("key") == "value"

    clock.now = 10
    assert await store.get("key") is None


@pytest.mark.asyncio
async def test_remaining_ttl_rounds_up(store, clock):
    """Test remaining TTL counts whole seconds and is never zero while live."""
    await store.set("key", "value", 180)
    assert await store.remaining_ttl("key") == 180

    clock.now = 60.5
    assert await store.remaining_ttl("key") == 120

    clock.now = 179.9
    assert await store.remaining_ttl("key") == 1

    clock.now = 180
    assert await store.remaining_ttl("key") is None


@pytest.mark.asyncio
async def test_set_if_absent(store, clock):
    """Test set_if_absent only writes missing or expired keys."""
    assert await store.set_if_absent("key", "first", 5) is True
    assert await store.set_if_absent("key", "second", 5) is False
    assert await store.get("key") == "first"

    clock.now = 5
    assert await store.set_if_absent("key", "third", 5) is True
    assert await store.get("key") == "third"


@pytest.mark.asyncio
async def test_delete_and_json(store):
    """Test JSON helpers and delete."""
    await store.set_json("key", {"phone": "+18025550100", "data": {"first": "Ada"}}, 60)
    assert await store.get_json("key") == {"phone": "+18025550100", "data": {"first": "Ada"}}

    await store.delete("key")
    assert await store.get_json("key") is None

    # Deleting a missing key is fine
    await store.delete("key")


@pytest.mark.asyncio
async def test_redis_store_delegates_to_client():
    """Test Redis-backed store uses the client's TTL operations."""
    client = MagicMock()
    client.set = AsyncMock(return_value=True)
    client.set_if_absent = AsyncMock(return_value=True)
    client.ttl = AsyncMock(return_value=42)
    client.get = AsyncMock(return_value="value")
    client.delete = AsyncMock()
    store = RedisTtlStore(client)

    await store.set("key", "value", 60)
    assert await store.set_if_absent("other", "value", 30) is True
    assert await store.remaining_ttl("key") == 42
    assert await store.get("key") == "value"
    await store.delete("key")

    client.set.assert_awaited_once_with("key", "value", ttl=60)
    client.set_if_absent.assert_awaited_once_with("other", "value", 30)
    client.delete.assert_awaited_once_with("key")
