import asyncio
from typing import Optional
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from chatline.domain.value_objects import ConversationKey, UserId
from chatline.infrastructure.cache import CachedConversationStore
from chatline.infrastructure.persistence import MemoryConversationStore

KEY = ConversationKey("3_7")


@pytest.fixture()
def redis():
    client = AsyncMock()
    client.get.return_value = None
    client.eval.return_value = 1
    return client


class FakeRedis:
    """Just enough of redis.asyncio for the cache: strings, INCR and the fill script."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def incr(self, key: str) -> int:
        value = int(self.data.get(key, "0")) + 1
        self.data[key] = str(value)
        return value

    async def expire(self, key: str, ttl: int) -> bool:
        return key in self.data

    async def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0

    async def eval(self, script, numkeys, history_key, version_key, seen, ttl, payload) -> int:
        if self.data.get(version_key, "") != seen:
            return 0
        self.data[history_key] = payload
        return 1


class GatedStore(MemoryConversationStore):
    """Takes the history snapshot, then waits on `gate` before returning it."""

    def __init__(self):
        super().__init__()
        self.gate: Optional[asyncio.Event] = None

    async def fetch_history(self, conversation_key):
        snapshot = await super().fetch_history(conversation_key)
        if self.gate is not None:
            await self.gate.wait()
        return snapshot


@pytest.mark.asyncio
async def test_miss_reads_store_and_populates_cache(redis):
    inner = MemoryConversationStore()
    message = await inner.append(KEY, UserId(7), UserId(3), content="hi")
    store = CachedConversationStore(inner, redis, ttl=60)

    assert await store.fetch_history(KEY) == [message]

    redis.get.assert_any_await("chat:3_7:ver")
    redis.get.assert_any_await("chat:3_7:msgs")
    _, numkeys, key, version_key, seen, ttl, payload = redis.eval.await_args.args
    assert (numkeys, key, version_key, seen, ttl) == (2, "chat:3_7:msgs", "chat:3_7:ver", "", 60)
    assert '"content": "hi"' in payload


@pytest.mark.asyncio
async def test_hit_is_served_from_cache(redis):
    inner = MemoryConversationStore()
    message = await inner.append(KEY, UserId(7), UserId(3), content="hi")
    store = CachedConversationStore(inner, redis, ttl=60)
    await store.fetch_history(KEY)
    payload = redis.eval.await_args.args[6]
    redis.get.side_effect = lambda key: payload if key.endswith(":msgs") else None

    inner.fetch_history = AsyncMock(side_effect=AssertionError("store should not be read"))
    assert await store.fetch_history(KEY) == [message]


@pytest.mark.asyncio
async def test_append_writes_through_then_bumps_version_and_invalidates(redis):
    inner = MemoryConversationStore()
    store = CachedConversationStore(inner, redis, ttl=60)

    message = await store.append(KEY, UserId(7), UserId(3), content="hi")

    assert await inner.fetch_history(KEY) == [message]
    redis.incr.assert_awaited_once_with("chat:3_7:ver")
    redis.expire.assert_awaited_once_with("chat:3_7:ver", 60)
    redis.delete.assert_awaited_once_with("chat:3_7:msgs")


@pytest.mark.asyncio
async def test_read_overlapping_an_append_does_not_cache_stale_history():
    inner = GatedStore()
    store = CachedConversationStore(inner, FakeRedis(), ttl=60)
    await store.append(KEY, UserId(7), UserId(3), content="a")

    inner.gate = asyncio.Event()
    slow_read = asyncio.create_task(store.fetch_history(KEY))
    await asyncio.sleep(0)
    await store.append(KEY, UserId(3), UserId(7), content="b")
    inner.gate.set()
    assert [m.content for m in await slow_read] == ["a"]

    inner.gate = None
    assert [m.content for m in await store.fetch_history(KEY)] == ["a", "b"]


@pytest.mark.asyncio
async def test_unchanged_history_is_served_from_cache_after_fill():
    inner = MemoryConversationStore()
    redis = FakeRedis()
    store = CachedConversationStore(inner, redis, ttl=60)
    await store.append(KEY, UserId(7), UserId(3), content="a")

    await store.fetch_history(KEY)

    assert "chat:3_7:msgs" in redis.data


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_store(redis):
    redis.get.side_effect = RedisConnectionError("down")
    redis.incr.side_effect = RedisConnectionError("down")
    redis.eval.side_effect = RedisConnectionError("down")
    redis.delete.side_effect = RedisConnectionError("down")
    inner = MemoryConversationStore()
    store = CachedConversationStore(inner, redis, ttl=60)

    message = await store.append(KEY, UserId(7), UserId(3), content="hi")

    assert await store.fetch_history(KEY) == [message]
    assert await store.list_counterpart_ids(UserId(3)) == [UserId(7)]
    redis.eval.assert_not_awaited()
