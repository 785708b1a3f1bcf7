import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from chatline.domain.value_objects import ConversationKey, MediaRef, UserId
from chatline.infrastructure.persistence import KeyedLocks, MemoryConversationStore

KEY = ConversationKey("3_7")


@pytest.mark.asyncio
async def test_history_is_ordered_and_ids_increase():
    store = MemoryConversationStore()
    first = await store.append(KEY, UserId(7), UserId(3), content="one")
    second = await store.append(KEY, UserId(3), UserId(7), content="two")
    third = await store.append(KEY, UserId(7), UserId(3), media_ref=MediaRef("x.png"))

    history = await store.fetch_history(KEY)
    assert history == [first, second, third]
    assert first.id < second.id < third.id


@pytest.mark.asyncio
async def test_timestamps_never_go_backwards():
    now = datetime(2025, 1, 27, 12, 0, tzinfo=timezone.utc)
    ticks = iter([now, now - timedelta(seconds=30), now + timedelta(seconds=1)])
    store = MemoryConversationStore(clock=lambda: next(ticks))

    await store.append(KEY, UserId(7), UserId(3), content="a")
    skewed = await store.append(KEY, UserId(3), UserId(7), content="b")
    await store.append(KEY, UserId(7), UserId(3), content="c")

    history = await store.fetch_history(KEY)
    assert skewed.created_at == now
    assert [m.content for m in history] == ["a", "b", "c"]
    assert [m.created_at for m in history] == sorted(m.created_at for m in history)


@pytest.mark.asyncio
async def test_concurrent_appends_keep_every_message():
    store = MemoryConversationStore()
    await asyncio.gather(
        *(
            store.append(KEY, UserId(7 if n % 2 else 3), UserId(3 if n % 2 else 7), content=str(n))
            for n in range(50)
        )
    )

    history = await store.fetch_history(KEY)
    assert len(history) == 50
    assert len({m.id for m in history}) == 50
    assert history == sorted(history, key=lambda m: m.sort_key)


@pytest.mark.asyncio
async def test_unknown_conversation_is_empty():
    assert await MemoryConversationStore().fetch_history(ConversationKey("1_2")) == []


@pytest.mark.asyncio
async def test_list_counterpart_ids():
    store = MemoryConversationStore()
    await store.append(ConversationKey("3_7"), UserId(7), UserId(3), content="hi")
    await store.append(ConversationKey("3_9"), UserId(3), UserId(9), content="hi")
    await store.append(ConversationKey("7_9"), UserId(9), UserId(7), content="hi")

    assert await store.list_counterpart_ids(UserId(3)) == [UserId(7), UserId(9)]
    assert await store.list_counterpart_ids(UserId(7)) == [UserId(3), UserId(9)]
    assert await store.list_counterpart_ids(UserId(4)) == []


@pytest.mark.asyncio
async def test_keyed_locks_serialise_same_key_and_drop_idle_locks():
    locks = KeyedLocks()
    order = []

    async def worker(name):
        async with locks.hold("k"):
            order.append(f"{name}-in")
            await asyncio.sleep(0)
            order.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_keyed_locks_do_not_block_other_keys():
    locks = KeyedLocks()
    async with locks.hold("a"):
        await asyncio.wait_for(_enter(locks, "b"), timeout=1)


async def _enter(locks, key):
    async with locks.hold(key):
        return True
