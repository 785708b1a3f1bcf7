import asyncio
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from prisma.errors import PrismaError

from chatline.domain.exceptions import StoreUnavailableError
from chatline.domain.value_objects import ConversationKey, UserId
from chatline.infrastructure.persistence.prisma_conversation_store import (
    HISTORY_ORDER,
    PrismaConversationStore,
)
from chatline.infrastructure.persistence.prisma_user_repository import PrismaUserRepository

KEY = ConversationKey("3_7")


def _row(id=1, timestamp=None, content="hi"):
    return SimpleNamespace(
        id=id,
        chat_id="3_7",
        sender_id=7,
        receiver_id=3,
        timestamp=timestamp or datetime.now(timezone.utc),
        content=content,
        file_path=None,
    )


async def _hang(**kwargs):
    await asyncio.sleep(10)


@pytest.fixture()
def prisma():
    client = MagicMock()
    tx = MagicMock()
    tx.message.find_first = AsyncMock(return_value=None)
    tx.message.create = AsyncMock(side_effect=lambda data: SimpleNamespace(id=2, **data))
    client.tx.return_value.__aenter__.return_value = tx
    client.tx_client = tx
    return client


@pytest.mark.asyncio
async def test_history_is_read_in_timestamp_then_id_order(prisma):
    rows = [_row(1, content="a"), _row(2, content="b")]
    prisma.message.find_many = AsyncMock(return_value=rows)
    store = PrismaConversationStore(prisma)

    history = await store.fetch_history(KEY)

    assert [m.content for m in history] == ["a", "b"]
    prisma.message.find_many.assert_awaited_once_with(
        where={"chat_id": "3_7"}, order=HISTORY_ORDER
    )
    assert HISTORY_ORDER == [{"timestamp": "asc"}, {"id": "asc"}]


@pytest.mark.asyncio
async def test_hung_query_times_out_as_unavailable(prisma):
    prisma.message.find_many = _hang
    store = PrismaConversationStore(prisma, timeout=0.01)

    with pytest.raises(StoreUnavailableError):
        await store.fetch_history(KEY)


@pytest.mark.asyncio
async def test_engine_error_becomes_unavailable(prisma):
    prisma.message.find_many = AsyncMock(side_effect=PrismaError("engine gone"))
    store = PrismaConversationStore(prisma)

    with pytest.raises(StoreUnavailableError):
        await store.list_counterpart_ids(UserId(3))


@pytest.mark.asyncio
async def test_append_never_stamps_before_the_newest_row(prisma):
    ahead = datetime.now(timezone.utc) + timedelta(minutes=5)
    prisma.tx_client.message.find_first.return_value = _row(1, timestamp=ahead)
    store = PrismaConversationStore(prisma)

    message = await store.append(KEY, UserId(7), UserId(3), content="later")

    data = prisma.tx_client.message.create.await_args.kwargs["data"]
    assert data["timestamp"] == ahead
    assert data["chat_id"] == "3_7"
    assert message.created_at == ahead


@pytest.mark.asyncio
async def test_append_uses_current_time_when_newest_row_is_older(prisma):
    before = datetime.now(timezone.utc)
    prisma.tx_client.message.find_first.return_value = _row(1, timestamp=before - timedelta(days=1))
    store = PrismaConversationStore(prisma)

    await store.append(KEY, UserId(7), UserId(3), content="now")

    data = prisma.tx_client.message.create.await_args.kwargs["data"]
    assert data["timestamp"] >= before


@pytest.mark.asyncio
async def test_append_failure_becomes_unavailable(prisma):
    prisma.tx_client.message.create.side_effect = PrismaError("connection reset")
    store = PrismaConversationStore(prisma)

    with pytest.raises(StoreUnavailableError):
        await store.append(KEY, UserId(7), UserId(3), content="hi")


@pytest.mark.asyncio
async def test_directory_lookups_are_bounded(prisma):
    prisma.user.find_unique = _hang
    prisma.user.find_many = AsyncMock(side_effect=PrismaError("engine gone"))
    users = PrismaUserRepository(prisma, timeout=0.01)

    with pytest.raises(StoreUnavailableError):
        await users.get_by_id(UserId(3))
    with pytest.raises(StoreUnavailableError):
        await users.get_many([UserId(3), UserId(7)])
