import threading

import pytest

from chatline.domain.ports.connection_handle import ConnectionHandle
from chatline.domain.value_objects import UserId
from chatline.infrastructure.realtime import ConnectionRegistry


class StubHandle(ConnectionHandle):
    def __init__(self, session_id: str):
        self._session_id = session_id
        self._closed = False
        self.events = []

    @property
    def session_id(self):
        return self._session_id

    @property
    def closed(self):
        return self._closed

    def offer(self, event):
        self.events.append(event)
        return True

    async def close(self, code=1000, reason=""):
        self._closed = True


def test_register_and_lookup():
    registry = ConnectionRegistry(shards=4)
    handle = StubHandle("s1")
    assert registry.register(UserId(3), handle) is None
    assert registry.lookup(UserId(3)) is handle
    assert registry.lookup(UserId(7)) is None
    assert registry.count() == 1


def test_register_replaces_previous_session():
    registry = ConnectionRegistry(shards=4)
    old, new = StubHandle("old"), StubHandle("new")
    registry.register(UserId(3), old)

    assert registry.register(UserId(3), new) is old
    assert registry.lookup(UserId(3)) is new
    assert registry.count() == 1
    # Displaced handles are left open
    assert not old.closed


def test_stale_remove_keeps_newer_session():
    registry = ConnectionRegistry(shards=4)
    registry.register(UserId(3), StubHandle("A"))
    registry.register(UserId(3), StubHandle("B"))

    assert registry.remove(UserId(3), "A") is False
    assert registry.lookup(UserId(3)).session_id == "B"

    assert registry.remove(UserId(3), "B") is True
    assert registry.lookup(UserId(3)) is None
    assert registry.count() == 0


def test_remove_unknown_user():
    registry = ConnectionRegistry()
    assert registry.remove(UserId(3), "A") is False


def test_online_user_ids_sorted_across_shards():
    registry = ConnectionRegistry(shards=3)
    for uid in (9, 3, 7, 4):
        registry.register(UserId(uid), StubHandle(f"s{uid}"))
    assert registry.online_user_ids() == [UserId(3), UserId(4), UserId(7), UserId(9)]


def test_invalid_shard_count():
    with pytest.raises(ValueError):
        ConnectionRegistry(shards=0)


def test_concurrent_registration_from_threads():
    registry = ConnectionRegistry(shards=8)

    def connect(start):
        for uid in range(start, start + 100):
            registry.register(UserId(uid), StubHandle(f"s{uid}"))
            registry.lookup(UserId(uid))

    threads = [threading.Thread(target=connect, args=(n * 100 + 1,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry.count() == 800
    assert len(registry.online_user_ids()) == 800
