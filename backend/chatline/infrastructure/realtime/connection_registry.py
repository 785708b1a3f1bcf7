"""
Connection Registry - maps an authenticated user id to its one live connection.

Guidelines:
- One instance per application container (Dishka Scope.APP), never a module global
- At most one LiveSession per user: register() replaces, it does not append
- remove() is guarded by session identity so a late disconnect of an old
  connection cannot erase the mapping of a newer one
- No operation awaits; all of them are O(1)

Locking:
    Entries are spread over a fixed number of shards, each with its own
    threading.Lock, so register/lookup/remove for different users rarely share
    a lock. The shard count is fixed at construction (Config.REGISTRY_SHARDS).
    This holds all sessions of a single process in memory; it does not span
    several routing processes.
"""

import logging
import threading
from typing import Optional

from chatline.domain.entities.live_session import LiveSession
from chatline.domain.ports.connection_handle import ConnectionHandle
from chatline.domain.value_objects.user_id import UserId
from chatline.observability.metrics import set_live_sessions

logger = logging.getLogger(__name__)


class _Shard:
    __slots__ = ("lock", "sessions")

    def __init__(self):
        self.lock = threading.Lock()
        self.sessions: dict[UserId, LiveSession] = {}


class ConnectionRegistry:
    def __init__(self, shards: int = 64):
        if shards <= 0:
            raise ValueError("Registry needs at least one shard")
        self._shards = tuple(_Shard() for _ in range(shards))
        self._count = 0
        self._count_lock = threading.Lock()

    def _shard(self, user_id: UserId) -> _Shard:
        return self._shards[user_id.value % len(self._shards)]

    def _adjust_count(self, delta: int) -> None:
        with self._count_lock:
            self._count += delta
            set_live_sessions(self._count)

    def register(
        self, user_id: UserId, handle: ConnectionHandle
    ) -> Optional[ConnectionHandle]:
        """
        Install or replace the live connection for user_id.

        Returns:
            The handle that was displaced, if any. It is not closed here.
        """
        shard = self._shard(user_id)
        with shard.lock:
            previous = shard.sessions.get(user_id)
            shard.sessions[user_id] = LiveSession(user_id=user_id, handle=handle)

        if previous is None:
            self._adjust_count(1)
            logger.info(f"User {user_id} connected (session {handle.session_id})")
            return None

        logger.info(
            f"User {user_id} reconnected: session {previous.session_id} "
            f"replaced by {handle.session_id}"
        )
        return previous.handle

    def lookup(self, user_id: UserId) -> Optional[ConnectionHandle]:
        """Return the live handle for user_id, or None when the user is offline."""
        shard = self._shard(user_id)
        with shard.lock:
            session = shard.sessions.get(user_id)
        return session.handle if session else None

    def remove(self, user_id: UserId, session_id: str) -> bool:
        """
        Remove the mapping for user_id if it still belongs to session_id.

        Returns:
            True if an entry was removed, False if absent or owned by a newer session.
        """
        shard = self._shard(user_id)
        with shard.lock:
            current = shard.sessions.get(user_id)
            if current is None:
                return False
            if current.session_id != session_id:
                logger.debug(
                    f"Ignoring stale disconnect for user {user_id}: "
                    f"session {session_id} is not current ({current.session_id})"
                )
                return False
            del shard.sessions[user_id]

        self._adjust_count(-1)
        logger.info(f"User {user_id} disconnected (session {session_id})")
        return True

    def count(self) -> int:
        with self._count_lock:
            return self._count

    def online_user_ids(self) -> list[UserId]:
        online: list[UserId] = []
        for shard in self._shards:
            with shard.lock:
                online.extend(shard.sessions.keys())
        return sorted(online)
