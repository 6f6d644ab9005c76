"""Rooms of live connections grouped by authenticated user."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import DefaultDict

from .connection import ConnectionHandle

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Track which live connections belong to which user.

    A connection lives in at most one room. It is added only after the
    client authenticates, so unauthenticated connections are never targeted.
    All operations take a lock because route handlers run on worker threads
    while the websocket handlers run on the event loop.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rooms: DefaultDict[int, set[ConnectionHandle]] = defaultdict(set)
        self._membership: dict[ConnectionHandle, int] = {}

    def join(self, user_id: int, handle: ConnectionHandle) -> None:
        """Place ``handle`` in ``user_id``'s room, leaving any previous room."""

        with self._lock:
            current = self._membership.get(handle)
            if current == user_id:
                return
            if current is not None:
                self._discard(current, handle)
            self._rooms[user_id].add(handle)
            self._membership[handle] = user_id
        logger.debug("Connection %s joined room of user %s", handle.id, user_id)

    def leave(self, handle: ConnectionHandle) -> int | None:
        """Remove ``handle`` from its room and return the room's user id."""

        with self._lock:
            user_id = self._membership.pop(handle, None)
            if user_id is not None:
                self._discard(user_id, handle)
        if user_id is not None:
            logger.debug("Connection %s left room of user %s", handle.id, user_id)
        return user_id

    def members_of(self, user_id: int) -> frozenset[ConnectionHandle]:
        """Return a snapshot of ``user_id``'s room."""

        with self._lock:
            return frozenset(self._rooms.get(user_id, ()))

    def room_of(self, handle: ConnectionHandle) -> int | None:
        with self._lock:
            return self._membership.get(handle)

    def all_members(self) -> list[ConnectionHandle]:
        """Return a snapshot of every connection in every room."""

        with self._lock:
            return list(self._membership)

    def user_ids(self) -> list[int]:
        with self._lock:
            return list(self._rooms)

    def __len__(self) -> int:
        with self._lock:
            return len(self._membership)

    def _discard(self, user_id: int, handle: ConnectionHandle) -> None:
        members = self._rooms.get(user_id)
        if members is None:
            return
        members.discard(handle)
        if not members:
            self._rooms.pop(user_id, None)


__all__ = ["ConnectionRegistry"]
