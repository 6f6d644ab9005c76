"""Best-effort fan-out of notifications to live connections."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, TypeVar

from anyio import from_thread

from checkday.domain.entities import Notification

from .connection import ConnectionHandle, DeliveryError
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOOP_HOP_TIMEOUT = 5.0


class NotificationDispatcher:
    """Push serialized events to every connection of a user's room.

    Every send is a non-blocking enqueue. A failing connection is logged
    and skipped; it never stops delivery to the rest of the room and never
    reaches the caller, whose notification is already persisted.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop | None) -> None:
        """Remember the loop that owns the connections; ``None`` unbinds it."""

        self._loop = loop

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def push(self, notification: Notification) -> int:
        """Deliver ``notification`` to its user's room and return the hit count."""

        message = {"type": "notification", "data": serialize_notification(notification)}
        return self.send_to_user(notification.user_id, message)

    def send_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        delivered = 0
        for handle in self._registry.members_of(user_id):
            if self._send(handle, message):
                delivered += 1
        return delivered

    def broadcast_all(self, message: dict[str, Any]) -> int:
        """Send ``message`` to every authenticated connection."""

        delivered = 0
        for handle in self._registry.all_members():
            if self._send(handle, message):
                delivered += 1
        logger.info("Broadcast %s delivered to %d connections", message.get("type"), delivered)
        return delivered

    def dispatch(self, notification: Notification) -> int:
        """Run :meth:`push` on the event loop, hopping threads when needed."""

        return self._call_in_loop(self.push, notification)

    def dispatch_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        return self._call_in_loop(self.send_to_user, user_id, message)

    def dispatch_broadcast(self, message: dict[str, Any]) -> int:
        return self._call_in_loop(self.broadcast_all, message)

    def _call_in_loop(self, func: Callable[..., T], *args: Any) -> T:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            return func(*args)

        try:
            return from_thread.run_sync(func, *args)
        except RuntimeError:
            # Not an anyio worker thread; fall through to the bound loop.
            pass

        loop = self._loop
        if loop is None or loop.is_closed():
            raise RuntimeError("Dispatcher is not bound to a running event loop")

        async def _run() -> T:
            return func(*args)

        future = asyncio.run_coroutine_threadsafe(_run(), loop)
        return future.result(timeout=LOOP_HOP_TIMEOUT)

    @staticmethod
    def _send(handle: ConnectionHandle, message: dict[str, Any]) -> bool:
        try:
            handle.send_nowait(dict(message))
        except DeliveryError as exc:
            logger.warning("Dropped %s for connection %s: %s", message.get("type"), handle.id, exc)
            return False
        except Exception:
            logger.exception("Unexpected failure sending to connection %s", handle.id)
            return False
        return True


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the wire representation shared by the REST and websocket APIs."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "type": notification.category.value,
        "title": notification.title,
        "message": notification.body,
        "link": notification.link,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


__all__ = ["NotificationDispatcher", "serialize_notification"]
