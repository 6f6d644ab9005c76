"""A live websocket paired with a bounded outbound buffer."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol
from uuid import uuid4

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """Raised when a message cannot be queued for a single connection."""


class ConnectionHandle(Protocol):
    """What the registry and dispatcher need from a connection."""

    id: str

    def send_nowait(self, message: dict[str, Any]) -> None: ...


class NotificationConnection:
    """Websocket wrapper whose sends never wait on the network.

    ``send_nowait`` only enqueues; ``run_writer`` drains the queue into the
    socket. A slow client fills its own buffer and starts rejecting messages
    instead of blocking whoever is dispatching.
    """

    def __init__(self, websocket: WebSocket, *, queue_size: int = 100) -> None:
        self.id = uuid4().hex
        self._websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send_nowait(self, message: dict[str, Any]) -> None:
        if self._closed:
            raise DeliveryError(f"connection {self.id} is closed")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull as exc:
            raise DeliveryError(f"outbound buffer full for connection {self.id}") from exc

    async def run_writer(self) -> None:
        """Forward queued messages to the websocket until the socket fails."""

        while not self._closed:
            message = await self._queue.get()
            try:
                await self._websocket.send_json(message)
            except Exception as exc:
                logger.info("Stopping writer for connection %s: %s", self.id, exc)
                self._closed = True

    def mark_closed(self) -> None:
        self._closed = True

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"NotificationConnection(id={self.id!r}, closed={self._closed})"


__all__ = ["ConnectionHandle", "DeliveryError", "NotificationConnection"]
