"""Client-side notification state reconciled against the server.

The cache is a two-state machine (``IDLE`` and ``FETCHING``). Fetch requests
that arrive while a fetch is in flight, too soon after the last success, or
without a known user are dropped rather than queued. Mark-read operations
update local state before the server answers and are never rolled back; the
next successful fetch replaces local state wholesale.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MIN_FETCH_INTERVAL = 10.0


class CacheState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"


class NotificationsApi(Protocol):
    async def list_notifications(
        self, *, page: int, limit: int, unread_only: bool, category: str | None
    ) -> dict[str, Any]: ...

    async def mark_read(self, notification_id: int) -> Any: ...

    async def mark_all_read(self) -> int: ...


@dataclass
class CachedNotification:
    id: int
    user_id: int
    type: str
    title: str
    message: str
    link: str | None
    is_read: bool
    created_at: str | None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CachedNotification":
        return cls(
            id=int(payload["id"]),
            user_id=int(payload["userId"]),
            type=str(payload["type"]),
            title=str(payload["title"]),
            message=str(payload["message"]),
            link=payload.get("link"),
            is_read=bool(payload.get("isRead", False)),
            created_at=payload.get("createdAt"),
        )


class NotificationCache:
    """Last-known notification feed for one signed-in user."""

    def __init__(
        self,
        api: NotificationsApi,
        *,
        user_id: int | None = None,
        page_size: int = 10,
        min_fetch_interval: float = DEFAULT_MIN_FETCH_INTERVAL,
        reuse_loaded: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._clock = clock
        self.page_size = page_size
        self.min_fetch_interval = min_fetch_interval
        # When set, a cache holding data skips fetches until a refresh is requested.
        self.reuse_loaded = reuse_loaded
        self.user_id = user_id
        self.state = CacheState.IDLE
        # Bumped on every reset; a fetch started under an older value is stale.
        self._generation = 0
        self._reset()

    def _reset(self) -> None:
        self._generation += 1
        self.notifications: list[CachedNotification] = []
        self.unread_count = 0
        self.total_count = 0
        self.last_fetch_at: float | None = None
        self.force_refresh = False
        self.last_error: Exception | None = None
        self._loaded = False
        self._held: list[CachedNotification] = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    def set_user(self, user_id: int | None) -> None:
        """Switch the signed-in user; a different user starts from an empty cache.

        A fetch still in flight for the previous user keeps the cache busy and
        its result is discarded when it completes.
        """

        if user_id != self.user_id:
            self.user_id = user_id
            self._reset()

    def request_refresh(self) -> None:
        """Let the next fetch bypass the rate limit and the loaded short-circuit."""

        self.force_refresh = True

    def drop_reason(self) -> str | None:
        """Return why a fetch would be dropped right now, or ``None``."""

        if self.user_id is None:
            return "no authenticated user"
        if self.state is CacheState.FETCHING:
            return "a fetch is already in flight"
        if self.force_refresh:
            return None
        if (
            self.last_fetch_at is not None
            and self._clock() - self.last_fetch_at < self.min_fetch_interval
        ):
            return "rate limited"
        if self.reuse_loaded and self._loaded:
            return "already loaded"
        return None

    async def fetch(
        self, *, page: int = 1, unread_only: bool = False, force: bool = False
    ) -> bool:
        """Reconcile with the server; return ``True`` when state was replaced."""

        if force:
            self.request_refresh()
        reason = self.drop_reason()
        if reason is not None:
            logger.debug("Skipping notification fetch: %s", reason)
            return False

        self.state = CacheState.FETCHING
        generation = self._generation
        try:
            payload = await self._api.list_notifications(
                page=page, limit=self.page_size, unread_only=unread_only, category=None
            )
            items = [CachedNotification.from_payload(item) for item in payload["items"]]
            total_count = int(payload["totalCount"])
            unread_count = int(payload["unreadCount"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            if generation == self._generation:
                self.last_error = exc
            logger.warning("Notification fetch failed, keeping cached state: %s", exc)
            return False
        else:
            if generation != self._generation:
                logger.debug("Discarding notification fetch started for a previous user")
                return False
            self.notifications = items
            self.total_count = total_count
            self.unread_count = unread_count
            self.force_refresh = False
            self.last_error = None
            self.last_fetch_at = self._clock()
            self._loaded = True
            return True
        finally:
            self.state = CacheState.IDLE
            self._replay_held()

    async def mark_as_read(self, notification_id: int) -> bool:
        """Flip one item locally, then tell the server; failures are not rolled back."""

        if self.user_id is None:
            return False
        item = self._find(notification_id)
        if item is not None and not item.is_read:
            item.is_read = True
            self.unread_count = max(0, self.unread_count - 1)
        try:
            await self._api.mark_read(notification_id)
        except httpx.HTTPError as exc:
            self.last_error = exc
            logger.warning("Marking notification %s read failed: %s", notification_id, exc)
            return False
        return True

    async def mark_all_as_read(self) -> bool:
        if self.user_id is None:
            return False
        for item in self.notifications:
            item.is_read = True
        self.unread_count = 0
        try:
            await self._api.mark_all_read()
        except httpx.HTTPError as exc:
            self.last_error = exc
            logger.warning("Marking all notifications read failed: %s", exc)
            return False
        return True

    def apply_push(self, payload: dict[str, Any]) -> bool:
        """Merge a pushed notification at the head of the feed.

        Pushes that arrive mid-fetch are held and replayed once the fetch ends.
        """

        try:
            notification = CachedNotification.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed notification push: %s", exc)
            return False
        if self.user_id is None or notification.user_id != self.user_id:
            return False
        if self.state is CacheState.FETCHING:
            self._held.append(notification)
            return False
        return self._merge(notification)

    async def handle_event(self, message: dict[str, Any]) -> bool:
        """Feed one realtime channel message into the cache."""

        message_type = message.get("type")
        if message_type == "notification":
            return self.apply_push(message.get("data") or {})
        if message_type == "refresh_notifications":
            return await self.fetch(force=True)
        return False

    def _merge(self, notification: CachedNotification) -> bool:
        if self._find(notification.id) is not None:
            return False
        self.notifications.insert(0, notification)
        self.total_count += 1
        if not notification.is_read:
            self.unread_count += 1
        return True

    def _replay_held(self) -> None:
        held, self._held = self._held, []
        for notification in held:
            self._merge(notification)

    def _find(self, notification_id: int) -> CachedNotification | None:
        for item in self.notifications:
            if item.id == notification_id:
                return item
        return None


__all__ = [
    "CacheState",
    "CachedNotification",
    "DEFAULT_MIN_FETCH_INTERVAL",
    "NotificationCache",
    "NotificationsApi",
]
