"""HTTP client for the notification query and mutation API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class NotificationsApiClient:
    """Thin async wrapper over the ``/notifications`` endpoints.

    Non-2xx responses raise :class:`httpx.HTTPStatusError`; transport problems
    raise the other :class:`httpx.HTTPError` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self._client.headers["Authorization"] = f"Bearer {token}"

    async def list_notifications(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        unread_only: bool = False,
        category: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "page": page,
            "limit": limit,
            "unreadOnly": "true" if unread_only else "false",
        }
        if category:
            params["type"] = category
        response = await self._client.get("/notifications/", params=params)
        response.raise_for_status()
        return response.json()

    async def mark_read(self, notification_id: int) -> dict[str, Any]:
        response = await self._client.post(f"/notifications/{notification_id}/read")
        response.raise_for_status()
        return response.json()

    async def mark_all_read(self) -> int:
        response = await self._client.post("/notifications/read-all")
        response.raise_for_status()
        return int(response.json().get("count", 0))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "NotificationsApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["NotificationsApiClient"]
