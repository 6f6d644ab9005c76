"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from checkday.domain.entities import NotificationCategory


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationCreate(_CamelModel):
    """Creation call sent by collaborating subsystems."""

    user_id: int | None = Field(default=None, description="Recipient user id")
    type: str | None = Field(default=None, description="Notification category")
    title: str | None = None
    message: str | None = None
    link: str | None = None


class NotificationRead(_CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: NotificationCategory
    title: str
    message: str
    link: str | None = None
    is_read: bool
    created_at: datetime | None = None


class NotificationCreateResponse(_CamelModel):
    skipped: bool
    message: str
    notification: NotificationRead | None = None


class NotificationListResponse(_CamelModel):
    items: list[NotificationRead]
    total_count: int
    unread_count: int
    page: int
    limit: int
    total_pages: int


class MarkAllReadResponse(_CamelModel):
    count: int


class BroadcastRequest(_CamelModel):
    """System-wide announcement pushed to every live connection."""

    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    link: str | None = None


class BroadcastResponse(_CamelModel):
    delivered: int


class NotificationPreferences(BaseModel):
    """Per-category flags; omitted categories are left unchanged on update."""

    model_config = ConfigDict(extra="forbid")

    system: bool | None = None
    invitation: bool | None = None
    message: bool | None = None
    like: bool | None = None
    join: bool | None = None
    reminder: bool | None = None

    def changes(self) -> dict[str, bool]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


class NotificationPreferencesRead(BaseModel):
    preferences: dict[str, bool]


__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationPreferences",
    "NotificationPreferencesRead",
    "NotificationRead",
]
