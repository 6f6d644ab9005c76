"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationCategory(str, Enum):
    """Closed set of notification kinds a user can opt out of."""

    SYSTEM = "system"
    INVITATION = "invitation"
    MESSAGE = "message"
    LIKE = "like"
    JOIN = "join"
    REMINDER = "reminder"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


# Categories that only administrators or the system itself may emit.
PRIVILEGED_CATEGORIES: frozenset[NotificationCategory] = frozenset(
    {NotificationCategory.SYSTEM}
)


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    category: NotificationCategory
    title: str
    body: str
    link: str | None = None
    is_read: bool = False
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationCategory", "PRIVILEGED_CATEGORIES"]
