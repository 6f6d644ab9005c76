"""Typed rejections raised by the notification core.

Every rejection derives from ``ValueError`` so routes can translate them into
HTTP errors; the concrete type tells callers whether retrying makes sense.
"""

from __future__ import annotations


class NotificationError(ValueError):
    """Base class for rejected notification operations."""


class InvalidInputError(NotificationError):
    """The request itself is malformed and must not be retried as is."""


class InvalidCategoryError(InvalidInputError):
    def __init__(self, category: object) -> None:
        super().__init__(f"Invalid notification category: {category!r}")
        self.category = category


class MissingFieldError(InvalidInputError):
    def __init__(self, field_name: str) -> None:
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class UnknownUserError(NotificationError):
    def __init__(self, user_id: object) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class NotificationNotFoundError(NotificationError):
    def __init__(self, notification_id: object) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class ForbiddenError(NotificationError):
    """The requesting principal may not perform the operation."""


__all__ = [
    "NotificationError",
    "InvalidInputError",
    "InvalidCategoryError",
    "MissingFieldError",
    "UnknownUserError",
    "NotificationNotFoundError",
    "ForbiddenError",
]
