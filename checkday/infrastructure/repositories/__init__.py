"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationPage, NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationPage",
    "NotificationRepository",
    "UserRepository",
]
