"""Domain entities exposed by the application."""

from .notification import PRIVILEGED_CATEGORIES, Notification, NotificationCategory
from .principal import SYSTEM_PRINCIPAL, Principal
from .user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Notification",
    "NotificationCategory",
    "PRIVILEGED_CATEGORIES",
    "Principal",
    "SYSTEM_PRINCIPAL",
    "User",
    "ROLE_ADMIN",
    "ROLE_USER",
]
