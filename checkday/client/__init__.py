"""Client-side reconciliation of the notification feed."""

from .api import NotificationsApiClient
from .cache import CacheState, CachedNotification, NotificationCache

__all__ = [
    "CacheState",
    "CachedNotification",
    "NotificationCache",
    "NotificationsApiClient",
]
