from .auth import Token
from .notification import (
    BroadcastRequest,
    BroadcastResponse,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationPreferences,
    NotificationPreferencesRead,
    NotificationRead,
)
from .user import UserRead

__all__ = [
    "Token",
    "BroadcastRequest",
    "BroadcastResponse",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationPreferences",
    "NotificationPreferencesRead",
    "NotificationRead",
    "UserRead",
]
