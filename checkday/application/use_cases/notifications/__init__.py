"""Notification core use cases: preference gate, store operations, preferences."""

from .create_notification import CreationOutcome, create_notification, parse_category
from .list_notifications import list_notifications
from .mark_read import mark_all_notifications_read, mark_notification_read
from .preference_gate import is_category_enabled, should_deliver
from .preferences import get_notification_preferences, update_notification_preferences

__all__ = [
    "CreationOutcome",
    "create_notification",
    "parse_category",
    "list_notifications",
    "mark_notification_read",
    "mark_all_notifications_read",
    "is_category_enabled",
    "should_deliver",
    "get_notification_preferences",
    "update_notification_preferences",
]
