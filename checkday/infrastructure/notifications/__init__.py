"""Realtime notification helpers for the infrastructure layer."""

from .connection import ConnectionHandle, DeliveryError, NotificationConnection
from .dispatcher import NotificationDispatcher, serialize_notification
from .registry import ConnectionRegistry

__all__ = [
    "ConnectionHandle",
    "ConnectionRegistry",
    "DeliveryError",
    "NotificationConnection",
    "NotificationDispatcher",
    "serialize_notification",
]
