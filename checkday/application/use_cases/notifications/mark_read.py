"""Use cases for moving notifications to the read state."""

from __future__ import annotations

from sqlalchemy.orm import Session

from checkday.domain.entities import Notification
from checkday.domain.errors import ForbiddenError, NotificationNotFoundError
from checkday.infrastructure.repositories import NotificationRepository


def mark_notification_read(
    session: Session, notification_id: int, *, requesting_user_id: int
) -> Notification:
    """Mark one notification read on behalf of its owner.

    Marking an already-read notification succeeds and returns it unchanged.
    """

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    if notification.user_id != requesting_user_id:
        raise ForbiddenError("You are not allowed to modify this notification")
    if notification.is_read:
        return notification
    updated = repository.mark_read(notification_id)
    if updated is None:  # pragma: no cover - row vanished between reads
        raise NotificationNotFoundError(notification_id)
    return updated


def mark_all_notifications_read(session: Session, user_id: int) -> int:
    """Return how many of ``user_id``'s unread notifications were marked read."""

    return NotificationRepository(session).mark_all_read(user_id)


__all__ = ["mark_all_notifications_read", "mark_notification_read"]
