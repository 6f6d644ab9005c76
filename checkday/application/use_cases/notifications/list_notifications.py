"""Use case for reading a page of the caller's notification feed."""

from sqlalchemy.orm import Session

from checkday.domain.entities import NotificationCategory
from checkday.infrastructure.repositories import NotificationPage, NotificationRepository


def list_notifications(
    session: Session,
    user_id: int,
    *,
    page: int = 1,
    page_size: int = 10,
    unread_only: bool = False,
    category: NotificationCategory | None = None,
) -> NotificationPage:
    """Return the requested page; pages past the end come back empty."""

    return NotificationRepository(session).list_for_user(
        user_id,
        page=page,
        page_size=page_size,
        unread_only=unread_only,
        category=category,
    )
