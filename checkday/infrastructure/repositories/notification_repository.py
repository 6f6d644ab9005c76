"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timezone

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from checkday.domain.entities import Notification, NotificationCategory
from checkday.domain.errors import InvalidInputError
from checkday.infrastructure.models import NotificationModel
from checkday.utils import ensure_app_timezone


@dataclass
class NotificationPage:
    """A slice of a user's notification feed plus the feed counters."""

    items: Sequence[Notification]
    total_count: int
    unread_count: int


class NotificationRepository:
    """Provide the durable notification log operations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            category=NotificationCategory(notification.category).value,
            title=notification.title,
            body=notification.body,
            link=notification.link,
            is_read=False,
        )
        if notification.created_at is not None:
            model.created_at = notification.created_at.astimezone(timezone.utc).replace(
                tzinfo=None
            )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self,
        user_id: int,
        *,
        page: int,
        page_size: int,
        unread_only: bool = False,
        category: NotificationCategory | None = None,
    ) -> NotificationPage:
        """Return one oldest-first page of ``user_id``'s notifications.

        ``unread_count`` covers the same user and category scope regardless of
        ``unread_only``, so it always equals the unread items across all pages
        of the unfiltered feed.
        """

        if page < 1 or page_size < 1:
            raise InvalidInputError("page and page_size must be positive integers")

        scope = self._scope(user_id, category)
        unread_count = scope.filter(NotificationModel.is_read.is_(False)).count()

        query = scope
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        total_count = unread_count if unread_only else query.count()

        models = (
            query.order_by(NotificationModel.created_at.asc(), NotificationModel.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return NotificationPage(
            items=[self._to_entity(model) for model in models],
            total_count=total_count,
            unread_count=unread_count,
        )

    def count_unread(self, user_id: int) -> int:
        return (
            self._scope(user_id, None)
            .filter(NotificationModel.is_read.is_(False))
            .with_entities(func.count(NotificationModel.id))
            .scalar()
            or 0
        )

    def mark_read(self, notification_id: int) -> Notification | None:
        """Flip ``is_read`` on one notification; already-read rows are left alone."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_read(self, user_id: int) -> int:
        """Mark every unread notification of ``user_id`` read and return how many changed."""

        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return int(updated or 0)

    def _scope(self, user_id: int, category: NotificationCategory | None) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if category is not None:
            query = query.filter(
                NotificationModel.category == NotificationCategory(category).value
            )
        return query

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            category=NotificationCategory(model.category),
            title=model.title,
            body=model.body,
            link=model.link,
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationPage", "NotificationRepository"]
