"""Use case for creating a notification and pushing it to live connections."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from checkday.domain.entities import (
    PRIVILEGED_CATEGORIES,
    Notification,
    NotificationCategory,
    Principal,
)
from checkday.domain.errors import (
    ForbiddenError,
    InvalidCategoryError,
    MissingFieldError,
)
from checkday.infrastructure.notifications import NotificationDispatcher
from checkday.infrastructure.repositories import NotificationRepository
from checkday.utils import now_in_app_timezone

from .preference_gate import should_deliver

logger = logging.getLogger(__name__)


@dataclass
class CreationOutcome:
    """Result of a creation request.

    ``skipped`` is set when the recipient disabled the category; nothing was
    stored in that case. ``delivered`` counts the live connections that
    accepted the push and ``dispatch_failed`` records a dispatcher crash,
    neither of which affects the persisted record.
    """

    notification: Notification | None
    skipped: bool = False
    delivered: int = 0
    dispatch_failed: bool = False


def parse_category(value: object) -> NotificationCategory:
    """Return ``value`` as a category or raise :class:`InvalidCategoryError`."""

    if isinstance(value, NotificationCategory):
        return value
    try:
        return NotificationCategory(value)
    except ValueError as exc:
        raise InvalidCategoryError(value) from exc


def create_notification(
    session: Session,
    *,
    user_id: int | None,
    category: NotificationCategory | str,
    title: str | None,
    body: str | None,
    link: str | None = None,
    requested_by: Principal,
    dispatcher: NotificationDispatcher | None = None,
) -> CreationOutcome:
    """Persist a notification for ``user_id`` and then try to push it.

    Persistence and dispatch are separate phases: a failed push is logged
    and reported on the outcome but never undoes or fails the creation.
    """

    if not category:
        raise MissingFieldError("type")
    notification_category = parse_category(category)
    if not user_id:
        raise MissingFieldError("userId")
    title = (title or "").strip()
    body = (body or "").strip()
    if not title:
        raise MissingFieldError("title")
    if not body:
        raise MissingFieldError("message")
    if notification_category in PRIVILEGED_CATEGORIES and not requested_by.is_privileged:
        raise ForbiddenError(
            f"Creating '{notification_category.value}' notifications requires elevated privileges"
        )

    if not should_deliver(session, user_id, notification_category):
        logger.debug(
            "Skipping %s notification for user %s: category disabled",
            notification_category.value,
            user_id,
        )
        return CreationOutcome(notification=None, skipped=True)

    saved = NotificationRepository(session).create(
        Notification(
            id=None,
            user_id=user_id,
            category=notification_category,
            title=title,
            body=body,
            link=(link or "").strip() or None,
            is_read=False,
            created_at=now_in_app_timezone(),
        )
    )

    outcome = CreationOutcome(notification=saved)
    if dispatcher is None:
        return outcome
    try:
        outcome.delivered = dispatcher.dispatch(saved)
    except Exception:
        logger.exception("Realtime dispatch failed for notification %s", saved.id)
        outcome.dispatch_failed = True
    return outcome


__all__ = ["CreationOutcome", "create_notification", "parse_category"]
