"""Per-user, per-category opt-out check consulted before persisting."""

from __future__ import annotations

from sqlalchemy.orm import Session

from checkday.domain.entities import NotificationCategory
from checkday.domain.errors import UnknownUserError
from checkday.infrastructure.repositories import UserRepository


def is_category_enabled(preferences: dict[str, bool], category: NotificationCategory) -> bool:
    """Return the stored flag for ``category``; absent keys are enabled."""

    return bool(preferences.get(NotificationCategory(category).value, True))


def should_deliver(session: Session, user_id: int, category: NotificationCategory) -> bool:
    """Return whether ``user_id`` wants notifications of ``category``.

    Raises :class:`UnknownUserError` when the user cannot be resolved so the
    creation pipeline can abandon the attempt with a reported failure.
    """

    preferences = UserRepository(session).get_notification_preferences(user_id)
    if preferences is None:
        raise UnknownUserError(user_id)
    return is_category_enabled(preferences, category)


__all__ = ["is_category_enabled", "should_deliver"]
