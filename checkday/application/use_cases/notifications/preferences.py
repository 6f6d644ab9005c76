"""Use cases for the caller's notification preference map."""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy.orm import Session

from checkday.domain.entities import NotificationCategory
from checkday.domain.errors import UnknownUserError
from checkday.infrastructure.repositories import UserRepository

from .create_notification import parse_category


def get_notification_preferences(session: Session, user_id: int) -> dict[str, bool]:
    """Return the effective flag for every category, defaults included."""

    stored = UserRepository(session).get_notification_preferences(user_id)
    if stored is None:
        raise UnknownUserError(user_id)
    return _effective(stored)


def update_notification_preferences(
    session: Session, user_id: int, changes: Mapping[str, bool]
) -> dict[str, bool]:
    """Merge ``changes`` into the stored map; unknown categories are rejected."""

    normalized = {parse_category(key).value: bool(value) for key, value in changes.items()}
    stored = UserRepository(session).update_notification_preferences(user_id, normalized)
    if stored is None:
        raise UnknownUserError(user_id)
    return _effective(stored)


def _effective(stored: Mapping[str, bool]) -> dict[str, bool]:
    return {
        category.value: bool(stored.get(category.value, True))
        for category in NotificationCategory
    }


__all__ = ["get_notification_preferences", "update_notification_preferences"]
