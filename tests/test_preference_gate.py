"""Tests for the per-user category opt-out check."""

import pytest

from checkday.application.use_cases.notifications import (
    get_notification_preferences,
    is_category_enabled,
    should_deliver,
    update_notification_preferences,
)
from checkday.domain.entities import NotificationCategory
from checkday.domain.errors import InvalidCategoryError, UnknownUserError


@pytest.mark.parametrize("category", list(NotificationCategory))
def test_absent_categories_are_enabled(category):
    assert is_category_enabled({}, category) is True


def test_stored_flag_wins_over_default():
    preferences = {"like": False, "message": True}

    assert is_category_enabled(preferences, NotificationCategory.LIKE) is False
    assert is_category_enabled(preferences, NotificationCategory.MESSAGE) is True
    assert is_category_enabled(preferences, NotificationCategory.JOIN) is True


def test_should_deliver_reads_the_users_map(db_session, make_user):
    user = make_user(preferences={"like": False})

    assert should_deliver(db_session, user.id, NotificationCategory.LIKE) is False
    assert should_deliver(db_session, user.id, NotificationCategory.REMINDER) is True


def test_should_deliver_rejects_unknown_users(db_session):
    with pytest.raises(UnknownUserError):
        should_deliver(db_session, 999, NotificationCategory.SYSTEM)


def test_preferences_update_merges_and_reports_every_category(db_session, make_user):
    user = make_user(preferences={"like": False})

    updated = update_notification_preferences(db_session, user.id, {"join": False})

    assert updated == {
        "system": True,
        "invitation": True,
        "message": True,
        "like": False,
        "join": False,
        "reminder": True,
    }
    db_session.expire_all()
    assert get_notification_preferences(db_session, user.id) == updated


def test_preferences_update_rejects_unknown_categories(db_session, make_user):
    user = make_user()

    with pytest.raises(InvalidCategoryError):
        update_notification_preferences(db_session, user.id, {"email": False})
