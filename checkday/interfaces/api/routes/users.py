"""Routes for the caller's profile and notification preferences."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from checkday.application.use_cases.notifications import (
    get_notification_preferences,
    update_notification_preferences,
)
from checkday.domain.entities import User
from checkday.domain.errors import NotificationError
from checkday.infrastructure.database import get_db
from checkday.interfaces.api.dependencies import get_current_active_user
from checkday.interfaces.api.routes_helpers import notification_error_to_http
from checkday.interfaces.api.schemas import (
    NotificationPreferences,
    NotificationPreferencesRead,
    UserRead,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_active_user)):
    """Return the authenticated user."""

    return UserRead.model_validate(current_user)


@router.get("/me/notification-preferences", response_model=NotificationPreferencesRead)
def read_notification_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Return the caller's flag for every notification category."""

    try:
        preferences = get_notification_preferences(db, current_user.id)
    except NotificationError as exc:
        raise notification_error_to_http(exc) from exc
    return NotificationPreferencesRead(preferences=preferences)


@router.put("/me/notification-preferences", response_model=NotificationPreferencesRead)
def update_my_notification_preferences(
    payload: NotificationPreferences,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Enable or disable notification categories for the caller."""

    try:
        preferences = update_notification_preferences(db, current_user.id, payload.changes())
    except NotificationError as exc:
        raise notification_error_to_http(exc) from exc
    return NotificationPreferencesRead(preferences=preferences)
