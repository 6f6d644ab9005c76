"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from checkday.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NotificationError,
    NotificationNotFoundError,
    UnknownUserError,
)


def notification_error_to_http(exc: NotificationError) -> HTTPException:
    """Translate a typed notification rejection into an HTTP error."""

    if isinstance(exc, InvalidInputError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (UnknownUserError, NotificationNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ForbiddenError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))
