"""Use case for checking a user's login credentials."""

import logging
from dataclasses import dataclass
from enum import Enum, auto

from sqlalchemy.orm import Session

from checkday.domain.entities import User
from checkday.infrastructure.repositories import UserRepository
from checkday.infrastructure.security import verify_password

logger = logging.getLogger(__name__)


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()


@dataclass(frozen=True)
class AuthenticationResult:
    status: AuthenticationStatus
    user: User | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is AuthenticationStatus.SUCCESS


def authenticate_user(session: Session, email: str, password: str) -> AuthenticationResult:
    """Match ``email`` and ``password`` against the stored users.

    Unknown emails and wrong passwords are indistinguishable to the caller.
    """

    user = UserRepository(session).get_by_email(email.strip())
    if user is None or not verify_password(password, user.password):
        return AuthenticationResult(AuthenticationStatus.INVALID_CREDENTIALS)
    if not user.is_active:
        logger.info("Inactive user %s attempted to log in", user.id)
        return AuthenticationResult(AuthenticationStatus.INACTIVE, user)
    return AuthenticationResult(AuthenticationStatus.SUCCESS, user)
