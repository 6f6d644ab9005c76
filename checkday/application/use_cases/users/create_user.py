"""Use case for creating users."""

from sqlalchemy.orm import Session

from checkday.domain.entities import ROLE_ADMIN, ROLE_USER, User
from checkday.infrastructure.repositories import UserRepository
from checkday.infrastructure.security import get_password_hash

_ALLOWED_ROLES = (ROLE_ADMIN, ROLE_USER)


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)

    if not name.strip():
        raise ValueError("Name is required")
    normalized_email = email.strip().lower()
    if normalized_email.count("@") != 1:
        raise ValueError("A valid email address is required")
    if repository.get_by_email(normalized_email):
        raise ValueError("Email address is already registered")
    if role not in _ALLOWED_ROLES:
        raise ValueError(f"Unknown role: {role}")
    if not password:
        raise ValueError("Password is required")

    user = User(
        id=None,
        name=name.strip(),
        email=normalized_email,
        password=get_password_hash(password),
        role=role,
        is_active=True,
    )
    return repository.create(user)
