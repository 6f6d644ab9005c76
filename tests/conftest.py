"""Shared fixtures: an in-memory database recreated for every test."""

from __future__ import annotations

import itertools
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from checkday.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from checkday.domain.entities import User  # noqa: E402
from checkday.infrastructure import database  # noqa: E402
from checkday.infrastructure.repositories import UserRepository  # noqa: E402
from checkday.infrastructure.security import create_user_token  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""

    database.initialize_database()
    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    """Create users without paying for password hashing."""

    counter = itertools.count(1)

    def _make(
        *,
        role: str = "user",
        preferences: dict[str, bool] | None = None,
        is_active: bool = True,
    ) -> User:
        number = next(counter)
        return UserRepository(db_session).create(
            User(
                id=None,
                name=f"User {number}",
                email=f"user{number}@example.com",
                password="not-a-real-hash",
                role=role,
                is_active=is_active,
                notification_preferences=preferences or {},
            )
        )

    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}

    return _headers


@pytest.fixture()
def anyio_backend():
    return "asyncio"
