"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from checkday.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def _build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``."""

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    # Sync route handlers run on a threadpool, so SQLite connections are shared.
    connect_args = {"check_same_thread": False}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        logger.debug("Using a shared in-memory SQLite database")
        return create_engine(
            database_url, connect_args=connect_args, poolclass=StaticPool
        )
    return create_engine(database_url, connect_args=connect_args)


engine = _build_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database() -> None:
    """Ensure all ORM models have corresponding database tables."""

    from checkday.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
