"""SQLAlchemy model for the user table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, func

from checkday.infrastructure.database import Base


class UserModel(Base):
    """Database representation of an application user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(80), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    # Category -> enabled map; categories missing from the map are enabled.
    notification_preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
