"""Domain entity representing a user."""

from dataclasses import dataclass, field
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    email: str
    password: str
    role: str = ROLE_USER
    is_active: bool = True
    notification_preferences: dict[str, bool] = field(default_factory=dict)
    created_at: datetime | None = None

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role matches ``alias``."""

        return self.role.lower() == alias.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ROLE_ADMIN)


__all__ = ["User", "ROLE_ADMIN", "ROLE_USER"]
