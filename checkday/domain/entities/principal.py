"""Identity of whoever asks the notification core to do something."""

from __future__ import annotations

from dataclasses import dataclass

from .user import User


@dataclass(frozen=True)
class Principal:
    """Requesting party for a notification operation.

    ``user_id`` is ``None`` only for the in-process system principal used by
    collaborating subsystems (plans, invitations, comments).
    """

    user_id: int | None
    is_admin: bool = False
    is_system: bool = False

    @classmethod
    def for_user(cls, user: User) -> "Principal":
        return cls(user_id=user.id, is_admin=user.is_admin())

    @property
    def is_privileged(self) -> bool:
        return self.is_system or self.is_admin


SYSTEM_PRINCIPAL = Principal(user_id=None, is_system=True)


__all__ = ["Principal", "SYSTEM_PRINCIPAL"]
