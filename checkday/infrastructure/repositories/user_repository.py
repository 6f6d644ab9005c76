"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy.orm import Session

from checkday.domain.entities import User
from checkday.infrastructure.models import UserModel


class UserRepository:
    """Provide the user lookups the notification core depends on."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email.strip().lower(),
            password=user.password,
            role=user.role,
            is_active=user.is_active,
            notification_preferences=dict(user.notification_preferences or {}),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_notification_preferences(self, user_id: int) -> dict[str, bool] | None:
        """Return the stored preference map or ``None`` when the user is unknown."""

        model = self.session.get(UserModel, user_id)
        if model is None:
            return None
        return dict(model.notification_preferences or {})

    def update_notification_preferences(
        self, user_id: int, changes: Mapping[str, bool]
    ) -> dict[str, bool] | None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            return None
        # Reassign so the JSON column is flagged as dirty.
        model.notification_preferences = {
            **(model.notification_preferences or {}),
            **{key: bool(value) for key, value in changes.items()},
        }
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return dict(model.notification_preferences or {})

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            is_active=bool(model.is_active),
            notification_preferences=dict(model.notification_preferences or {}),
            created_at=model.created_at,
        )


__all__ = ["UserRepository"]
