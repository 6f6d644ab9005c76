"""Tests for the authentication token endpoint."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from checkday.application.use_cases import create_user
from checkday.infrastructure.models import UserModel
from checkday.infrastructure.security import user_id_from_token
from main import create_app


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _login(client, email: str, password: str):
    return client.post("/auth/token", data={"username": email, "password": password})


def test_login_returns_token_for_the_user(client, db_session):
    user = create_user(
        db_session, name="Ana", email="Ana@Example.com", password="s3cret", role="admin"
    )

    response = _login(client, "ana@example.com", "s3cret")

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user_id"] == user.id
    assert body["role"] == "admin"
    assert user_id_from_token(body["access_token"]) == user.id

    me = client.get("/users/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ana@example.com"


def test_wrong_password_is_rejected(client, db_session):
    create_user(db_session, name="Ana", email="ana@example.com", password="s3cret")

    assert _login(client, "ana@example.com", "nope").status_code == 401
    assert _login(client, "nobody@example.com", "s3cret").status_code == 401


def test_inactive_user_cannot_log_in(client, db_session):
    user = create_user(db_session, name="Ana", email="ana@example.com", password="s3cret")
    db_session.query(UserModel).filter(UserModel.id == user.id).update({"is_active": False})
    db_session.commit()

    assert _login(client, "ana@example.com", "s3cret").status_code == 403


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": " ", "email": "a@example.com", "password": "x"},
        {"name": "A", "email": "not-an-email", "password": "x"},
        {"name": "A", "email": "a@example.com", "password": ""},
        {"name": "A", "email": "a@example.com", "password": "x", "role": "owner"},
    ],
)
def test_create_user_validates_input(db_session, kwargs):
    with pytest.raises(ValueError):
        create_user(db_session, **kwargs)
