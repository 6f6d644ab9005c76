"""HTTP tests for the notification endpoints."""

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from pydantic import ValidationError

from checkday.domain.entities import Notification, NotificationCategory
from checkday.interfaces.api.routes.notifications import _notification_to_schema
from main import create_app


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _create(client, headers, recipient_id, **overrides):
    payload = {"userId": recipient_id, "type": "message", "title": "Hi", "message": "Hello there"}
    payload.update(overrides)
    return client.post("/notifications/", json=payload, headers=headers)


def test_endpoints_require_authentication(client):
    assert client.get("/notifications/").status_code == 401
    assert client.post("/notifications/read-all").status_code == 401


def test_create_returns_the_stored_notification(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user()

    response = _create(client, auth_headers(sender), recipient.id, link="/events/1")

    assert response.status_code == 201
    body = response.json()
    assert body["skipped"] is False
    notification = body["notification"]
    assert notification["userId"] == recipient.id
    assert notification["type"] == "message"
    assert notification["message"] == "Hello there"
    assert notification["link"] == "/events/1"
    assert notification["isRead"] is False
    assert notification["createdAt"]


def test_disabled_category_is_reported_as_skipped(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user(preferences={"like": False})

    response = _create(client, auth_headers(sender), recipient.id, type="like")

    assert response.status_code == 200
    assert response.json()["skipped"] is True
    assert response.json()["notification"] is None
    listing = client.get("/notifications/", headers=auth_headers(recipient)).json()
    assert listing["totalCount"] == 0


@pytest.mark.parametrize(
    ("overrides", "expected_status"),
    [
        ({"type": "poke"}, 400),
        ({"type": None}, 400),
        ({"title": ""}, 400),
        ({"message": None}, 400),
        ({"userId": 9999}, 404),
        ({"type": "system"}, 403),
    ],
)
def test_create_validation(client, make_user, auth_headers, overrides, expected_status):
    sender = make_user()
    recipient = make_user()

    response = _create(client, auth_headers(sender), recipient.id, **overrides)

    assert response.status_code == expected_status


def test_admin_can_create_system_notifications(client, make_user, auth_headers):
    admin = make_user(role="admin")
    recipient = make_user()

    response = _create(client, auth_headers(admin), recipient.id, type="system")

    assert response.status_code == 201


def test_list_paginates_oldest_first(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user()
    ids = [
        _create(client, auth_headers(sender), recipient.id, title=f"N{i}").json()["notification"]["id"]
        for i in range(3)
    ]

    first = client.get("/notifications/?page=1&limit=2", headers=auth_headers(recipient)).json()
    beyond = client.get("/notifications/?page=5&limit=2", headers=auth_headers(recipient)).json()

    assert [item["id"] for item in first["items"]] == ids[:2]
    assert first["totalCount"] == 3
    assert first["unreadCount"] == 3
    assert first["totalPages"] == 2
    assert beyond["items"] == []
    assert beyond["unreadCount"] == 3


def test_list_filters(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user()
    headers = auth_headers(recipient)
    first = _create(client, auth_headers(sender), recipient.id, type="like").json()["notification"]
    _create(client, auth_headers(sender), recipient.id, type="join")
    client.post(f"/notifications/{first['id']}/read", headers=headers)

    unread = client.get("/notifications/?unreadOnly=true", headers=headers).json()
    likes = client.get("/notifications/?type=like", headers=headers).json()
    invalid = client.get("/notifications/?type=poke", headers=headers)

    assert [item["type"] for item in unread["items"]] == ["join"]
    assert likes["totalCount"] == 1
    assert likes["unreadCount"] == 0
    assert invalid.status_code == 400


def test_mark_read_rules(client, make_user, auth_headers):
    sender = make_user()
    owner = make_user()
    stranger = make_user()
    created = _create(client, auth_headers(sender), owner.id).json()["notification"]

    assert client.post("/notifications/9999/read", headers=auth_headers(owner)).status_code == 404
    assert (
        client.post(f"/notifications/{created['id']}/read", headers=auth_headers(stranger)).status_code
        == 403
    )
    for _ in range(2):
        response = client.post(f"/notifications/{created['id']}/read", headers=auth_headers(owner))
        assert response.status_code == 200
        assert response.json()["isRead"] is True


def test_mark_all_read_reports_changed_rows(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user()
    for _ in range(2):
        _create(client, auth_headers(sender), recipient.id)

    first = client.post("/notifications/read-all", headers=auth_headers(recipient))
    second = client.post("/notifications/read-all", headers=auth_headers(recipient))

    assert first.json() == {"count": 2}
    assert second.json() == {"count": 0}


def test_broadcast_requires_admin(client, make_user, auth_headers):
    user = make_user()
    admin = make_user(role="admin")
    payload = {"title": "Maintenance", "message": "Back soon"}

    assert client.post("/notifications/broadcast", json=payload, headers=auth_headers(user)).status_code == 403
    response = client.post("/notifications/broadcast", json=payload, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json() == {"delivered": 0}


def test_preferences_roundtrip(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)

    initial = client.get("/users/me/notification-preferences", headers=headers).json()
    updated = client.put(
        "/users/me/notification-preferences", json={"like": False}, headers=headers
    ).json()
    rejected = client.put(
        "/users/me/notification-preferences", json={"email": False}, headers=headers
    )

    assert all(initial["preferences"].values())
    assert updated["preferences"]["like"] is False
    assert updated["preferences"]["message"] is True
    assert rejected.status_code == 422


def test_notification_without_id_is_not_serialized():
    unsaved = Notification(
        id=None,
        user_id=1,
        category=NotificationCategory.MESSAGE,
        title="Hi",
        body="Body",
    )

    with pytest.raises(ValidationError):
        _notification_to_schema(unsaved)
