"""Websocket tests for authenticating connections and receiving pushes."""

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from checkday.infrastructure.security import create_user_token
from main import create_app


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _registry(client):
    return client.app.state.connection_registry


def _authenticate(websocket, user):
    websocket.send_json(
        {"type": "authenticate", "data": {"userId": user.id, "token": create_user_token(user.id)}}
    )
    return websocket.receive_json()


def _create(client, headers, recipient_id, title):
    response = client.post(
        "/notifications/",
        json={"userId": recipient_id, "type": "message", "title": title, "message": "Body"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["notification"]


def test_ping_gets_pong(client):
    with client.websocket_connect("/notifications/ws") as websocket:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_authenticate_reports_unread_count(client, make_user, auth_headers):
    sender = make_user()
    user = make_user()
    _create(client, auth_headers(sender), user.id, "Before connecting")

    with client.websocket_connect("/notifications/ws") as websocket:
        reply = _authenticate(websocket, user)

        assert reply == {"type": "auth_success", "data": {"userId": user.id, "unreadCount": 1}}
        assert len(_registry(client).members_of(user.id)) == 1

    assert len(_registry(client)) == 0


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"userId": 1},
        {"userId": 1, "token": "not-a-token"},
    ],
)
def test_bad_credentials_are_rejected(client, make_user, data):
    make_user()

    with client.websocket_connect("/notifications/ws") as websocket:
        websocket.send_json({"type": "authenticate", "data": data})
        reply = websocket.receive_json()

        assert reply["type"] == "auth_error"
        assert len(_registry(client)) == 0


def test_token_for_another_user_is_rejected(client, make_user):
    victim = make_user()
    attacker = make_user()

    with client.websocket_connect("/notifications/ws") as websocket:
        websocket.send_json(
            {
                "type": "authenticate",
                "data": {"userId": victim.id, "token": create_user_token(attacker.id)},
            }
        )

        assert websocket.receive_json()["type"] == "auth_error"
        assert _registry(client).members_of(victim.id) == frozenset()


def test_unknown_and_malformed_messages_get_errors(client):
    with client.websocket_connect("/notifications/ws") as websocket:
        websocket.send_json({"type": "subscribe"})
        assert websocket.receive_json()["type"] == "error"

        websocket.send_json(["not", "an", "object"])
        assert websocket.receive_json()["type"] == "error"

        websocket.send_text("{broken")
        assert websocket.receive_json()["type"] == "error"


def test_every_open_tab_receives_the_push(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user()
    headers = auth_headers(sender)

    with client.websocket_connect("/notifications/ws") as second_tab:
        assert _authenticate(second_tab, recipient)["type"] == "auth_success"

        with client.websocket_connect("/notifications/ws") as first_tab:
            assert _authenticate(first_tab, recipient)["type"] == "auth_success"

            created = _create(client, headers, recipient.id, "First")

            for tab in (first_tab, second_tab):
                message = tab.receive_json()
                assert message["type"] == "notification"
                assert message["data"]["id"] == created["id"]

        assert len(_registry(client).members_of(recipient.id)) == 1

        later = _create(client, headers, recipient.id, "Second")
        message = second_tab.receive_json()
        assert message["data"]["id"] == later["id"]
        assert message["data"]["title"] == "Second"


def test_read_all_asks_open_tabs_to_refresh(client, make_user, auth_headers):
    sender = make_user()
    recipient = make_user()
    _create(client, auth_headers(sender), recipient.id, "Unread")

    with client.websocket_connect("/notifications/ws") as websocket:
        _authenticate(websocket, recipient)

        response = client.post("/notifications/read-all", headers=auth_headers(recipient))

        assert response.json() == {"count": 1}
        assert websocket.receive_json() == {"type": "refresh_notifications"}


def test_broadcast_reaches_authenticated_connections(client, make_user, auth_headers):
    admin = make_user(role="admin")
    listener = make_user()

    with client.websocket_connect("/notifications/ws") as websocket:
        _authenticate(websocket, listener)

        response = client.post(
            "/notifications/broadcast",
            json={"title": "Maintenance", "message": "Back soon"},
            headers=auth_headers(admin),
        )

        assert response.json() == {"delivered": 1}
        message = websocket.receive_json()
        assert message["type"] == "announcement"
        assert message["data"]["title"] == "Maintenance"


def test_authenticate_requires_the_data_envelope(client, make_user):
    user = make_user()

    with client.websocket_connect("/notifications/ws") as websocket:
        websocket.send_json(
            {"type": "authenticate", "userId": user.id, "token": create_user_token(user.id)}
        )
        reply = websocket.receive_json()

        assert reply["type"] == "auth_error"
        assert _registry(client).members_of(user.id) == frozenset()
