from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from sheetchat.config import Settings
from sheetchat.core.errors import TransportError
from sheetchat.main import create_app

SEED = "correct horse battery staple"


@pytest.fixture()
def client(memory_store):
    app = create_app(
        settings=Settings(poll_interval=0, store_backend="sheets"),
        store_factory=lambda account: memory_store,
    )
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def connected(client, service_key_json):
    r = client.post("/session/connect", json={
        "service_key": service_key_json, "user_name": "alice", "seed": SEED,
    })
    assert r.status_code == 200
    return client


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "connected": False}


def test_connect_missing_fields(client, service_key_json):
    r = client.post("/session/connect", json={"service_key": service_key_json, "user_name": "", "seed": SEED})
    assert r.status_code == 400
    assert r.json()["detail"] == "Please provide all fields."


def test_connect_bad_json_key(client):
    r = client.post("/session/connect", json={"service_key": "not json", "user_name": "a", "seed": SEED})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid JSON key."


def test_connect_store_failure(service_key_json):
    def failing_factory(account):
        raise TransportError("Token request failed (400)")

    app = create_app(settings=Settings(poll_interval=0), store_factory=failing_factory)
    with TestClient(app) as c:
        r = c.post("/session/connect", json={"service_key": service_key_json, "user_name": "a", "seed": SEED})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid service account key or no table access"


def test_messages_require_connection(client):
    assert client.get("/messages").status_code == 409
    assert client.post("/messages/send", json={"text": "hi"}).status_code == 409


def test_send_and_list(connected, memory_store):
    r = connected.post("/messages/send", json={"text": "hello"})
    assert r.status_code == 200
    assert r.json()["status"] == "sent"
    assert r.json()["message"]["author"] == "alice"
    assert len(memory_store.rows) == 2

    body = connected.get("/messages").json()
    assert [m["text"] for m in body["messages"]] == ["hello"]
    assert body["error"] is None


def test_send_too_long(connected, memory_store):
    r = connected.post("/messages/send", json={"text": "x" * 1001})
    assert r.status_code == 400
    assert "too long" in r.json()["detail"]
    assert memory_store.append_calls == 0


def test_send_empty_is_ignored(connected):
    r = connected.post("/messages/send", json={"text": "  "})
    assert r.json() == {"status": "ignored"}


def test_send_transport_failure(connected, memory_store):
    memory_store.fail_appends = True
    r = connected.post("/messages/send", json={"text": "hello"})
    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to send message."


def test_spin(connected):
    r = connected.post("/messages/spin")
    assert r.status_code == 200
    assert r.json()["message"]["type"] == "spin"


def test_poll_picks_up_other_clients(connected, memory_store, service_key_json):
    other_app = create_app(settings=Settings(poll_interval=0), store_factory=lambda account: memory_store)
    with TestClient(other_app) as bob:
        bob.post("/session/connect", json={"service_key": service_key_json, "user_name": "bob", "seed": SEED})
        bob.post("/messages/send", json={"text": "hi alice"})

    r = connected.post("/messages/poll")
    assert r.status_code == 200
    assert [m["text"] for m in r.json()["new_messages"]] == ["hi alice"]
    assert connected.post("/messages/poll").json()["new_messages"] == []


def test_poll_reports_fetch_error(connected, memory_store):
    memory_store.fail_reads = True
    r = connected.post("/messages/poll")
    assert r.status_code == 200
    assert r.json()["error"] == "Sheet read failed (503)"


def test_disconnect(connected):
    assert connected.post("/session/disconnect").json() == {"status": "disconnected"}
    assert connected.get("/messages").status_code == 409
    assert connected.post("/session/disconnect").json() == {"status": "already_disconnected"}


def test_failed_reconnect_keeps_the_working_session(connected, service_key_json):
    connected.post("/messages/send", json={"text": "still here"})

    r = connected.post("/session/connect", json={"service_key": "not json", "user_name": "alice", "seed": SEED})
    assert r.status_code == 400

    body = connected.get("/messages")
    assert body.status_code == 200
    assert [m["text"] for m in body.json()["messages"]] == ["still here"]
