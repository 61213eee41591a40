from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from messagely.app import create_app
from messagely.services.message_service import MessageDirectory

ALICE = {"username": "alice", "password": "pw1", "first_name": "A", "last_name": "B", "phone": "555"}
BOB = {"username": "bob", "password": "pw2", "first_name": "Bob", "last_name": "C", "phone": "666"}


@pytest.fixture()
def client(repo) -> TestClient:
    return TestClient(create_app(repository=repo))


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _register(client: TestClient, payload: dict) -> str:
    resp = client.post("/auth/register", json=payload)
    assert resp.status_code == 201
    return resp.json()["token"]


def test_register_and_login(client):
    _register(client, ALICE)

    ok = client.post("/auth/login", json={"username": "alice", "password": "pw1"})
    bad = client.post("/auth/login", json={"username": "alice", "password": "nope"})
    ghost = client.post("/auth/login", json={"username": "ghost", "password": "pw1"})

    assert ok.status_code == 200
    assert ok.json()["token"]
    assert bad.status_code == 400
    assert ghost.status_code == 400


def test_register_duplicate_and_blank_fields(client):
    _register(client, ALICE)

    dup = client.post("/auth/register", json=ALICE)
    blank = client.post("/auth/register", json={**BOB, "first_name": ""})
    malformed = client.post("/auth/register", json={"username": "x"})

    assert dup.status_code == 409
    assert blank.status_code == 400
    assert malformed.status_code == 422


def test_users_require_token(client):
    token = _register(client, ALICE)

    assert client.get("/users").status_code == 401
    assert client.get("/users", headers=_auth("garbage")).status_code == 401

    resp = client.get("/users", headers=_auth(token))
    assert resp.status_code == 200
    assert resp.json() == {"users": [{"username": "alice", "first_name": "A", "last_name": "B"}]}


def test_user_detail_is_private(client):
    alice = _register(client, ALICE)
    _register(client, BOB)

    own = client.get("/users/alice", headers=_auth(alice))
    other = client.get("/users/bob", headers=_auth(alice))

    assert own.status_code == 200
    user = own.json()["user"]
    assert user["username"] == "alice"
    assert user["phone"] == "555"
    assert "password" not in user and "password_hash" not in user
    assert other.status_code == 401


def test_message_listings_inline_counterparty(client, repo):
    alice = _register(client, ALICE)
    bob = _register(client, BOB)
    MessageDirectory(repository=repo).send("alice", "bob", "hi")

    sent = client.get("/users/alice/from", headers=_auth(alice))
    received = client.get("/users/bob/to", headers=_auth(bob))
    forbidden = client.get("/users/bob/to", headers=_auth(alice))

    assert sent.status_code == 200
    [out] = sent.json()["messages"]
    assert out["body"] == "hi"
    assert out["to_user"] == {"username": "bob", "first_name": "Bob", "last_name": "C", "phone": "666"}
    assert "to_username" not in out

    [inc] = received.json()["messages"]
    assert inc["from_user"]["username"] == "alice"
    assert inc["read_at"] is None

    assert forbidden.status_code == 401
