from __future__ import annotations

from datetime import datetime

import pytest

from messagely.domain.entities import Message
from messagely.domain.errors import IntegrityError, InvalidInputError
from messagely.repositories.sql_repository import SQLRepository
from messagely.services.message_service import MessageDirectory
from messagely.services.profile_resolver import ProfileResolver


class CountingRepository(SQLRepository):
    """SQLRepository that records each batched counterparty lookup."""

    def __init__(self) -> None:
        super().__init__()
        self.lookups: list[set[str]] = []

    def get_counterparties(self, usernames):
        wanted = set(usernames)
        self.lookups.append(wanted)
        return super().get_counterparties(wanted)


class EmptyRepository:
    def get_counterparties(self, usernames):
        return {}


@pytest.fixture()
def counting_repo(db_env) -> CountingRepository:
    repo = CountingRepository()
    repo.create_user("alice", "hash", "Alice", "Anders", "111")
    repo.create_user("bob", "hash", "Bob", "Brown", "222")
    repo.create_user("carol", "hash", "Carol", "Cole", "333")
    return repo


def test_resolve_outgoing_inlines_recipient(counting_repo):
    directory = MessageDirectory(repository=counting_repo)
    directory.send("alice", "bob", "hi")

    resolved = ProfileResolver(repository=counting_repo).resolve_outgoing(directory.messages_from("alice"), "alice")

    assert len(resolved) == 1
    data = resolved[0].to_dict()
    assert data["to_user"] == {"username": "bob", "first_name": "Bob", "last_name": "Brown", "phone": "222"}
    assert data["body"] == "hi"
    assert "to_username" not in data
    assert "from_username" not in data
    assert "from_user" not in data


def test_resolve_incoming_inlines_sender(counting_repo):
    directory = MessageDirectory(repository=counting_repo)
    directory.send("alice", "bob", "hi")

    resolved = ProfileResolver(repository=counting_repo).resolve_incoming(directory.messages_to("bob"), "bob")

    data = resolved[0].to_dict()
    assert data["from_user"]["username"] == "alice"
    assert data["from_user"]["first_name"] == "Alice"
    assert "from_username" not in data
    assert "to_user" not in data


def test_resolution_does_one_lookup_per_listing(counting_repo):
    directory = MessageDirectory(repository=counting_repo)
    for body in ("one", "two", "three"):
        directory.send("alice", "bob", body)
    directory.send("alice", "carol", "four")
    directory.send("alice", "bob", "five")

    resolver = ProfileResolver(repository=counting_repo)
    resolved = resolver.resolve_outgoing(directory.messages_from("alice"), "alice")

    assert len(resolved) == 5
    assert counting_repo.lookups == [{"bob", "carol"}]
    assert sorted(m.body for m in resolved) == ["five", "four", "one", "three", "two"]


def test_empty_listing_skips_lookup(counting_repo):
    resolver = ProfileResolver(repository=counting_repo)

    assert resolver.resolve_outgoing([], "alice") == []
    assert resolver.resolve_incoming([], "alice") == []
    assert counting_repo.lookups == []


def test_missing_counterparty_raises_integrity_error():
    orphan = Message(
        id="m1",
        from_username="alice",
        to_username="vanished",
        body="hi",
        sent_at=datetime(2024, 1, 1),
        read_at=None,
    )
    resolver = ProfileResolver(repository=EmptyRepository())

    with pytest.raises(IntegrityError):
        resolver.resolve_outgoing([orphan], "alice")
    with pytest.raises(IntegrityError):
        resolver.resolve_incoming([orphan], "vanished")


def test_message_from_wrong_subject_is_rejected():
    message = Message(
        id="m1",
        from_username="alice",
        to_username="bob",
        body="hi",
        sent_at=datetime(2024, 1, 1),
        read_at=None,
    )
    resolver = ProfileResolver(repository=EmptyRepository())

    with pytest.raises(InvalidInputError):
        resolver.resolve_outgoing([message], "bob")
    with pytest.raises(InvalidInputError):
        resolver.resolve_incoming([message], "alice")
