"""Inline counterparty profiles into message listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from messagely.domain.entities import Counterparty, IncomingMessage, Message, OutgoingMessage
from messagely.domain.errors import IntegrityError, InvalidInputError
from messagely.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class ProfileResolver:
    """Replaces the counterparty username of each message by its profile.

    All counterparties of a listing are fetched with one repository call,
    whatever the number of messages.
    """

    repository: SQLRepository = field(default_factory=SQLRepository)

    def _lookup(self, usernames: Iterable[str]) -> dict[str, Counterparty]:
        wanted = set(usernames)
        if not wanted:
            return {}
        return self.repository.get_counterparties(wanted)

    def _counterparty(self, profiles: dict[str, Counterparty], username: str, message: Message) -> Counterparty:
        profile = profiles.get(username)
        if profile is None:
            logger.error("Message %s references unknown user %s", message.id, username)
            raise IntegrityError(f"Message {message.id} references unknown user {username}")
        return profile

    def resolve_outgoing(self, messages: Sequence[Message], subject: str) -> list[OutgoingMessage]:
        for message in messages:
            if message.from_username != subject:
                raise InvalidInputError(f"Message {message.id} was not sent by {subject}")
        profiles = self._lookup(m.to_username for m in messages)
        return [
            OutgoingMessage(
                id=m.id,
                to_user=self._counterparty(profiles, m.to_username, m),
                body=m.body,
                sent_at=m.sent_at,
                read_at=m.read_at,
            )
            for m in messages
        ]

    def resolve_incoming(self, messages: Sequence[Message], subject: str) -> list[IncomingMessage]:
        for message in messages:
            if message.to_username != subject:
                raise InvalidInputError(f"Message {message.id} was not sent to {subject}")
        profiles = self._lookup(m.from_username for m in messages)
        return [
            IncomingMessage(
                id=m.id,
                from_user=self._counterparty(profiles, m.from_username, m),
                body=m.body,
                sent_at=m.sent_at,
                read_at=m.read_at,
            )
            for m in messages
        ]
