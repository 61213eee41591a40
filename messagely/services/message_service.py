"""Message listing, sending and read receipts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from messagely.domain.entities import Message
from messagely.domain.errors import InvalidInputError, NotFoundError
from messagely.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class MessageDirectory:
    """Reads and writes the messages table on behalf of existing users."""

    repository: SQLRepository = field(default_factory=SQLRepository)

    def _require_user(self, username: str) -> None:
        if not username or not self.repository.user_exists(username):
            raise NotFoundError(f"No such user: {username}")

    def messages_from(self, username: str) -> list[Message]:
        """Messages sent by username, oldest first."""
        self._require_user(username)
        return self.repository.messages_from(username)

    def messages_to(self, username: str) -> list[Message]:
        """Messages received by username, oldest first."""
        self._require_user(username)
        return self.repository.messages_to(username)

    def send(self, from_username: str, to_username: str, body: str) -> Message:
        if not (body or "").strip():
            raise InvalidInputError("Message body must not be empty")
        self._require_user(from_username)
        self._require_user(to_username)
        message = self.repository.create_message(from_username, to_username, body)
        logger.info("Stored message %s from %s to %s", message.id, from_username, to_username)
        return message

    def get(self, message_id: str) -> Message:
        message = self.repository.get_message(message_id)
        if message is None:
            raise NotFoundError(f"No such message: {message_id}")
        return message

    def mark_read(self, message_id: str) -> Message:
        """Stamp read_at once; later calls keep the first timestamp."""
        # zero rows means already read or missing; get() tells the two apart
        self.repository.mark_message_read(message_id)
        return self.get(message_id)
