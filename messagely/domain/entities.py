"""Typed records handed out by the repository and services."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class UserProfile:
    username: str
    first_name: str
    last_name: str
    phone: str
    joined_at: datetime
    last_login_at: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["joined_at"] = _iso(self.joined_at)
        data["last_login_at"] = _iso(self.last_login_at)
        return data


@dataclass(frozen=True)
class UserSummary:
    username: str
    first_name: str
    last_name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Counterparty:
    """Public part of a profile, inlined into resolved messages."""

    username: str
    first_name: str
    last_name: str
    phone: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Message:
    id: str
    from_username: str
    to_username: str
    body: str
    sent_at: datetime
    read_at: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["sent_at"] = _iso(self.sent_at)
        data["read_at"] = _iso(self.read_at)
        return data


@dataclass(frozen=True)
class OutgoingMessage:
    """A message sent by the query subject, with the recipient inlined."""

    id: str
    to_user: Counterparty
    body: str
    sent_at: datetime
    read_at: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "to_user": self.to_user.to_dict(),
            "body": self.body,
            "sent_at": _iso(self.sent_at),
            "read_at": _iso(self.read_at),
        }


@dataclass(frozen=True)
class IncomingMessage:
    """A message received by the query subject, with the sender inlined."""

    id: str
    from_user: Counterparty
    body: str
    sent_at: datetime
    read_at: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from_user": self.from_user.to_dict(),
            "body": self.body,
            "sent_at": _iso(self.sent_at),
            "read_at": _iso(self.read_at),
        }
