"""High-level data access helpers backed by SQLAlchemy.

ORM rows are converted to the dataclasses in messagely.domain.entities before
they leave this module, and SQLAlchemy integrity failures are translated into
domain errors here.
"""
from __future__ import annotations

import logging
import uuid
from contextlib import AbstractContextManager
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError as DBIntegrityError
from sqlalchemy.orm import Session

from messagely.db.models import Message as MessageRow, User as UserRow
from messagely.db.session import get_session
from messagely.domain.entities import Counterparty, Message, UserProfile, UserSummary
from messagely.domain.errors import ConflictError, IntegrityError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _profile(row: UserRow) -> UserProfile:
    return UserProfile(
        username=row.username,
        first_name=row.first_name,
        last_name=row.last_name,
        phone=row.phone,
        joined_at=row.joined_at,
        last_login_at=row.last_login_at,
    )


def _message(row: MessageRow) -> Message:
    return Message(
        id=row.id,
        from_username=row.from_username,
        to_username=row.to_username,
        body=row.body,
        sent_at=row.sent_at,
        read_at=row.read_at,
    )


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        self._session = session_factory or get_session

    # -------------------------- users --------------------------
    def user_exists(self, username: str) -> bool:
        with self._session() as session:
            stmt = select(exists().where(UserRow.username == username))
            return bool(session.execute(stmt).scalar())

    def create_user(
        self,
        username: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> UserProfile:
        """Insert a user; the primary key is the authoritative uniqueness check."""
        now = _utcnow()
        row = UserRow(
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            joined_at=now,
            last_login_at=now,
        )
        with self._session() as session:
            session.add(row)
            try:
                session.commit()
            except DBIntegrityError as exc:
                session.rollback()
                raise ConflictError(f"Username '{username}' is already taken") from exc
            session.refresh(row)
            return _profile(row)

    def get_user(self, username: str) -> Optional[UserProfile]:
        with self._session() as session:
            row = session.get(UserRow, username)
            return _profile(row) if row else None

    def get_password_hash(self, username: str) -> Optional[str]:
        with self._session() as session:
            stmt = select(UserRow.password_hash).where(UserRow.username == username)
            return session.execute(stmt).scalar_one_or_none()

    def update_password_hash(self, username: str, password_hash: str) -> int:
        with self._session() as session:
            stmt = update(UserRow).where(UserRow.username == username).values(password_hash=password_hash)
            result = session.execute(stmt)
            session.commit()
            return result.rowcount

    def touch_last_login(self, username: str, when: Optional[datetime] = None) -> int:
        """Set last_login_at and return the number of rows affected."""
        with self._session() as session:
            stmt = (
                update(UserRow)
                .where(UserRow.username == username)
                .values(last_login_at=when or _utcnow())
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount

    def list_users(self) -> list[UserSummary]:
        with self._session() as session:
            stmt = select(UserRow.username, UserRow.first_name, UserRow.last_name).order_by(UserRow.username)
            return [
                UserSummary(username=username, first_name=first, last_name=last)
                for username, first, last in session.execute(stmt).all()
            ]

    def get_counterparties(self, usernames: Iterable[str]) -> dict[str, Counterparty]:
        """Fetch public profiles for many users in a single query."""
        wanted = sorted(set(usernames))
        if not wanted:
            return {}
        with self._session() as session:
            stmt = select(UserRow.username, UserRow.first_name, UserRow.last_name, UserRow.phone).where(
                UserRow.username.in_(wanted)
            )
            return {
                username: Counterparty(username=username, first_name=first, last_name=last, phone=phone)
                for username, first, last, phone in session.execute(stmt).all()
            }

    # -------------------------- messages --------------------------
    def create_message(
        self,
        from_username: str,
        to_username: str,
        body: str,
        sent_at: Optional[datetime] = None,
    ) -> Message:
        row = MessageRow(
            id=uuid.uuid4().hex,
            from_username=from_username,
            to_username=to_username,
            body=body,
            sent_at=sent_at or _utcnow(),
            read_at=None,
        )
        with self._session() as session:
            session.add(row)
            try:
                session.commit()
            except DBIntegrityError as exc:
                session.rollback()
                logger.error("Message %s -> %s rejected by the store", from_username, to_username)
                raise IntegrityError(
                    f"Message references a missing user ({from_username} -> {to_username})"
                ) from exc
            session.refresh(row)
            return _message(row)

    def get_message(self, message_id: str) -> Optional[Message]:
        with self._session() as session:
            row = session.get(MessageRow, message_id)
            return _message(row) if row else None

    def messages_from(self, username: str) -> list[Message]:
        with self._session() as session:
            stmt = (
                select(MessageRow)
                .where(MessageRow.from_username == username)
                .order_by(MessageRow.sent_at, MessageRow.id)
            )
            return [_message(row) for row in session.execute(stmt).scalars().all()]

    def messages_to(self, username: str) -> list[Message]:
        with self._session() as session:
            stmt = (
                select(MessageRow)
                .where(MessageRow.to_username == username)
                .order_by(MessageRow.sent_at, MessageRow.id)
            )
            return [_message(row) for row in session.execute(stmt).scalars().all()]

    def mark_message_read(self, message_id: str, when: Optional[datetime] = None) -> int:
        """Set read_at only if it is still unset; returns rows affected."""
        with self._session() as session:
            stmt = (
                update(MessageRow)
                .where(MessageRow.id == message_id, MessageRow.read_at.is_(None))
                .values(read_at=when or _utcnow())
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount
