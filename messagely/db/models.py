"""SQLAlchemy models for users and the messages they exchange."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, func

from .session import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(64), primary_key=True)
    password_hash = Column(Text, nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_from_sent", "from_username", "sent_at"),
        Index("ix_messages_to_sent", "to_username", "sent_at"),
    )

    id = Column(String(32), primary_key=True)
    from_username = Column(String(64), ForeignKey("users.username"), nullable=False)
    to_username = Column(String(64), ForeignKey("users.username"), nullable=False)
    body = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
