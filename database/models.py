"""
SQLAlchemy ORM models for the ``users`` and ``messages`` tables.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase


def to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


def as_utc(value: datetime) -> datetime:
    """Timezone-aware UTC view of ``value``; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(Text, unique=True, nullable=False)
    password = Column(Text, nullable=False)
    avatar = Column(Text, default="")

    def to_public(self) -> dict:
        """Projection safe to send to clients (no password hash)."""
        return {
            "id": str(self.id),
            "username": self.username,
            "avatar": self.avatar or "",
        }


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_room_created_at", "room", "created_at"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room = Column(Text, nullable=False, default="global")
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"))
    text = Column(Text, nullable=False)
    # Stamped by the database so every app instance shares one clock.
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "room": self.room,
            "authorId": str(self.user_id),
            "text": self.text,
            "createdAt": as_utc(self.created_at).isoformat(),
        }
