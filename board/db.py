"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

SENDER_MAX_LENGTH = 256


class DatastoreError(RuntimeError):
    """Raised when the underlying store rejects an insert or query."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DbClient(Protocol):
    """Interface for database access."""

    def create_message(
        self, sender: str, text: str, timestamp: Optional[datetime] = None
    ) -> "MessageRecord":
        ...

    def list_messages(self) -> list["MessageRecord"]:
        ...


@dataclass(frozen=True)
class MessageRecord:
    id: int
    sender: str
    text: str
    timestamp: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "sender": self.sender,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.messages: list[MessageRecord] = []
        self._ids = itertools.count(1)

    def create_message(
        self, sender: str, text: str, timestamp: Optional[datetime] = None
    ) -> MessageRecord:
        record = MessageRecord(
            id=next(self._ids),
            sender=sender,
            text=text,
            timestamp=timestamp or _utcnow(),
        )
        self.messages.append(record)
        return record

    def list_messages(self) -> list[MessageRecord]:
        return sorted(self.messages, key=lambda record: record.id)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.messages.clear()
        self._ids = itertools.count(1)


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_message_record(self, row: "MessageRow") -> MessageRecord:
        timestamp = row.timestamp
        # SQLite drops the offset; values are always written in UTC.
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return MessageRecord(
            id=row.id,
            sender=row.sender,
            text=row.text,
            timestamp=timestamp,
        )

    def create_message(
        self, sender: str, text: str, timestamp: Optional[datetime] = None
    ) -> MessageRecord:
        try:
            with self.Session() as session:
                row = MessageRow(
                    sender=sender,
                    text=text,
                    timestamp=timestamp or _utcnow(),
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_message_record(row)
        except SQLAlchemyError as exc:
            logger.error("Failed to insert message for sender %s: %s", sender, exc)
            raise DatastoreError("Failed to insert message") from exc

    def list_messages(self) -> list[MessageRecord]:
        try:
            with self.Session() as session:
                stmt = select(MessageRow).order_by(MessageRow.id.asc())
                rows = session.execute(stmt).scalars().all()
                return [self._to_message_record(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error("Failed to list messages: %s", exc)
            raise DatastoreError("Failed to list messages") from exc


Base = declarative_base()


class MessageRow(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender = Column(String(SENDER_MAX_LENGTH), nullable=False, index=True)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
