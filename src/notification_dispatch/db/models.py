"""SQLAlchemy ORM model for the notification log."""

import datetime
import uuid
from typing import Any

import sqlalchemy as sa
from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from notification_dispatch.enums import Language, NotificationStatus


class Base(DeclarativeBase):
    """Declarative base; its metadata is the Alembic migration target."""


class JSONBCompatible(TypeDecorator):
    """JSON column: JSONB on PostgreSQL, JSON elsewhere (SQLite in tests).

    Python ``None`` is stored as SQL NULL rather than the JSON literal.
    """

    impl = sa.JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: sa.Dialect) -> sa.types.TypeEngine:
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import JSONB

            return dialect.type_descriptor(JSONB(none_as_null=True))
        return dialect.type_descriptor(sa.JSON(none_as_null=True))


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class NotificationLog(Base):
    """One notification and the outcome of its delivery attempts.

    Everything except ``status``, ``attempts``, ``error`` and
    ``updated_at`` is written once at creation.
    """

    __tablename__ = "notification_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    channel: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    notification_type: Mapped[str] = mapped_column(
        "type", String(16), nullable=False, index=True
    )
    language: Mapped[str] = mapped_column(
        String(8), nullable=False, default=Language.EN
    )
    recipient: Mapped[str] = mapped_column(String(320), nullable=False)
    subject: Mapped[str | None] = mapped_column(Text, nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=NotificationStatus.PENDING, index=True
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes.
    meta: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSONBCompatible, nullable=True
    )

    def __repr__(self) -> str:
        return (
            f"NotificationLog(id={self.id}, channel={self.channel!r}, "
            f"status={self.status!r}, attempts={self.attempts})"
        )
