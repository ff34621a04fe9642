import logging
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from .db import Base
from .nlp.parser import Priority

logger = logging.getLogger(__name__)


def to_local_naive(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    # tz-aware -> host-local wall clock, tzinfo dropped
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


class LenientDateTime(TypeDecorator):
    """
    Stores datetimes as ISO-8601 text. Values that no longer parse on load
    are dropped to None instead of failing the whole row.
    """

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return to_local_naive(value).isoformat(timespec="microseconds")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        try:
            return datetime.fromisoformat(value)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable stored due date %r", value)
            return None


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(280), nullable=False)
    assignee: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    due: Mapped[datetime | None] = mapped_column(LenientDateTime, nullable=True)
    priority: Mapped[Priority] = mapped_column(Enum(Priority), default=Priority.P3, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    original_input: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=False,
    )
