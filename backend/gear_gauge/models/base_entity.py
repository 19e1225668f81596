"""Audit columns shared by persisted entities: uuid id, created/updated timestamps, version, soft delete."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utcnow)
    last_updated_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utcnow)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    def __init__(self, **kwargs):
        # Populate audit fields eagerly so transient entities are usable before flush
        now = utcnow()
        kwargs.setdefault("id", str(uuid.uuid4()))
        kwargs.setdefault("created_date", now)
        kwargs.setdefault("last_updated_date", now)
        kwargs.setdefault("version", 1)
        kwargs.setdefault("is_deleted", False)
        super().__init__(**kwargs)

    def mark_as_updated(self) -> None:
        self.version = (self.version or 0) + 1
        self.last_updated_date = utcnow()

    def mark_as_deleted(self) -> None:
        self.is_deleted = True
        self.mark_as_updated()


def as_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo; all values are stored as UTC)."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
