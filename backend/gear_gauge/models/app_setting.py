"""Durable key-value preferences (last sync date, feature flags, distance unit)."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column
from gear_gauge.db.base import Base
from gear_gauge.models.base_entity import utcnow


class AppSetting(Base):
    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
