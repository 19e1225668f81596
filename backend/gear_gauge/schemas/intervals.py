"""Pydantic schemas for Intervals.icu API responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class IntervalsActivity(BaseModel):
    """Completed activity from Intervals.icu, reduced to the fields gear tracking needs."""

    id: str
    type: str | None = None
    trainer: bool = False  # indoor trainer / treadmill session
    distance_m: float | None = None
    start_date: datetime | None = None
    elapsed_time_sec: int | None = None
    moving_time_sec: int | None = None
    raw: dict[str, Any] | None = None
