"""Pydantic schemas for gear API (create, partial update, response)."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from gear_gauge.schemas.workout import WorkoutType


class GearType(str, Enum):
    SHOES = "shoes"
    BICYCLE = "bicycle"


def _naive_as_utc(value: datetime | None) -> datetime | None:
    """Dates without an offset are UTC, so create and update windows always compare."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class GearCreate(BaseModel):
    """Body for creating a gear item. current_distance lets users seed existing mileage."""

    name: str = Field(..., min_length=1, max_length=255)
    type: GearType
    current_distance: float = Field(0.0, ge=0)  # km
    max_distance: float = Field(..., gt=0)  # km
    notes: str | None = None
    is_primary: bool = False
    is_active: bool = True
    start_date: datetime
    end_date: datetime | None = None
    workout_types: list[WorkoutType] = Field(default_factory=list)

    @field_validator("start_date", "end_date")
    @classmethod
    def _utc_dates(cls, value: datetime | None) -> datetime | None:
        return _naive_as_utc(value)

    @model_validator(mode="after")
    def _check_window(self) -> "GearCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class GearUpdate(BaseModel):
    """Body for updating a gear item (partial). An explicit current_distance is a user edit."""

    name: str | None = Field(None, min_length=1, max_length=255)
    type: GearType | None = None
    current_distance: float | None = Field(None, ge=0)
    max_distance: float | None = Field(None, gt=0)
    notes: str | None = None
    is_primary: bool | None = None
    is_active: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    workout_types: list[WorkoutType] | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _utc_dates(cls, value: datetime | None) -> datetime | None:
        return _naive_as_utc(value)


class GearResponse(BaseModel):
    """Single gear item with wear figures; *_display fields use the preferred unit."""

    id: str
    name: str
    type: GearType
    current_distance: float  # km
    max_distance: float  # km
    distance_remaining: float  # km
    percent_used: float
    needs_replacement: bool
    current_distance_display: str
    max_distance_display: str
    notes: str | None
    is_primary: bool
    is_active: bool
    start_date: datetime
    end_date: datetime | None
    workout_types: list[WorkoutType]
    version: int
    last_updated_date: datetime | None
