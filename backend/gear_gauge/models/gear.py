"""A piece of tracked equipment (shoes, bicycle) and the distance it has covered."""

from datetime import datetime
from sqlalchemy import Boolean, DateTime, Float, String, Text
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column
from gear_gauge.db.base import Base
from gear_gauge.models.base_entity import AuditMixin
from gear_gauge.schemas.gear import GearType
from gear_gauge.schemas.workout import WorkoutType, parse_workout_types


class Gear(AuditMixin, Base):
    __tablename__ = "gear"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type_raw: Mapped[str] = mapped_column("type", String(32), nullable=False, default=GearType.SHOES.value)
    current_distance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # km
    max_distance: Mapped[float] = mapped_column(Float, nullable=False)  # km, replacement threshold
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)  # retirement
    workout_types_raw: Mapped[list] = mapped_column("workout_types", JSON, nullable=False, default=list)

    def __init__(self, **kwargs):
        if "type" in kwargs:
            kwargs["type_raw"] = GearType(kwargs.pop("type")).value
        if "workout_types" in kwargs:
            kwargs["workout_types_raw"] = [WorkoutType(t).value for t in kwargs.pop("workout_types")]
        kwargs.setdefault("workout_types_raw", [])
        kwargs.setdefault("current_distance", 0.0)
        kwargs.setdefault("is_primary", False)
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @property
    def type(self) -> GearType:
        try:
            return GearType(self.type_raw)
        except ValueError:
            return GearType.SHOES

    @type.setter
    def type(self, value: GearType) -> None:
        self.type_raw = GearType(value).value

    @property
    def workout_types(self) -> list[WorkoutType]:
        """Workout categories this gear accepts; empty accepts nothing."""
        return parse_workout_types(self.workout_types_raw)

    @workout_types.setter
    def workout_types(self, values: list[WorkoutType]) -> None:
        self.workout_types_raw = [WorkoutType(v).value for v in values]

    @property
    def distance_remaining(self) -> float:
        return max(self.max_distance - self.current_distance, 0.0)

    @property
    def percent_used(self) -> float:
        if not self.max_distance:
            return 0.0
        return round(self.current_distance / self.max_distance * 100, 1)

    @property
    def needs_replacement(self) -> bool:
        return self.current_distance >= self.max_distance
