"""Workout imported from the external source. external_id is the dedupe key; gear is the assignment set."""

from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship
from gear_gauge.db.base import Base
from gear_gauge.models.base_entity import AuditMixin
from gear_gauge.models.gear import Gear
from gear_gauge.schemas.workout import WorkoutType, classify_workout

gear_workouts = Table(
    "gear_workouts",
    Base.metadata,
    Column("gear_id", String(36), ForeignKey("gear.id", ondelete="CASCADE"), primary_key=True),
    Column("workout_id", String(36), ForeignKey("workouts.id", ondelete="CASCADE"), primary_key=True),
)


class Workout(AuditMixin, Base):
    __tablename__ = "workouts"

    external_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    activity_type: Mapped[str | None] = mapped_column(String(64), nullable=True)  # raw source code, e.g. Run, Ride
    is_indoor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_distance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # km
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    gear: Mapped[list[Gear]] = relationship(Gear, secondary=gear_workouts, lazy="selectin")

    def __init__(self, **kwargs):
        kwargs.setdefault("is_indoor", False)
        kwargs.setdefault("total_distance", 0.0)
        kwargs.setdefault("gear", [])
        super().__init__(**kwargs)

    @property
    def workout_type(self) -> WorkoutType:
        return classify_workout(self.activity_type, self.is_indoor)
