"""Workout categories and workout API schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class WorkoutType(str, Enum):
    """Category used for gear matching: activity kind plus indoor/outdoor."""

    OUTDOOR_RUN = "outdoorRun"
    INDOOR_RUN = "indoorRun"
    OUTDOOR_WALK = "outdoorWalk"
    INDOOR_WALK = "indoorWalk"
    OUTDOOR_CYCLE = "outdoorCycle"
    INDOOR_CYCLE = "indoorCycle"
    OTHER = "other"


_RUN_CODES = {"run", "running", "virtualrun", "trailrun", "treadmill"}
_WALK_CODES = {"walk", "walking", "hike", "hiking"}
_CYCLE_CODES = {"ride", "cycling", "virtualride", "ebikeride", "gravelride", "mountainbikeride"}
# These codes only ever describe indoor sessions
_ALWAYS_INDOOR_CODES = {"virtualrun", "treadmill", "virtualride"}


def classify_workout(activity_type: str | None, is_indoor: bool) -> WorkoutType:
    """Map a raw external activity type code and indoor flag to a WorkoutType.

    Unrecognised or missing codes map to WorkoutType.OTHER.
    """
    code = (activity_type or "").strip().lower()
    indoor = is_indoor or code in _ALWAYS_INDOOR_CODES
    if code in _RUN_CODES:
        return WorkoutType.INDOOR_RUN if indoor else WorkoutType.OUTDOOR_RUN
    if code in _WALK_CODES:
        return WorkoutType.INDOOR_WALK if indoor else WorkoutType.OUTDOOR_WALK
    if code in _CYCLE_CODES:
        return WorkoutType.INDOOR_CYCLE if indoor else WorkoutType.OUTDOOR_CYCLE
    return WorkoutType.OTHER


def parse_workout_types(raw_values: list[str] | None) -> list[WorkoutType]:
    """Convert stored raw values to WorkoutType, dropping unknown values."""
    out: list[WorkoutType] = []
    for v in raw_values or []:
        try:
            out.append(WorkoutType(v))
        except ValueError:
            continue
    return out


class WorkoutResponse(BaseModel):
    """Single imported workout as returned by the API."""

    id: str
    external_id: str
    activity_type: str | None
    workout_type: WorkoutType
    is_indoor: bool
    total_distance: float  # km
    distance_display: str
    start_date: datetime
    end_date: datetime
    gear_ids: list[str]


class SyncResult(BaseModel):
    """Result of a manual workout import."""

    status: str
    workouts_synced: int
    last_sync_date: datetime | None


class SyncStatus(BaseModel):
    """Current sync engine state."""

    is_syncing: bool
    last_sync_date: datetime | None
