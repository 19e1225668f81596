"""Pydantic schemas for user preferences stored in the key-value settings table."""

from enum import Enum

from pydantic import BaseModel


class DistanceUnit(str, Enum):
    """Display unit only; stored distances are always kilometres."""

    KM = "km"
    MILES = "miles"


class PreferencesResponse(BaseModel):
    distance_unit: DistanceUnit
    background_fetch_enabled: bool
    has_requested_source_authorization: bool
    source_authorization_status: str


class PreferencesUpdate(BaseModel):
    """Body for updating preferences (partial)."""

    distance_unit: DistanceUnit | None = None
    background_fetch_enabled: bool | None = None
