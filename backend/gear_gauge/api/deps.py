"""FastAPI dependencies: stores bound to the request session, sync service and source from app state."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gear_gauge.db.session import get_db
from gear_gauge.schemas.settings import DistanceUnit
from gear_gauge.services.data_store import DataStore
from gear_gauge.services.gear_store import GearStore
from gear_gauge.services.settings_store import DISTANCE_UNIT, SettingsStore
from gear_gauge.services.workout_source import ObservableWorkoutSource
from gear_gauge.services.workout_store import WorkoutStore
from gear_gauge.services.workout_sync import WorkoutSyncService


def get_gear_store(session: Annotated[AsyncSession, Depends(get_db)]) -> GearStore:
    return GearStore(DataStore(session))


def get_workout_store(session: Annotated[AsyncSession, Depends(get_db)]) -> WorkoutStore:
    return WorkoutStore(DataStore(session))


def get_settings_store(session: Annotated[AsyncSession, Depends(get_db)]) -> SettingsStore:
    return SettingsStore(session)


async def get_distance_unit(
    settings_store: Annotated[SettingsStore, Depends(get_settings_store)],
) -> DistanceUnit:
    raw = await settings_store.get(DISTANCE_UNIT, DistanceUnit.KM.value)
    try:
        return DistanceUnit(raw)
    except ValueError:
        return DistanceUnit.KM


def get_sync_service(request: Request) -> WorkoutSyncService:
    return request.app.state.sync_service


def get_workout_source(request: Request) -> ObservableWorkoutSource:
    return request.app.state.workout_source
