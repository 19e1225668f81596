"""Workouts API: list imported workouts, manual import (sync), sync status."""

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException

from gear_gauge.api.deps import get_distance_unit, get_sync_service, get_workout_store
from gear_gauge.models.base_entity import as_utc
from gear_gauge.models.workout import Workout
from gear_gauge.schemas.settings import DistanceUnit
from gear_gauge.schemas.workout import SyncResult, SyncStatus, WorkoutResponse
from gear_gauge.services.units import format_distance
from gear_gauge.services.workout_source import WorkoutSourceUnavailableError
from gear_gauge.services.workout_store import WorkoutStore
from gear_gauge.services.workout_sync import WorkoutSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])


def workout_to_response(workout: Workout, unit: DistanceUnit) -> WorkoutResponse:
    return WorkoutResponse(
        id=workout.id,
        external_id=workout.external_id,
        activity_type=workout.activity_type,
        workout_type=workout.workout_type,
        is_indoor=workout.is_indoor,
        total_distance=workout.total_distance,
        distance_display=format_distance(workout.total_distance, unit),
        start_date=as_utc(workout.start_date),
        end_date=as_utc(workout.end_date),
        gear_ids=[g.id for g in workout.gear],
    )


@router.get("", response_model=list[WorkoutResponse])
async def list_workouts(
    workout_store: Annotated[WorkoutStore, Depends(get_workout_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> list[WorkoutResponse]:
    return [workout_to_response(w, unit) for w in await workout_store.fetch_all()]


@router.post("/sync", response_model=SyncResult)
async def trigger_sync(
    sync_service: Annotated[WorkoutSyncService, Depends(get_sync_service)],
) -> SyncResult:
    """Import new workouts from the external source and assign them to gear."""
    if sync_service.is_syncing:
        return SyncResult(status="already_syncing", workouts_synced=0, last_sync_date=sync_service.last_sync_date)
    try:
        count = await sync_service.sync_workouts()
    except WorkoutSourceUnavailableError as e:
        logger.warning("Workout sync failed: %s", e)
        raise HTTPException(status_code=503, detail=str(e))
    except httpx.HTTPError as e:
        logger.exception("Workout sync failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail="Workout source request failed. Try again later or check your connection.",
        )
    logger.info("Manual workout sync completed: workouts_synced=%s", count)
    return SyncResult(status="synced", workouts_synced=count, last_sync_date=sync_service.last_sync_date)


@router.get("/sync/status", response_model=SyncStatus)
async def get_sync_status(
    sync_service: Annotated[WorkoutSyncService, Depends(get_sync_service)],
) -> SyncStatus:
    return sync_service.status()
