"""Preferences API: distance unit, background fetch flag, workout source access."""

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request

from gear_gauge.api.deps import get_settings_store, get_workout_source
from gear_gauge.schemas.settings import DistanceUnit, PreferencesResponse, PreferencesUpdate
from gear_gauge.services.background_fetch import apply_background_fetch
from gear_gauge.services.settings_store import (
    DISTANCE_UNIT,
    HAS_BACKGROUND_FETCH_ENABLED,
    HAS_REQUESTED_SOURCE_AUTHORIZATION,
    HAS_SOURCE_ACCESS,
    SettingsStore,
)
from gear_gauge.services.workout_source import AuthorizationStatus, ObservableWorkoutSource, WorkoutSourceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


async def _preferences(settings_store: SettingsStore, source: ObservableWorkoutSource) -> PreferencesResponse:
    raw_unit = await settings_store.get(DISTANCE_UNIT, DistanceUnit.KM.value)
    try:
        unit = DistanceUnit(raw_unit)
    except ValueError:
        unit = DistanceUnit.KM
    status = await source.authorization_status()
    return PreferencesResponse(
        distance_unit=unit,
        background_fetch_enabled=bool(await settings_store.get_bool(HAS_BACKGROUND_FETCH_ENABLED)),
        has_requested_source_authorization=bool(await settings_store.get_bool(HAS_REQUESTED_SOURCE_AUTHORIZATION)),
        source_authorization_status=status.value,
    )


@router.get("", response_model=PreferencesResponse)
async def get_preferences(
    settings_store: Annotated[SettingsStore, Depends(get_settings_store)],
    source: Annotated[ObservableWorkoutSource, Depends(get_workout_source)],
) -> PreferencesResponse:
    return await _preferences(settings_store, source)


@router.patch("", response_model=PreferencesResponse)
async def update_preferences(
    request: Request,
    body: PreferencesUpdate,
    settings_store: Annotated[SettingsStore, Depends(get_settings_store)],
    source: Annotated[ObservableWorkoutSource, Depends(get_workout_source)],
) -> PreferencesResponse:
    if body.distance_unit is not None:
        await settings_store.set(DISTANCE_UNIT, body.distance_unit.value)
    if body.background_fetch_enabled is not None:
        await settings_store.set(HAS_BACKGROUND_FETCH_ENABLED, body.background_fetch_enabled)
        apply_background_fetch(request.app.state.scheduler, request.app.state.sync_service, body.background_fetch_enabled)
    return await _preferences(settings_store, source)


@router.post("/request-access")
async def request_source_access(
    settings_store: Annotated[SettingsStore, Depends(get_settings_store)],
    source: Annotated[ObservableWorkoutSource, Depends(get_workout_source)],
) -> dict:
    """Run the workout source permission flow and record that it was requested."""
    try:
        await source.request_access()
    except WorkoutSourceUnavailableError as e:
        await settings_store.set(HAS_REQUESTED_SOURCE_AUTHORIZATION, False)
        raise HTTPException(status_code=503, detail=str(e))
    except httpx.HTTPError as e:
        logger.exception("Workout source access request failed: %s", e)
        raise HTTPException(status_code=502, detail="Workout source request failed. Try again later.")
    await settings_store.set(HAS_REQUESTED_SOURCE_AUTHORIZATION, True)
    status = await source.authorization_status()
    await settings_store.set(HAS_SOURCE_ACCESS, status == AuthorizationStatus.AUTHORIZED)
    return {"status": status.value}
