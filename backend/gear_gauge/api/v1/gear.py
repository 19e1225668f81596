"""Gear API: CRUD for tracked equipment with wear figures in the preferred distance unit."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from gear_gauge.api.deps import get_distance_unit, get_gear_store, get_workout_store
from gear_gauge.api.v1.workouts import workout_to_response
from gear_gauge.models.base_entity import as_utc
from gear_gauge.models.gear import Gear
from gear_gauge.schemas.gear import GearCreate, GearResponse, GearUpdate
from gear_gauge.schemas.settings import DistanceUnit
from gear_gauge.schemas.workout import WorkoutResponse
from gear_gauge.services.gear_store import GearStore
from gear_gauge.services.units import format_distance
from gear_gauge.services.workout_store import WorkoutStore

router = APIRouter(prefix="/gear", tags=["gear"])

_NULLABLE_FIELDS = {"notes", "end_date"}


def gear_to_response(gear: Gear, unit: DistanceUnit) -> GearResponse:
    return GearResponse(
        id=gear.id,
        name=gear.name,
        type=gear.type,
        current_distance=gear.current_distance,
        max_distance=gear.max_distance,
        distance_remaining=gear.distance_remaining,
        percent_used=gear.percent_used,
        needs_replacement=gear.needs_replacement,
        current_distance_display=format_distance(gear.current_distance, unit),
        max_distance_display=format_distance(gear.max_distance, unit),
        notes=gear.notes,
        is_primary=gear.is_primary,
        is_active=gear.is_active,
        start_date=as_utc(gear.start_date),
        end_date=as_utc(gear.end_date),
        workout_types=gear.workout_types,
        version=gear.version,
        last_updated_date=as_utc(gear.last_updated_date),
    )


async def _get_or_404(gear_store: GearStore, gear_id: str) -> Gear:
    gear = await gear_store.get(gear_id)
    if gear is None:
        raise HTTPException(status_code=404, detail="Gear not found")
    return gear


@router.get("", response_model=list[GearResponse])
async def list_gear(
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> list[GearResponse]:
    return [gear_to_response(g, unit) for g in await gear_store.fetch_all()]


@router.get("/active", response_model=list[GearResponse])
async def list_active_gear(
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> list[GearResponse]:
    return [gear_to_response(g, unit) for g in await gear_store.fetch_active()]


@router.get("/primary", response_model=GearResponse | None)
async def get_primary_gear(
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> GearResponse | None:
    gear = await gear_store.fetch_primary()
    return gear_to_response(gear, unit) if gear else None


@router.post("", response_model=GearResponse, status_code=201)
async def create_gear(
    body: GearCreate,
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> GearResponse:
    gear = Gear(**body.model_dump())
    await gear_store.create(gear)
    return gear_to_response(gear, unit)


@router.get("/{gear_id}", response_model=GearResponse)
async def get_gear(
    gear_id: str,
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> GearResponse:
    return gear_to_response(await _get_or_404(gear_store, gear_id), unit)


@router.patch("/{gear_id}", response_model=GearResponse)
async def update_gear(
    gear_id: str,
    body: GearUpdate,
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> GearResponse:
    gear = await _get_or_404(gear_store, gear_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field not in _NULLABLE_FIELDS:
            continue
        setattr(gear, field, value)
    if gear.end_date is not None and as_utc(gear.end_date) < as_utc(gear.start_date):
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")
    await gear_store.update(gear)
    return gear_to_response(gear, unit)


@router.delete("/{gear_id}", status_code=204)
async def delete_gear(
    gear_id: str,
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
) -> None:
    await gear_store.delete(await _get_or_404(gear_store, gear_id))


@router.get("/{gear_id}/workouts", response_model=list[WorkoutResponse])
async def list_gear_workouts(
    gear_id: str,
    gear_store: Annotated[GearStore, Depends(get_gear_store)],
    workout_store: Annotated[WorkoutStore, Depends(get_workout_store)],
    unit: Annotated[DistanceUnit, Depends(get_distance_unit)],
) -> list[WorkoutResponse]:
    await _get_or_404(gear_store, gear_id)
    return [workout_to_response(w, unit) for w in await workout_store.fetch_for_gear(gear_id)]
