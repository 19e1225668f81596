"""Workout persistence on top of DataStore."""

from collections.abc import Iterable

from sqlalchemy import select

from gear_gauge.models.gear import Gear
from gear_gauge.models.workout import Workout, gear_workouts
from gear_gauge.services.data_store import DataStore


class WorkoutStore:
    def __init__(self, data_store: DataStore) -> None:
        self.data_store = data_store

    async def fetch_all(self) -> list[Workout]:
        return await self.data_store.fetch(Workout, order_by=(Workout.start_date.desc(),))

    async def fetch_external_ids(self) -> set[str]:
        """Every stored external id, soft-deleted rows included (they still hold the unique key)."""
        r = await self.data_store.session.execute(select(Workout.external_id))
        return {row[0] for row in r.all()}

    async def fetch_for_gear(self, gear_id: str) -> list[Workout]:
        return await self.data_store.fetch(
            Workout,
            Workout.id.in_(select(gear_workouts.c.workout_id).where(gear_workouts.c.gear_id == gear_id)),
            order_by=(Workout.start_date.desc(),),
        )

    async def create(self, workout: Workout) -> Workout:
        return await self.data_store.create(workout)

    async def create_bulk(self, workouts: Iterable[Workout], updated_gear: Iterable[Gear] = ()) -> None:
        """Insert workouts and persist gear changed by their assignment in a single transaction."""
        await self.data_store.create_bulk(workouts, also_save=updated_gear)

    async def update(self, workout: Workout) -> Workout:
        return await self.data_store.update(workout)

    async def delete(self, workout: Workout) -> None:
        await self.data_store.delete(workout)

    async def delete_bulk(self, workouts: Iterable[Workout]) -> None:
        await self.data_store.delete_bulk(workouts)
