"""Gear persistence on top of DataStore."""

from collections.abc import Iterable

from gear_gauge.models.gear import Gear
from gear_gauge.services.data_store import DataStore


class GearStore:
    def __init__(self, data_store: DataStore) -> None:
        self.data_store = data_store

    async def fetch_all(self) -> list[Gear]:
        return await self.data_store.fetch(Gear, order_by=(Gear.start_date, Gear.name))

    async def fetch_active(self) -> list[Gear]:
        """Active gear only; retired gear never receives new workouts."""
        return await self.data_store.fetch(Gear, Gear.is_active.is_(True), order_by=(Gear.start_date, Gear.name))

    async def fetch_primary(self) -> Gear | None:
        rows = await self.data_store.fetch(Gear, Gear.is_primary.is_(True), order_by=(Gear.last_updated_date.desc(),))
        return rows[0] if rows else None

    async def get(self, gear_id: str) -> Gear | None:
        rows = await self.data_store.fetch(Gear, Gear.id == gear_id)
        return rows[0] if rows else None

    async def create(self, gear: Gear) -> Gear:
        if gear.is_primary:
            await self._clear_primary(exclude=gear)
        return await self.data_store.create(gear)

    async def update(self, gear: Gear) -> Gear:
        if gear.is_primary:
            await self._clear_primary(exclude=gear)
        return await self.data_store.update(gear)

    async def update_bulk(self, gear: Iterable[Gear]) -> None:
        await self.data_store.update_bulk(gear)

    async def delete(self, gear: Gear) -> None:
        await self.data_store.delete(gear)

    async def delete_all(self) -> None:
        await self.data_store.delete_bulk(await self.fetch_all())

    async def _clear_primary(self, exclude: Gear) -> None:
        """Keep at most one primary gear; changes are committed with the caller's save."""
        for other in await self.data_store.fetch(Gear, Gear.is_primary.is_(True), Gear.id != exclude.id):
            other.is_primary = False
            other.mark_as_updated()
