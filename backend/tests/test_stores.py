"""Tests for DataStore, GearStore, WorkoutStore and SettingsStore against in-memory SQLite."""

import pytest

from gear_gauge.models.gear import Gear
from gear_gauge.models.workout import Workout
from gear_gauge.schemas.gear import GearType
from gear_gauge.services.data_store import DataStore
from gear_gauge.services.gear_store import GearStore
from gear_gauge.services.settings_store import (
    DISTANCE_UNIT,
    HAS_DONE_FIRST_LAUNCH,
    HAS_PREMIUM,
    LAST_WORKOUT_SYNC_DATE,
    SettingsStore,
)
from gear_gauge.services.workout_store import WorkoutStore

from conftest import day


def _gear(name: str, is_primary: bool = False) -> Gear:
    return Gear(name=name, type=GearType.SHOES, max_distance=800.0, start_date=day(1), is_primary=is_primary)


@pytest.mark.asyncio
async def test_soft_deleted_gear_is_hidden_from_fetch(session):
    store = GearStore(DataStore(session))
    kept = await store.create(_gear("Kept"))
    gone = await store.create(_gear("Gone"))

    await store.delete(gone)

    assert [g.id for g in await store.fetch_all()] == [kept.id]
    assert await store.get(gone.id) is None
    assert gone.is_deleted is True
    assert gone.version == 2


@pytest.mark.asyncio
async def test_update_bumps_version(session):
    store = GearStore(DataStore(session))
    gear = await store.create(_gear("Pegasus"))
    before = gear.last_updated_date

    gear.notes = "resoled"
    await store.update(gear)

    assert gear.version == 2
    assert gear.last_updated_date >= before


@pytest.mark.asyncio
async def test_only_one_primary_gear(session):
    store = GearStore(DataStore(session))
    first = await store.create(_gear("First", is_primary=True))
    second = await store.create(_gear("Second", is_primary=True))

    primary = await store.fetch_primary()

    assert primary.id == second.id
    assert (await store.get(first.id)).is_primary is False


@pytest.mark.asyncio
async def test_fetch_active_excludes_retired(session):
    store = GearStore(DataStore(session))
    active = await store.create(_gear("Active"))
    retired = _gear("Retired")
    retired.is_active = False
    await store.create(retired)

    assert [g.id for g in await store.fetch_active()] == [active.id]


@pytest.mark.asyncio
async def test_workouts_for_gear(session):
    data_store = DataStore(session)
    gear = await GearStore(data_store).create(_gear("Kayano"))
    linked = Workout(
        external_id="a", activity_type="Run", total_distance=5.0, start_date=day(3), end_date=day(3, hour=9)
    )
    linked.gear.append(gear)
    other = Workout(
        external_id="b", activity_type="Swim", total_distance=1.0, start_date=day(4), end_date=day(4, hour=9)
    )
    store = WorkoutStore(data_store)
    await store.create_bulk([linked, other], updated_gear=[gear])

    assert [w.external_id for w in await store.fetch_for_gear(gear.id)] == ["a"]
    assert [w.external_id for w in await store.fetch_all()] == ["b", "a"]
    assert await store.fetch_external_ids() == {"a", "b"}


@pytest.mark.asyncio
async def test_first_launch_sets_defaults_once(session):
    settings_store = SettingsStore(session)

    assert await settings_store.first_launch() is True
    assert await settings_store.get_bool(HAS_DONE_FIRST_LAUNCH) is True
    assert await settings_store.get_bool(HAS_PREMIUM) is False
    assert await settings_store.first_launch() is False


@pytest.mark.asyncio
async def test_settings_values_and_datetimes(session):
    settings_store = SettingsStore(session)
    assert await settings_store.key_exists(DISTANCE_UNIT) is False
    assert await settings_store.get(DISTANCE_UNIT, "km") == "km"

    await settings_store.set(DISTANCE_UNIT, "miles")
    await settings_store.set_datetime(LAST_WORKOUT_SYNC_DATE, day(9, hour=17))

    assert await settings_store.get(DISTANCE_UNIT) == "miles"
    assert await settings_store.get_datetime(LAST_WORKOUT_SYNC_DATE) == day(9, hour=17)


@pytest.mark.asyncio
async def test_unparseable_datetime_setting_reads_as_none(session):
    settings_store = SettingsStore(session)
    await settings_store.set(LAST_WORKOUT_SYNC_DATE, "yesterday")
    assert await settings_store.get_datetime(LAST_WORKOUT_SYNC_DATE) is None
