"""
Workout sync: fetch workouts from the external source, drop ones already imported (by external_id),
assign the new ones to matching active gear, then persist workouts and gear in one transaction.

Matching is evaluated independently per gear, so a workout that fits two overlapping gear items
(e.g. two bikes both set up for outdoor rides) is assigned to both and counted on both.
"""
import asyncio
import logging
from collections.abc import Iterable
from contextlib import aclosing
from datetime import datetime

from prometheus_client import Counter, Histogram
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gear_gauge.models.base_entity import as_utc, utcnow
from gear_gauge.models.gear import Gear
from gear_gauge.models.workout import Workout
from gear_gauge.schemas.workout import SyncStatus
from gear_gauge.services.data_store import DataStore
from gear_gauge.services.gear_store import GearStore
from gear_gauge.services.settings_store import LAST_WORKOUT_SYNC_DATE, SettingsStore
from gear_gauge.services.workout_source import WorkoutSource
from gear_gauge.services.workout_store import WorkoutStore

logger = logging.getLogger(__name__)

SYNC_RUNS = Counter("gear_gauge_workout_sync_runs_total", "Workout sync passes started")
SYNC_SKIPPED = Counter("gear_gauge_workout_sync_skipped_total", "Workout sync calls skipped because a sync was running")
SYNC_FAILURES = Counter("gear_gauge_workout_sync_failures_total", "Workout sync passes that raised")
WORKOUTS_IMPORTED = Counter("gear_gauge_workouts_imported_total", "Workouts imported from the external source")
SYNC_DURATION = Histogram("gear_gauge_workout_sync_duration_seconds", "Workout sync pass duration")


def select_new_workouts(fetched: Iterable[Workout], known_external_ids: set[str]) -> list[Workout]:
    """Workouts whose external_id is not stored yet; repeats within the batch keep the first one."""
    seen = set(known_external_ids)
    out = []
    for workout in fetched:
        if workout.external_id in seen:
            continue
        seen.add(workout.external_id)
        out.append(workout)
    return out


def workout_matches_gear(workout: Workout, gear: Gear) -> bool:
    if any(g.id == gear.id for g in workout.gear):
        return False
    if workout.workout_type not in gear.workout_types:
        return False
    if as_utc(gear.start_date) > as_utc(workout.start_date):
        return False
    return gear.end_date is None or as_utc(gear.end_date) >= as_utc(workout.end_date)


def assign_workout_to_gear(workout: Workout, gear: Gear) -> None:
    workout.gear.append(gear)
    gear.current_distance += workout.total_distance
    gear.mark_as_updated()
    logger.debug("Assigned workout %s to gear %s", workout.external_id, gear.name)


def assign_workouts(workouts: list[Workout], gear_items: Iterable[Gear]) -> list[Gear]:
    """Assign workouts to every gear item they match. Returns the gear that changed, each once."""
    touched: list[Gear] = []
    for gear in gear_items:
        matching = [w for w in workouts if workout_matches_gear(w, gear)]
        if not matching:
            continue
        logger.info("Gear %s: %s matching workouts", gear.name, len(matching))
        for workout in matching:
            assign_workout_to_gear(workout, gear)
        touched.append(gear)
    return touched


def _log_observed_sync(task: "asyncio.Task[int]") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Workout sync after source update failed", exc_info=exc)
    else:
        logger.info("Workout sync result: %s", task.result())


class WorkoutSyncService:
    """Imports workouts and assigns them to gear. One instance per event loop."""

    def __init__(
        self,
        source: WorkoutSource,
        session_maker: async_sessionmaker[AsyncSession],
    ) -> None:
        self.source = source
        self.session_maker = session_maker
        self.last_sync_date: datetime | None = None
        self._lock = asyncio.Lock()
        self._observed_syncs: set[asyncio.Task[int]] = set()

    @classmethod
    async def create(
        cls,
        source: WorkoutSource,
        session_maker: async_sessionmaker[AsyncSession],
    ) -> "WorkoutSyncService":
        service = cls(source, session_maker)
        await service.load()
        return service

    async def load(self) -> None:
        """Load last_sync_date from the settings table."""
        async with self.session_maker() as session:
            self.last_sync_date = await SettingsStore(session).get_datetime(LAST_WORKOUT_SYNC_DATE)

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    def status(self) -> SyncStatus:
        return SyncStatus(is_syncing=self.is_syncing, last_sync_date=self.last_sync_date)

    async def sync_workouts(self) -> int:
        """Import new workouts and assign them to gear. Returns the number of new workouts.

        Returns 0 without touching the source or the database when a sync is already running.
        Source and database errors propagate; the sync lock is always released.
        """
        # locked() and acquire happen with no await in between, so the check cannot race
        if self._lock.locked():
            logger.warning("Workout sync already in progress")
            SYNC_SKIPPED.inc()
            return 0
        async with self._lock:
            SYNC_RUNS.inc()
            with SYNC_DURATION.time():
                try:
                    count = await self._run_sync()
                except Exception:
                    SYNC_FAILURES.inc()
                    raise
            WORKOUTS_IMPORTED.inc(count)
            return count

    async def _run_sync(self) -> int:
        logger.info("Starting workout sync")
        async with self.session_maker() as session:
            data_store = DataStore(session)
            workout_store = WorkoutStore(data_store)
            gear_store = GearStore(data_store)

            fetched = await self.source.fetch_workouts()
            known = await workout_store.fetch_external_ids()
            new_workouts = select_new_workouts(fetched, known)

            if not new_workouts:
                logger.info("No new workouts to sync (fetched=%s)", len(fetched))
                await self._update_last_sync_date(session)
                return 0

            logger.info("Found %s new workouts", len(new_workouts))
            touched_gear = await self.assign_workouts_to_gear(gear_store, new_workouts)
            await workout_store.create_bulk(new_workouts, updated_gear=touched_gear)
            await self._update_last_sync_date(session)

        logger.info("Synced %s workouts (%s gear updated)", len(new_workouts), len(touched_gear))
        return len(new_workouts)

    async def assign_workouts_to_gear(self, gear_store: GearStore, workouts: list[Workout]) -> list[Gear]:
        """Assign workouts to active gear in memory; the caller persists workouts and returned gear."""
        active_gear = await gear_store.fetch_active()
        return assign_workouts(workouts, active_gear)

    async def _update_last_sync_date(self, session: AsyncSession) -> None:
        now = utcnow()
        if self.last_sync_date is not None and now < self.last_sync_date:
            now = self.last_sync_date
        self.last_sync_date = now
        await SettingsStore(session).set_datetime(LAST_WORKOUT_SYNC_DATE, now)

    async def drain(self) -> None:
        """Wait for syncs started by the observer; call after cancelling it, before closing the HTTP client."""
        if self._observed_syncs:
            logger.info("Waiting for %s in-flight workout sync(s)", len(self._observed_syncs))
            await asyncio.gather(*self._observed_syncs, return_exceptions=True)

    def start_observing(self) -> "asyncio.Task[None]":
        """Sync on every source change notification until the returned task is cancelled.

        Failed syncs are logged and observation continues. A sync already started when the task
        is cancelled runs to completion.
        """
        return asyncio.create_task(self._observe(), name="workout-sync-observer")

    async def _observe(self) -> None:
        async with aclosing(self.source.observe_workouts()) as updates:
            async for _ in updates:
                logger.info("Workout source update detected")
                sync = asyncio.ensure_future(self.sync_workouts())
                self._observed_syncs.add(sync)
                sync.add_done_callback(self._observed_syncs.discard)
                sync.add_done_callback(_log_observed_sync)
                # wait() does not propagate cancellation into the sync task
                await asyncio.wait({sync})
