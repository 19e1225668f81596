"""Background fetch: periodic workout sync while the hasBackgroundFetchEnabled preference is on."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from gear_gauge.config import settings
from gear_gauge.services.workout_sync import WorkoutSyncService

logger = logging.getLogger(__name__)

BACKGROUND_FETCH_JOB_ID = "workout-background-fetch"


async def run_background_fetch(sync_service: WorkoutSyncService) -> None:
    try:
        count = await sync_service.sync_workouts()
    except Exception:
        logger.exception("Background workout fetch failed")
        return
    logger.info("Background workout fetch: %s new workouts", count)


def apply_background_fetch(
    scheduler: AsyncIOScheduler,
    sync_service: WorkoutSyncService,
    enabled: bool,
    interval_minutes: int | None = None,
) -> None:
    """Add or remove the interval job so it matches the preference."""
    job = scheduler.get_job(BACKGROUND_FETCH_JOB_ID)
    if not enabled:
        if job is not None:
            scheduler.remove_job(BACKGROUND_FETCH_JOB_ID)
            logger.info("Background workout fetch disabled")
        return
    minutes = interval_minutes or settings.background_fetch_interval_minutes
    scheduler.add_job(
        run_background_fetch,
        "interval",
        minutes=minutes,
        args=[sync_service],
        id=BACKGROUND_FETCH_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info("Background workout fetch enabled (every %s min)", minutes)
