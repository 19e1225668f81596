"""Intervals.icu as the external workout source: activities -> unsaved Workout entities."""

import logging
from datetime import date, datetime, timedelta, timezone

import httpx

from gear_gauge.config import settings
from gear_gauge.models.workout import Workout
from gear_gauge.schemas.intervals import IntervalsActivity
from gear_gauge.services.intervals_client import check_access, get_activities
from gear_gauge.services.workout_source import (
    AuthorizationStatus,
    ObservableWorkoutSource,
    WorkoutSourceUnavailableError,
)

logger = logging.getLogger(__name__)

_VIRTUAL_PREFIX = "virtual"
# Webhook pushes are about recent activities; the sync itself still reads the full lookback window
SNAPSHOT_LOOKBACK = timedelta(days=2)


def activity_to_workout(activity: IntervalsActivity) -> Workout | None:
    """Map an Intervals.icu activity to a new Workout; None if it has no start time."""
    start = activity.start_date
    if start is None:
        return None
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    duration_sec = activity.elapsed_time_sec or activity.moving_time_sec or 0
    activity_type = activity.type or None
    is_indoor = activity.trainer or (activity_type or "").lower().startswith(_VIRTUAL_PREFIX)
    distance_km = max(activity.distance_m or 0.0, 0.0) / 1000.0
    return Workout(
        external_id=activity.id,
        activity_type=activity_type,
        is_indoor=is_indoor,
        total_distance=distance_km,
        start_date=start,
        end_date=start + timedelta(seconds=max(duration_sec, 0)),
    )


class IntervalsWorkoutSource(ObservableWorkoutSource):
    """Fetches completed activities from Intervals.icu. Change notifications arrive via webhook."""

    def __init__(
        self,
        athlete_id: str | None = None,
        api_key: str | None = None,
        lookback_days: int | None = None,
    ) -> None:
        super().__init__()
        self.athlete_id = (athlete_id if athlete_id is not None else settings.intervals_athlete_id).strip()
        self.api_key = (api_key if api_key is not None else settings.intervals_api_key).strip()
        self.lookback_days = lookback_days if lookback_days is not None else settings.sync_lookback_days
        self._access_granted: bool | None = None

    @property
    def configured(self) -> bool:
        return bool(self.athlete_id and self.api_key)

    def _require_configured(self) -> None:
        if not self.configured:
            raise WorkoutSourceUnavailableError(
                "Intervals.icu is not configured (set INTERVALS_ATHLETE_ID and INTERVALS_API_KEY)."
            )

    async def request_access(self) -> None:
        """Verify the stored credentials against Intervals.icu; the result is kept for authorization_status()."""
        self._require_configured()
        self._access_granted = await check_access(self.athlete_id, self.api_key)
        logger.info("Intervals.icu access check for athlete_id=%s: granted=%s", self.athlete_id, self._access_granted)

    async def authorization_status(self) -> AuthorizationStatus:
        if not self.configured:
            return AuthorizationStatus.UNAVAILABLE
        if self._access_granted is None:
            return AuthorizationStatus.NOT_DETERMINED
        return AuthorizationStatus.AUTHORIZED if self._access_granted else AuthorizationStatus.DENIED

    async def fetch_snapshot(self) -> list[Workout]:
        return await self.fetch_workouts(since=datetime.now(timezone.utc) - SNAPSHOT_LOOKBACK)

    async def fetch_workouts(self, since: datetime | None = None) -> list[Workout]:
        """Fetch workouts since the given time (default: lookback window). Empty list on 401/403."""
        self._require_configured()
        if since is not None and since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        newest = date.today() + timedelta(days=1)
        oldest = since.date() if since else newest - timedelta(days=self.lookback_days)
        try:
            activities = await get_activities(self.athlete_id, self.api_key, oldest, newest)
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                self._access_granted = False
                logger.warning("Intervals.icu denied access for athlete_id=%s; treating as no data", self.athlete_id)
                return []
            raise
        self._access_granted = True
        workouts = []
        for activity in activities:
            workout = activity_to_workout(activity)
            if workout is None:
                logger.debug("Skipping Intervals.icu activity %s without start date", activity.id)
                continue
            if since is not None and workout.start_date < since:
                continue
            workouts.append(workout)
        logger.info(
            "Intervals.icu fetched %s activities (%s usable) for %s..%s",
            len(activities),
            len(workouts),
            oldest.isoformat(),
            newest.isoformat(),
        )
        return workouts
