"""Intervals.icu webhook: activity changes wake the workout observer, which runs a sync."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException

from gear_gauge.api.deps import get_workout_source
from gear_gauge.services.workout_source import ObservableWorkoutSource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intervals", tags=["intervals"])

ACTIVITY_EVENT_TYPES = {"activity", "activity_uploaded", "activity_updated", "activity_deleted"}


@router.post("/webhook")
async def intervals_webhook(
    source: Annotated[ObservableWorkoutSource, Depends(get_workout_source)],
    payload: Annotated[dict[str, Any], Body()],
) -> dict:
    """Acknowledge an Intervals.icu push. Non-activity events (wellness, calendar) are ignored."""
    athlete_id = str(payload.get("athlete_id") or "").strip()
    if not athlete_id:
        raise HTTPException(status_code=400, detail="athlete_id is required")
    expected = getattr(source, "athlete_id", None)
    if expected and athlete_id != expected:
        logger.info("Intervals webhook: ignoring unknown athlete_id=%s", athlete_id)
        return {"ok": True}
    event_type = str(payload.get("type") or "activity").strip().lower()
    if event_type not in ACTIVITY_EVENT_TYPES:
        logger.debug("Intervals webhook: ignoring event type=%s", event_type)
        return {"ok": True}
    logger.info("Intervals webhook: %s for athlete_id=%s, notifying %s observers", event_type, athlete_id, source.subscriber_count)
    source.notify_changed()
    return {"ok": True}
