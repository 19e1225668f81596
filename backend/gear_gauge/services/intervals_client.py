"""
Intervals.icu API client: athlete access check and completed activities.
Auth: API Key (Athlete ID + API Key) from settings.
"""
import logging
from datetime import date, datetime
from typing import Any

import httpx

from gear_gauge.schemas.intervals import IntervalsActivity
from gear_gauge.services.http_client import get_http_client


ACTIVITY_FIELDS = "id,type,trainer,distance,start_date,start_date_local,elapsed_time,moving_time"
logger = logging.getLogger(__name__)


def _normalize_athlete_id(athlete_id: str) -> str:
    """Use athlete id as-is (Intervals.icu accepts both i471411 and 471411 in URL)."""
    return (athlete_id or "").strip()


def _basic_auth(api_key: str) -> tuple[str, str]:
    """Intervals.icu: Basic Auth, username API_KEY, password = API key."""
    return ("API_KEY", api_key)


def _log_response_error(method: str, url: str, response: httpx.Response) -> None:
    """Log HTTP error without sensitive data."""
    body = (response.text or "")[:500]
    logger.warning(
        "Intervals.icu %s %s -> %s body=%s",
        method,
        url,
        response.status_code,
        body,
    )


def _parse_datetime(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_seconds(raw: Any) -> int | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return int(raw)


def parse_activity(item: dict) -> IntervalsActivity | None:
    """Build IntervalsActivity from API JSON; None if the item has no id."""
    sid = str(item.get("id") or "").strip()
    if not sid:
        return None
    # start_date is UTC; start_date_local has no offset and is only a fallback
    start = _parse_datetime(item.get("start_date")) or _parse_datetime(item.get("start_date_local"))
    distance = item.get("distance")
    return IntervalsActivity(
        id=sid,
        type=item.get("type"),
        trainer=bool(item.get("trainer")),
        distance_m=float(distance) if isinstance(distance, (int, float)) and not isinstance(distance, bool) else None,
        start_date=start,
        elapsed_time_sec=_parse_seconds(item.get("elapsed_time")),
        moving_time_sec=_parse_seconds(item.get("moving_time")),
        raw=item,
    )


async def check_access(athlete_id: str, api_key: str) -> bool:
    """GET athlete profile. True if the key is accepted, False on 401/403."""
    athlete_id = _normalize_athlete_id(athlete_id)
    client = get_http_client()
    url = f"athlete/{athlete_id}"
    r = await client.get(url, auth=_basic_auth(api_key))
    if r.status_code in (401, 403):
        _log_response_error("GET", url, r)
        return False
    if r.status_code >= 400:
        _log_response_error("GET", url, r)
    r.raise_for_status()
    return True


async def get_activities(
    athlete_id: str,
    api_key: str,
    oldest: date,
    newest: date,
    limit: int = 1000,
) -> list[IntervalsActivity]:
    """GET completed activities (workouts) in date range."""
    athlete_id = _normalize_athlete_id(athlete_id)
    client = get_http_client()
    url = f"athlete/{athlete_id}/activities"
    params = {
        "oldest": oldest.isoformat(),
        "newest": newest.isoformat(),
        "limit": limit,
        "fields": ACTIVITY_FIELDS,
    }
    r = await client.get(url, params=params, auth=_basic_auth(api_key))
    if r.status_code >= 400:
        _log_response_error("GET", url, r)
    r.raise_for_status()
    data = r.json() if r.content else []
    if not isinstance(data, list):
        data = [data] if data else []
    out: list[IntervalsActivity] = []
    for item in data:
        if isinstance(item, dict):
            activity = parse_activity(item)
            if activity is not None:
                out.append(activity)
    return out
