"""
External workout source contract and the change-notification plumbing shared by sources.

fetch_workouts() returns an empty list (not an error) when access was denied or no data
exists; the two cases are indistinguishable, use authorization_status() to report access.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from datetime import datetime
from enum import Enum
from typing import Protocol

from gear_gauge.models.workout import Workout

logger = logging.getLogger(__name__)


class GearGaugeError(Exception):
    """Base error for gear gauge services."""


class WorkoutSourceUnavailableError(GearGaugeError):
    """The workout source is not available (not configured or unsupported); no retry."""


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"
    UNAVAILABLE = "unavailable"


class WorkoutSource(Protocol):
    """Provider of completed workouts (Intervals.icu, a health platform, a test double)."""

    background_delivery_available: bool

    async def request_access(self) -> None:
        """Run the provider's permission flow. Completion does not guarantee access."""
        ...

    async def authorization_status(self) -> AuthorizationStatus:
        ...

    async def fetch_workouts(self, since: datetime | None = None) -> list[Workout]:
        ...

    def observe_workouts(self) -> AsyncGenerator[list[Workout], None]:
        """Yield a fresh workout snapshot on every detected change; runs until closed."""
        ...


class ObservableWorkoutSource:
    """Fan-out of "something changed" notifications to observe_workouts() subscribers."""

    background_delivery_available = True

    def __init__(self) -> None:
        self._subscribers: set[asyncio.Queue[None]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def notify_changed(self) -> None:
        """Wake every subscriber. Bursts collapse into one pending notification each."""
        for queue in self._subscribers:
            if queue.empty():
                queue.put_nowait(None)

    async def fetch_workouts(self, since: datetime | None = None) -> list[Workout]:
        raise NotImplementedError

    async def fetch_snapshot(self) -> list[Workout]:
        """Snapshot yielded to observers; sources with expensive full fetches narrow it."""
        return await self.fetch_workouts()

    async def observe_workouts(self) -> AsyncGenerator[list[Workout], None]:
        queue: asyncio.Queue[None] = asyncio.Queue(maxsize=1)
        self._subscribers.add(queue)
        logger.debug("Workout source subscriber added (total=%s)", len(self._subscribers))
        try:
            while True:
                await queue.get()
                try:
                    snapshot = await self.fetch_snapshot()
                except Exception:
                    # Consumers re-fetch on every event; a failed snapshot must not end the stream
                    logger.exception("Workout source snapshot fetch failed")
                    snapshot = []
                yield snapshot
        finally:
            self._subscribers.discard(queue)
            logger.debug("Workout source subscriber released (total=%s)", len(self._subscribers))
