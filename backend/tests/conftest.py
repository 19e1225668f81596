"""Pytest configuration and shared fixtures: in-memory SQLite per test, fake workout source, API client."""

import asyncio
import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

# Set config before app imports so settings/engine use it
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("INTERVALS_ATHLETE_ID", "")
os.environ.setdefault("INTERVALS_API_KEY", "")

import gear_gauge.models  # noqa: F401 - register tables
from gear_gauge.db.base import Base
from gear_gauge.db.session import get_db, make_engine, make_session_maker
from gear_gauge.main import app
from gear_gauge.models.gear import Gear
from gear_gauge.models.workout import Workout
from gear_gauge.schemas.gear import GearType
from gear_gauge.services.data_store import DataStore
from gear_gauge.services.gear_store import GearStore
from gear_gauge.services.workout_source import AuthorizationStatus, ObservableWorkoutSource
from gear_gauge.services.workout_sync import WorkoutSyncService


def day(n: int, hour: int = 8) -> datetime:
    """UTC datetime on day n of January 2026."""
    return datetime(2026, 1, n, hour, 0, tzinfo=timezone.utc)


class FakeWorkoutSource(ObservableWorkoutSource):
    """In-memory workout source. Builds fresh Workout objects on every fetch like a real provider."""

    def __init__(self):
        super().__init__()
        self.activities: list[dict] = []
        self.fetch_calls = 0
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.fetch_started = asyncio.Event()

    def add(
        self,
        external_id: str,
        activity_type: str = "Run",
        start: datetime | None = None,
        distance: float = 10.0,
        is_indoor: bool = False,
        minutes: int = 60,
    ) -> None:
        self.activities.append(
            {
                "external_id": external_id,
                "activity_type": activity_type,
                "start": start or day(5),
                "distance": distance,
                "is_indoor": is_indoor,
                "minutes": minutes,
            }
        )

    async def request_access(self) -> None:
        return None

    async def authorization_status(self) -> AuthorizationStatus:
        return AuthorizationStatus.AUTHORIZED

    async def fetch_workouts(self, since: datetime | None = None) -> list[Workout]:
        self.fetch_calls += 1
        self.fetch_started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return [
            Workout(
                external_id=a["external_id"],
                activity_type=a["activity_type"],
                is_indoor=a["is_indoor"],
                total_distance=a["distance"],
                start_date=a["start"],
                end_date=a["start"] + timedelta(minutes=a["minutes"]),
            )
            for a in self.activities
            if since is None or a["start"] >= since
        ]


@pytest_asyncio.fixture
async def engine():
    eng = make_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest.fixture
def fake_source():
    return FakeWorkoutSource()


@pytest.fixture
def sync_service(fake_source, session_maker):
    return WorkoutSyncService(fake_source, session_maker)


@pytest.fixture
def make_gear(session_maker):
    """Create and commit a gear item; returns its id."""

    async def _make(
        name: str = "Kayano",
        workout_types: tuple[str, ...] = ("outdoorRun",),
        start: datetime | None = None,
        end: datetime | None = None,
        is_active: bool = True,
        current_distance: float = 0.0,
        gear_type: GearType = GearType.SHOES,
    ) -> str:
        async with session_maker() as s:
            gear = Gear(
                name=name,
                type=gear_type,
                current_distance=current_distance,
                max_distance=800.0,
                is_active=is_active,
                start_date=start or day(1),
                end_date=end,
                workout_types=list(workout_types),
            )
            await GearStore(DataStore(s)).create(gear)
            return gear.id

    return _make


@pytest.fixture
def load_gear(session_maker):
    """Read a gear item back through a fresh session."""

    async def _load(gear_id: str) -> Gear:
        async with session_maker() as s:
            gear = await GearStore(DataStore(s)).get(gear_id)
            assert gear is not None
            return gear

    return _load


@pytest_asyncio.fixture
async def client(session_maker, fake_source, sync_service):
    """AsyncClient against the app with DB, workout source and sync service swapped for test instances."""

    async def _get_db():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.state.workout_source = fake_source
    app.state.sync_service = sync_service
    app.state.scheduler = AsyncIOScheduler()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
