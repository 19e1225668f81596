import asyncio
import logging
import sys
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from gear_gauge.api.v1 import gear, intervals, settings as settings_api, workouts

# Ensure app loggers (sync, Intervals.icu) print to stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stdout,
)
logging.getLogger("gear_gauge").setLevel(logging.DEBUG)
from gear_gauge.config import settings
from gear_gauge.db.session import async_session_maker, init_db
from gear_gauge.services.background_fetch import apply_background_fetch
from gear_gauge.services.http_client import close_http_client, init_http_client
from gear_gauge.services.intervals_source import IntervalsWorkoutSource
from gear_gauge.services.settings_store import HAS_BACKGROUND_FETCH_ENABLED, SettingsStore
from gear_gauge.services.workout_sync import WorkoutSyncService
from prometheus_client import make_asgi_app

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    init_http_client(timeout=float(settings.intervals_request_timeout_seconds))
    async with async_session_maker() as session:
        settings_store = SettingsStore(session)
        await settings_store.first_launch()
        background_fetch_enabled = bool(await settings_store.get_bool(HAS_BACKGROUND_FETCH_ENABLED))

    source = IntervalsWorkoutSource()
    if not source.configured:
        logger.warning("Intervals.icu credentials not set; workout sync will report the source as unavailable")
    sync_service = await WorkoutSyncService.create(source, async_session_maker)
    app.state.workout_source = source
    app.state.sync_service = sync_service
    app.state.scheduler = scheduler

    observer = sync_service.start_observing() if settings.observe_on_startup else None
    apply_background_fetch(scheduler, sync_service, background_fetch_enabled)
    scheduler.start()
    yield
    if observer is not None:
        observer.cancel()
        try:
            await observer
        except asyncio.CancelledError:
            pass
    await sync_service.drain()
    scheduler.shutdown()
    await close_http_client()


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit_default])

app = FastAPI(
    title="Gear Gauge API",
    description="Gear mileage tracking: imports workouts and assigns their distance to shoes and bikes",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=500)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()] if settings.cors_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(gear.router, prefix="/api/v1")
app.include_router(workouts.router, prefix="/api/v1")
app.include_router(settings_api.router, prefix="/api/v1")
app.include_router(intervals.router, prefix="/api/v1")

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


@app.get("/health")
@limiter.exempt
def health(request: Request):
    return {"status": "ok"}
