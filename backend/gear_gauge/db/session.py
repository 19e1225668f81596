from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from gear_gauge.config import settings
from gear_gauge.db.base import Base


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    # gear_workouts rows cascade with their gear/workout only when SQLite enforces FKs
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def make_engine(url: str, **kwargs) -> AsyncEngine:
    eng = create_async_engine(url, echo=settings.debug, **kwargs)
    if eng.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(eng.sync_engine)
    return eng


def make_session_maker(eng: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Entities stay readable after commit; the sync pass returns counts from objects it just saved
    return async_sessionmaker(eng, class_=AsyncSession, expire_on_commit=False)


engine = make_engine(settings.database_url)
async_session_maker = make_session_maker(engine)


async def init_db() -> None:
    import gear_gauge.models  # noqa: F401 - register tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; stores commit their own writes, this commits whatever is left pending."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
