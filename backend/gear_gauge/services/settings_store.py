"""
Durable key-value preferences (app_settings table).
Holds the last workout sync date and user feature flags under well-known keys.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gear_gauge.models.app_setting import AppSetting

logger = logging.getLogger(__name__)

HAS_DONE_FIRST_LAUNCH = "hasDoneFirstLaunch"
HAS_PREMIUM = "hasPremium"
HAS_SOURCE_ACCESS = "hasHealthKitAccess"
HAS_REQUESTED_SOURCE_AUTHORIZATION = "hasRequestedHealthKitAuthorization"
HAS_BACKGROUND_FETCH_ENABLED = "hasBackgroundFetchEnabled"
DISTANCE_UNIT = "distanceUnit"
LAST_WORKOUT_SYNC_DATE = "lastWorkoutSyncDate"


class SettingsStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _row(self, key: str) -> AppSetting | None:
        r = await self.session.execute(select(AppSetting).where(AppSetting.key == key))
        return r.scalar_one_or_none()

    async def key_exists(self, key: str) -> bool:
        return await self._row(key) is not None

    async def get(self, key: str, default: Any = None) -> Any:
        row = await self._row(key)
        if row is None or row.value is None:
            return default
        return row.value

    async def set(self, key: str, value: Any) -> None:
        row = await self._row(key)
        if row is None:
            self.session.add(AppSetting(key=key, value=value))
        else:
            row.value = value
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def get_bool(self, key: str) -> bool | None:
        value = await self.get(key)
        if value is None:
            return None
        return bool(value)

    async def get_datetime(self, key: str) -> datetime | None:
        value = await self.get(key)
        if not isinstance(value, str):
            return None
        try:
            dt = datetime.fromisoformat(value)
        except ValueError:
            logger.warning("Ignoring unparseable datetime setting %s=%r", key, value)
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    async def set_datetime(self, key: str, value: datetime | None) -> None:
        await self.set(key, value.isoformat() if value is not None else None)

    async def first_launch(self) -> bool:
        """True on the very first call; stores the initial defaults at that point."""
        if await self.get_bool(HAS_DONE_FIRST_LAUNCH) is not None:
            return False
        logger.info("First launch detected - setting defaults")
        await self.set(HAS_PREMIUM, False)
        await self.set(HAS_DONE_FIRST_LAUNCH, True)
        return True
