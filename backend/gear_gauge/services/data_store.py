"""
Generic CRUD over an AsyncSession for audited entities (Gear, Workout).
Every mutating call commits; on failure the session is rolled back and the error re-raised,
so each call either persists fully or leaves prior durable state unchanged.
"""
import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gear_gauge.models.base_entity import AuditMixin

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=AuditMixin)


class DataStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        await self._save()
        return entity

    async def fetch(
        self,
        model: type[T],
        *where: Any,
        order_by: Sequence[Any] = (),
        include_deleted: bool = False,
    ) -> list[T]:
        """Fetch entities matching the where clauses; soft-deleted rows are excluded by default."""
        stmt = select(model).where(*where)
        if not include_deleted:
            stmt = stmt.where(model.is_deleted.is_(False))
        if order_by:
            stmt = stmt.order_by(*order_by)
        r = await self.session.execute(stmt)
        return list(r.scalars().all())

    async def update(self, entity: T) -> T:
        entity.mark_as_updated()
        self.session.add(entity)
        await self._save()
        return entity

    async def delete(self, entity: T) -> None:
        """Soft delete: mark the entity deleted and bump its version."""
        entity.mark_as_deleted()
        await self._save()

    async def create_bulk(self, entities: Iterable[T], also_save: Iterable[AuditMixin] = ()) -> None:
        """Insert entities in one transaction, together with already-modified entities in also_save."""
        self.session.add_all(list(entities))
        self.session.add_all(list(also_save))
        await self._save()

    async def update_bulk(self, entities: Iterable[T]) -> None:
        for entity in entities:
            entity.mark_as_updated()
            self.session.add(entity)
        await self._save()

    async def delete_bulk(self, entities: Iterable[T]) -> None:
        for entity in entities:
            entity.mark_as_deleted()
        await self._save()

    async def _save(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            logger.exception("DataStore commit failed; rolling back")
            await self.session.rollback()
            raise
