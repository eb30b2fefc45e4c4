"""
Module catalog repository.
"""

from typing import Sequence
from uuid import UUID
from sqlalchemy import Select, select, func

from pos_auth.models.module import Module
from .base import BaseRepository


class ModuleRepository(BaseRepository[Module]):
    model = Module

    def _base_query(self) -> Select:
        return select(Module).order_by(Module.order)

    async def list_active(self) -> list[Module]:
        """Active modules ordered by ``order``."""
        return await self.all(is_active=True)

    async def get_by_ids(self, ids: Sequence[UUID]) -> list[Module]:
        if not ids:
            return []
        stmt = self._base_query().where(Module.id.in_(ids))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_active_by_ids(self, ids: Sequence[UUID]) -> int:
        if not ids:
            return 0
        stmt = (
            select(func.count())
            .select_from(Module)
            .where(Module.id.in_(ids), Module.is_active.is_(True))
        )
        return await self.db.scalar(stmt) or 0
