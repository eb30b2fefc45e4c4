"""
Role repository. Every query is scoped to a business.
"""

from uuid import UUID
from sqlalchemy import Select, select

from pos_auth.models.role import Role
from .base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    model = Role

    def _base_query(self) -> Select:
        return select(Role).order_by(Role.is_default.desc(), Role.created_at.asc())

    async def get_for_business(self, role_id: UUID, business_id: UUID) -> Role | None:
        return await self.get_one(id=role_id, business_id=business_id)

    async def get_by_name(
        self,
        name: str,
        business_id: UUID,
        exclude_id: UUID | None = None,
    ) -> Role | None:
        stmt = self._base_query().where(
            Role.name == name,
            Role.business_id == business_id,
        )
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_for_business(self, business_id: UUID) -> list[Role]:
        """Default roles first, then by creation time."""
        return await self.all(business_id=business_id)
