"""
Business repository (with administrator and location).
"""

from uuid import UUID
from sqlalchemy import select

from pos_auth.models.business import Administrator, Business, Location
from .base import BaseRepository


class BusinessRepository(BaseRepository[Business]):
    model = Business

    async def get_with_relations(self, business_id: UUID) -> Business | None:
        """Business with administrator and location loaded."""
        return await self.get_by_id(business_id)

    async def create_with_relations(
        self,
        business: dict,
        administrator: dict,
        location: dict,
    ) -> Business:
        """Create business, administrator and location in a single flush."""
        entity = Business(
            **business,
            administrator=Administrator(**administrator),
            location=Location(**location),
        )
        async with self.savepoint():
            self.db.add(entity)
            await self.db.flush()
        return entity

    async def get_admin_by_email(self, email: str) -> Administrator | None:
        stmt = select(Administrator).where(Administrator.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
