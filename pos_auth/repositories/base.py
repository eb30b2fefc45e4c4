"""
Base repository with common CRUD operations.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar, Generic, Type
from uuid import UUID
from sqlalchemy import Select, select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pos_auth.core.interfaces.store import ConstraintViolationError
from pos_auth.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common CRUD operations.

    Writes run inside a savepoint, so a constraint violation rolls back
    only that write and surfaces as ``ConstraintViolationError`` while
    the surrounding transaction stays usable.

    Usage:
        class RoleRepository(BaseRepository[Role]):
            model = Role

        repo = RoleRepository(db)
        role = await repo.get_by_id(role_id)
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters or ordering."""
        return select(self.model)

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """Run a block in a nested transaction, translating constraint errors."""
        try:
            async with self.db.begin_nested():
                yield
        except IntegrityError as exc:
            raise ConstraintViolationError(str(exc.orig)) from exc

    async def get_by_id(self, id: UUID | str) -> ModelT | None:
        """Get entity by ID."""
        if isinstance(id, str):
            id = UUID(id)
        stmt = self._base_query().where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_one(self, **filters) -> ModelT | None:
        """Get single entity by filters."""
        stmt = self._base_query()
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        stmt = select(func.count()).select_from(self.model)
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return await self.db.scalar(stmt) or 0

    async def all(self, **filters) -> list[ModelT]:
        """Get all entities matching filters."""
        stmt = self._base_query()
        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, field) == value)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data) -> ModelT:
        """Create new entity."""
        entity = self.model(**data)
        async with self.savepoint():
            self.db.add(entity)
            await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def create_many(self, items: list[dict]) -> list[ModelT]:
        """Create multiple entities; all or nothing."""
        entities = [self.model(**data) for data in items]
        async with self.savepoint():
            self.db.add_all(entities)
            await self.db.flush()
        for entity in entities:
            await self.db.refresh(entity)
        return entities

    async def update_entity(self, entity: ModelT, **data) -> ModelT:
        """Apply field changes to a loaded entity."""
        async with self.savepoint():
            for field, value in data.items():
                if hasattr(entity, field):
                    setattr(entity, field, value)
            await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete_entity(self, entity: ModelT) -> None:
        """Delete a loaded entity (hard delete)."""
        async with self.savepoint():
            await self.db.delete(entity)
            await self.db.flush()
