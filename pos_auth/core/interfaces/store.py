"""
Identity store protocols.

Services depend on these, never on a database session. Every lookup on
tenant-owned data takes the business ID explicitly.

Implementations: SQLAlchemy repositories in pos_auth.repositories
"""
from __future__ import annotations

from typing import Any, AsyncContextManager, Protocol, Sequence
from uuid import UUID

from pos_auth.models.business import Administrator, Business
from pos_auth.models.employee import Employee
from pos_auth.models.module import Module
from pos_auth.models.role import Role


class ConstraintViolationError(Exception):
    """A write was rejected by a unique or foreign key constraint."""


class ModuleStore(Protocol):
    """Catalog of feature modules."""

    async def count(self, **filters: Any) -> int:
        """Count modules matching filters."""
        ...

    async def list_active(self) -> list[Module]:
        """Active modules ordered by ``order``."""
        ...

    async def get_by_ids(self, ids: Sequence[UUID]) -> list[Module]:
        """Modules with the given IDs, ordered by ``order``."""
        ...

    async def count_active_by_ids(self, ids: Sequence[UUID]) -> int:
        """How many of the given IDs resolve to active modules."""
        ...

    async def create_many(self, items: list[dict]) -> list[Module]:
        ...


class RoleStore(Protocol):
    """Tenant-scoped roles."""

    async def get_for_business(self, role_id: UUID, business_id: UUID) -> Role | None:
        ...

    async def get_by_name(
        self,
        name: str,
        business_id: UUID,
        exclude_id: UUID | None = None,
    ) -> Role | None:
        ...

    async def list_for_business(self, business_id: UUID) -> list[Role]:
        """Default roles first, then by creation time."""
        ...

    async def create(self, **data: Any) -> Role:
        ...

    async def create_many(self, items: list[dict]) -> list[Role]:
        ...

    async def update_entity(self, entity: Role, **data: Any) -> Role:
        ...

    async def delete_entity(self, entity: Role) -> None:
        ...


class EmployeeStore(Protocol):
    """Tenant-scoped employees."""

    async def get_for_business(
        self,
        employee_id: UUID,
        business_id: UUID,
    ) -> Employee | None:
        ...

    async def get_by_email(self, email: str) -> Employee | None:
        ...

    async def list_for_business(self, business_id: UUID) -> list[Employee]:
        ...

    async def count_with_role(self, role_id: UUID, business_id: UUID) -> int:
        ...

    async def create(self, **data: Any) -> Employee:
        ...

    async def update_entity(self, entity: Employee, **data: Any) -> Employee:
        ...


class BusinessStore(Protocol):
    """Businesses with their administrator and location."""

    async def get_with_relations(self, business_id: UUID) -> Business | None:
        ...

    async def create_with_relations(
        self,
        business: dict,
        administrator: dict,
        location: dict,
    ) -> Business:
        """Create business, administrator and location in one write."""
        ...

    async def get_admin_by_email(self, email: str) -> Administrator | None:
        ...

    def savepoint(self) -> AsyncContextManager[Any]:
        """Scope whose failure rolls back only its own writes."""
        ...
