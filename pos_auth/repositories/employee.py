"""
Employee repository. Tenant-owned lookups take the business ID.
"""

from uuid import UUID
from sqlalchemy import Select, select

from pos_auth.models.employee import Employee
from .base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee

    def _base_query(self) -> Select:
        return select(Employee).order_by(Employee.created_at.asc())

    async def get_for_business(
        self,
        employee_id: UUID,
        business_id: UUID,
    ) -> Employee | None:
        return await self.get_one(id=employee_id, business_id=business_id)

    async def get_by_email(self, email: str) -> Employee | None:
        """Login lookup; emails are unique across all businesses."""
        return await self.get_one(email=email)

    async def list_for_business(self, business_id: UUID) -> list[Employee]:
        return await self.all(business_id=business_id)

    async def count_with_role(self, role_id: UUID, business_id: UUID) -> int:
        return await self.count(role_id=role_id, business_id=business_id)
