"""
Employee schemas.
"""

from datetime import datetime
from uuid import UUID

from .common import APIModel
from .role import RoleResponse, RoleSummary


class EmployeeResponse(APIModel):
    """Employee without credentials."""
    id: UUID
    identification_number: str
    full_name: str
    email: str
    role_id: UUID
    business_id: UUID
    created_at: datetime


class EmployeeWithRole(EmployeeResponse):
    """Employee listing entry; role is None when the reference dangles."""
    role: RoleSummary | None = None


class EmployeeWithAssignedRole(EmployeeResponse):
    """Result of a role assignment."""
    role: RoleResponse
