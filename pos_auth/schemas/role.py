"""
Role schemas.
"""

from datetime import datetime
from uuid import UUID
from pydantic import Field

from .common import APIModel
from .module import ModuleResponse


class RoleCreate(APIModel):
    """Role creation schema."""
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    permissions: list[UUID] = Field(min_length=1)


class RoleUpdate(APIModel):
    """Role update schema. Only fields that are sent are changed."""
    name: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    permissions: list[UUID] | None = Field(None, min_length=1)


class RoleSummary(APIModel):
    """Role fields embedded in employee listings."""
    id: UUID
    name: str
    description: str | None = None


class RoleResponse(RoleSummary):
    """Role response schema."""
    permissions: list[str]
    is_default: bool
    is_system: bool
    business_id: UUID
    created_at: datetime


class RoleWithEmployeeCount(RoleResponse):
    employee_count: int


class RoleDetail(RoleWithEmployeeCount):
    """Role with its permissions resolved to catalog modules."""
    modules: list[ModuleResponse]


class AssignRoleRequest(APIModel):
    """Assign role request."""
    role_id: UUID
