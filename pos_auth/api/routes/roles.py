"""
Role management routes (tenant-scoped by business).
"""

from uuid import UUID
from fastapi import APIRouter, Depends, Response, status

from pos_auth.schemas.common import MessageResponse
from pos_auth.schemas.employee import EmployeeWithAssignedRole
from pos_auth.schemas.role import (
    AssignRoleRequest,
    RoleCreate,
    RoleDetail,
    RoleResponse,
    RoleUpdate,
    RoleWithEmployeeCount,
)
from pos_auth.services.roles import RoleService
from pos_auth.api.dependencies.services import get_role_service
from pos_auth.utils.context import set_context_business

router = APIRouter()


@router.post(
    "/{business_id}/roles",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_role(
    business_id: UUID,
    data: RoleCreate,
    role_service: RoleService = Depends(get_role_service),
):
    """Create a custom role."""
    set_context_business(str(business_id))
    role = await role_service.create(data, business_id)
    return RoleResponse.model_validate(role)


@router.get("/{business_id}/roles", response_model=list[RoleWithEmployeeCount])
async def list_roles(
    business_id: UUID,
    role_service: RoleService = Depends(get_role_service),
):
    """List roles of a business with employee counts."""
    set_context_business(str(business_id))
    return await role_service.find_all_by_business(business_id)


@router.post("/{business_id}/roles/defaults", status_code=status.HTTP_204_NO_CONTENT)
async def create_default_roles(
    business_id: UUID,
    role_service: RoleService = Depends(get_role_service),
):
    """Provision the default roles of a business."""
    set_context_business(str(business_id))
    await role_service.create_default_roles(business_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{business_id}/roles/{role_id}", response_model=RoleDetail)
async def get_role(
    business_id: UUID,
    role_id: UUID,
    role_service: RoleService = Depends(get_role_service),
):
    """Get a role with its modules."""
    set_context_business(str(business_id))
    return await role_service.find_one(role_id, business_id)


@router.patch("/{business_id}/roles/{role_id}", response_model=RoleResponse)
async def update_role(
    business_id: UUID,
    role_id: UUID,
    data: RoleUpdate,
    role_service: RoleService = Depends(get_role_service),
):
    """Update a role."""
    set_context_business(str(business_id))
    role = await role_service.update(role_id, data, business_id)
    return RoleResponse.model_validate(role)


@router.delete("/{business_id}/roles/{role_id}", response_model=MessageResponse)
async def delete_role(
    business_id: UUID,
    role_id: UUID,
    role_service: RoleService = Depends(get_role_service),
):
    """Delete a role that has no employees."""
    set_context_business(str(business_id))
    return await role_service.remove(role_id, business_id)


@router.put(
    "/{business_id}/employees/{employee_id}/role",
    response_model=EmployeeWithAssignedRole,
)
async def assign_role(
    business_id: UUID,
    employee_id: UUID,
    data: AssignRoleRequest,
    role_service: RoleService = Depends(get_role_service),
):
    """Assign a role to an employee."""
    set_context_business(str(business_id))
    return await role_service.assign_role_to_employee(employee_id, data.role_id, business_id)
