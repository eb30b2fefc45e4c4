"""
Role management service.

Every query is scoped by business ID. Name uniqueness, permission
validity and the deletion guards are checked before writing; the
``(business_id, name)`` unique constraint backs the name check when two
writers race past it.
"""

from typing import Sequence
from uuid import UUID

import structlog

from pos_auth.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    service_boundary,
)
from pos_auth.core.interfaces.store import (
    ConstraintViolationError,
    EmployeeStore,
    ModuleStore,
    RoleStore,
)
from pos_auth.models.role import Role
from pos_auth.schemas.common import MessageResponse
from pos_auth.schemas.employee import EmployeeResponse, EmployeeWithAssignedRole
from pos_auth.schemas.module import ModuleResponse
from pos_auth.schemas.role import (
    RoleCreate,
    RoleDetail,
    RoleResponse,
    RoleUpdate,
    RoleWithEmployeeCount,
)

logger = structlog.get_logger()


# Default roles provisioned for every new business. Permissions are
# picked by position in the active module listing (ordered by ``order``),
# so they follow the seeded catalog order.
DEFAULT_ROLES = [
    {
        "name": "Administrador",
        "description": "Acceso completo a todos los módulos del sistema",
        "is_system": True,
        "positions": None,  # all modules
    },
    {
        "name": "Gerente",
        "description": "Acceso a gestión de productos, categorías, órdenes y reportes",
        "is_system": False,
        "positions": {0, 1, 2, 3, 4},
    },
    {
        "name": "Cajero",
        "description": "Acceso al punto de venta y gestión de órdenes",
        "is_system": False,
        "positions": {0, 3},
    },
    {
        "name": "Cocinero",
        "description": "Acceso a la cocina para ver y gestionar pedidos",
        "is_system": False,
        "positions": {3},
    },
    {
        "name": "Mesero",
        "description": "Acceso para tomar pedidos y gestionar mesas",
        "is_system": False,
        "positions": {3, 4},
    },
]


def select_positions(module_ids: Sequence[str], positions: set[int] | None) -> list[str]:
    """Module IDs at the given positions; missing positions are skipped."""
    if positions is None:
        return list(module_ids)
    return [module_id for index, module_id in enumerate(module_ids) if index in positions]


def _duplicate_name(name: str) -> ConflictError:
    return ConflictError(f'A role named "{name}" already exists in this business')


class RoleService:
    """Role CRUD, permission validation and role assignment."""

    def __init__(
        self,
        roles: RoleStore,
        employees: EmployeeStore,
        modules: ModuleStore,
    ):
        self.roles = roles
        self.employees = employees
        self.modules = modules

    async def _validate_permissions(self, permissions: Sequence[UUID]) -> None:
        """Every requested ID must be a distinct, currently active module."""
        valid = await self.modules.count_active_by_ids(list(permissions))
        if valid != len(permissions):
            raise InvalidArgumentError("Some permissions are not valid")

    async def _with_employee_count(self, role: Role) -> RoleWithEmployeeCount:
        employee_count = await self.employees.count_with_role(role.id, role.business_id)
        return RoleWithEmployeeCount(
            **RoleResponse.model_validate(role).model_dump(),
            employee_count=employee_count,
        )

    @service_boundary("Error creating default roles")
    async def create_default_roles(self, business_id: UUID) -> list[Role]:
        """Provision the fixed default roles for a business."""
        active = await self.modules.list_active()
        module_ids = [str(module.id) for module in active]

        roles = await self.roles.create_many(
            [
                {
                    "name": template["name"],
                    "description": template["description"],
                    "is_default": True,
                    "is_system": template["is_system"],
                    "permissions": select_positions(module_ids, template["positions"]),
                    "business_id": business_id,
                }
                for template in DEFAULT_ROLES
            ]
        )

        logger.info("default_roles_created", business_id=str(business_id), count=len(roles))
        return roles

    @service_boundary("Error creating role")
    async def create(self, data: RoleCreate, business_id: UUID) -> Role:
        """Create a custom role."""
        if await self.roles.get_by_name(data.name, business_id):
            raise _duplicate_name(data.name)

        await self._validate_permissions(data.permissions)

        try:
            role = await self.roles.create(
                name=data.name,
                description=data.description,
                permissions=[str(p) for p in data.permissions],
                business_id=business_id,
                is_default=False,
                is_system=False,
            )
        except ConstraintViolationError as exc:
            # Lost a race with a concurrent create of the same name
            raise _duplicate_name(data.name) from exc

        logger.info("role_created", role_id=str(role.id), business_id=str(business_id))
        return role

    @service_boundary("Error fetching roles")
    async def find_all_by_business(self, business_id: UUID) -> list[RoleWithEmployeeCount]:
        """All roles of a business, defaults first, with employee counts."""
        roles = await self.roles.list_for_business(business_id)
        return [await self._with_employee_count(role) for role in roles]

    @service_boundary("Error fetching role")
    async def find_one(self, role_id: UUID, business_id: UUID) -> RoleDetail:
        """Role with resolved modules and employee count."""
        role = await self.roles.get_for_business(role_id, business_id)
        if not role:
            raise NotFoundError("Role not found")

        modules = await self.modules.get_by_ids([UUID(p) for p in role.permissions])
        base = await self._with_employee_count(role)

        return RoleDetail(
            **base.model_dump(),
            modules=[ModuleResponse.model_validate(m) for m in modules],
        )

    @service_boundary("Error updating role")
    async def update(self, role_id: UUID, data: RoleUpdate, business_id: UUID) -> Role:
        """Partial update: only fields present in ``data`` change."""
        role = await self.roles.get_for_business(role_id, business_id)
        if not role:
            raise NotFoundError("Role not found")

        changes = data.model_dump(exclude_unset=True)
        updates: dict = {}

        if data.name is not None and data.name != role.name:
            if await self.roles.get_by_name(data.name, business_id, exclude_id=role.id):
                raise _duplicate_name(data.name)
            updates["name"] = data.name

        if "description" in changes:
            updates["description"] = data.description

        if data.permissions is not None:
            await self._validate_permissions(data.permissions)
            updates["permissions"] = [str(p) for p in data.permissions]

        if not updates:
            return role

        try:
            role = await self.roles.update_entity(role, **updates)
        except ConstraintViolationError as exc:
            raise _duplicate_name(data.name or role.name) from exc

        logger.info("role_updated", role_id=str(role.id), fields=sorted(updates))
        return role

    @service_boundary("Error deleting role")
    async def remove(self, role_id: UUID, business_id: UUID) -> MessageResponse:
        """Delete a role nobody holds. System roles are never deleted."""
        role = await self.roles.get_for_business(role_id, business_id)
        if not role:
            raise NotFoundError("Role not found")

        if role.is_system:
            raise ForbiddenError("System roles cannot be deleted")

        assigned = await self.employees.count_with_role(role.id, business_id)
        if assigned > 0:
            raise InvalidArgumentError(
                f"Cannot delete the role because it has {assigned} employee(s) assigned"
            )

        await self.roles.delete_entity(role)
        logger.info("role_deleted", role_id=str(role_id), business_id=str(business_id))

        return MessageResponse(message="Role deleted successfully")

    @service_boundary("Error assigning role")
    async def assign_role_to_employee(
        self,
        employee_id: UUID,
        role_id: UUID,
        business_id: UUID,
    ) -> EmployeeWithAssignedRole:
        """Replace an employee's role with another role of the same business."""
        employee = await self.employees.get_for_business(employee_id, business_id)
        if not employee:
            raise NotFoundError("Employee not found")

        role = await self.roles.get_for_business(role_id, business_id)
        if not role:
            raise InvalidArgumentError(
                "The role is not valid or does not belong to this business"
            )

        employee = await self.employees.update_entity(employee, role_id=role.id)
        logger.info(
            "role_assigned",
            employee_id=str(employee.id),
            role_id=str(role.id),
            business_id=str(business_id),
        )

        return EmployeeWithAssignedRole(
            **EmployeeResponse.model_validate(employee).model_dump(),
            role=RoleResponse.model_validate(role),
        )
