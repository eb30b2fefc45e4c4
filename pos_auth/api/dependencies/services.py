"""
Service dependencies.

Each request gets services wired to repositories over the same session.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pos_auth.core.security import TokenCodec, get_token_codec
from pos_auth.repositories import (
    BusinessRepository,
    EmployeeRepository,
    ModuleRepository,
    RoleRepository,
)
from pos_auth.services.auth import AuthService
from pos_auth.services.modules import ModuleService
from pos_auth.services.roles import RoleService
from .database import get_db


async def get_module_service(db: AsyncSession = Depends(get_db)) -> ModuleService:
    """Get module catalog service instance."""
    return ModuleService(ModuleRepository(db))


async def get_role_service(db: AsyncSession = Depends(get_db)) -> RoleService:
    """Get role service instance."""
    return RoleService(
        roles=RoleRepository(db),
        employees=EmployeeRepository(db),
        modules=ModuleRepository(db),
    )


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    role_service: RoleService = Depends(get_role_service),
    token_codec: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    """Get auth service instance."""
    return AuthService(
        businesses=BusinessRepository(db),
        employees=EmployeeRepository(db),
        roles=RoleRepository(db),
        modules=ModuleRepository(db),
        role_service=role_service,
        token_codec=token_codec,
    )
