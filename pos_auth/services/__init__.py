"""Business logic services."""

from pos_auth.services.auth import AuthService
from pos_auth.services.modules import ModuleService
from pos_auth.services.roles import RoleService

__all__ = ["AuthService", "ModuleService", "RoleService"]
