"""
Repository pattern for data access.
"""

from pos_auth.core.interfaces.store import ConstraintViolationError
from pos_auth.repositories.base import BaseRepository
from pos_auth.repositories.business import BusinessRepository
from pos_auth.repositories.employee import EmployeeRepository
from pos_auth.repositories.module import ModuleRepository
from pos_auth.repositories.role import RoleRepository

__all__ = [
    "BaseRepository",
    "ConstraintViolationError",
    "BusinessRepository",
    "EmployeeRepository",
    "ModuleRepository",
    "RoleRepository",
]
