"""
Core interfaces (protocols).
Services are written against these so the store can be swapped.
"""

from .store import (
    BusinessStore,
    ConstraintViolationError,
    EmployeeStore,
    ModuleStore,
    RoleStore,
)

__all__ = [
    "BusinessStore",
    "ConstraintViolationError",
    "EmployeeStore",
    "ModuleStore",
    "RoleStore",
]
