"""
Database models.
"""

from .base import (
    Base,
    TimestampMixin,
    UUIDMixin,
    TenantMixin,
    StandardMixin,
)
from .business import Administrator, Business, IdentificationType, Location
from .employee import Employee
from .module import Module
from .role import Role

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "TenantMixin",
    "StandardMixin",
    # Models
    "Administrator",
    "Business",
    "IdentificationType",
    "Location",
    "Employee",
    "Module",
    "Role",
]
