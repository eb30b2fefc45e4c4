"""FastAPI dependencies."""

from .database import get_db
from .services import get_auth_service, get_module_service, get_role_service

__all__ = [
    "get_db",
    "get_auth_service",
    "get_module_service",
    "get_role_service",
]
