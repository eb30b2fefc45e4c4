"""
Module catalog schemas.
"""

from uuid import UUID

from .common import APIModel


class ModuleResponse(APIModel):
    """Catalog entry."""
    id: UUID
    name: str
    display_name: str
    description: str | None = None
    icon: str | None = None
    order: int
    is_active: bool


class SeedResult(APIModel):
    """Outcome of catalog seeding."""
    message: str
    count: int
