"""
Module catalog service.
"""

import structlog

from pos_auth.core.exceptions import service_boundary
from pos_auth.core.interfaces.store import ModuleStore
from pos_auth.models.module import Module
from pos_auth.schemas.module import SeedResult

logger = structlog.get_logger()


# Fixed catalog; ``order`` drives display order and the positional
# carve-up of default role permissions.
DEFAULT_MODULES = [
    {
        "name": "POS",
        "display_name": "Punto de Venta",
        "description": "Módulo de punto de venta para cajeros",
        "icon": "shopping-cart",
        "order": 1,
    },
    {
        "name": "ORDERS",
        "display_name": "Órdenes",
        "description": "Gestión de órdenes y pedidos",
        "icon": "receipt",
        "order": 2,
    },
    {
        "name": "KITCHEN",
        "display_name": "Cocina",
        "description": "Vista de cocina para preparar pedidos",
        "icon": "restaurant",
        "order": 3,
    },
    {
        "name": "PRODUCTS",
        "display_name": "Productos",
        "description": "Administración de productos",
        "icon": "inventory",
        "order": 4,
    },
    {
        "name": "CATEGORIES",
        "display_name": "Categorías",
        "description": "Administración de categorías",
        "icon": "category",
        "order": 5,
    },
    {
        "name": "EMPLOYEES",
        "display_name": "Empleados",
        "description": "Gestión de empleados",
        "icon": "people",
        "order": 6,
    },
    {
        "name": "ROLES",
        "display_name": "Roles y Permisos",
        "description": "Gestión de roles y permisos",
        "icon": "shield",
        "order": 7,
    },
    {
        "name": "CUSTOMIZATION",
        "display_name": "Personalización",
        "description": "Personalización de la interfaz",
        "icon": "palette",
        "order": 8,
    },
    {
        "name": "REPORTS",
        "display_name": "Reportes",
        "description": "Reportes",
        "icon": "analytics",
        "order": 9,
    },
]

SEED_INITIALIZED = "initialized"
SEED_ALREADY_INITIALIZED = "already initialized"


class ModuleService:
    """Feature module catalog."""

    def __init__(self, modules: ModuleStore):
        self.modules = modules

    @service_boundary("Error fetching modules")
    async def list_active(self) -> list[Module]:
        """Active modules, ascending by ``order``. Also the permission universe."""
        return await self.modules.list_active()

    @service_boundary("Error seeding modules")
    async def seed(self) -> SeedResult:
        """Insert the default catalog once; later calls are no-ops."""
        existing = await self.modules.count()
        if existing > 0:
            return SeedResult(message=SEED_ALREADY_INITIALIZED, count=existing)

        await self.modules.create_many(
            [{**module, "is_active": True} for module in DEFAULT_MODULES]
        )
        count = await self.modules.count()
        logger.info("modules_seeded", count=count)

        return SeedResult(message=SEED_INITIALIZED, count=count)
