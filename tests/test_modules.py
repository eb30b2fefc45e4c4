"""
Tests for the module catalog.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from pos_auth.core.exceptions import InternalError
from pos_auth.services.modules import DEFAULT_MODULES, ModuleService


class BrokenModuleStore:
    """Store whose every call fails like a lost database connection."""

    async def count(self, **filters):
        raise RuntimeError("connection reset")

    async def list_active(self):
        raise RuntimeError("connection reset")


@pytest.mark.asyncio
async def test_seed_inserts_catalog(module_service: ModuleService):
    """Test first seed inserts every default module."""
    result = await module_service.seed()

    assert result.message == "initialized"
    assert result.count == len(DEFAULT_MODULES) == 9


@pytest.mark.asyncio
async def test_seed_is_idempotent(module_service: ModuleService):
    """Test second seed changes nothing."""
    await module_service.seed()
    result = await module_service.seed()

    assert result.message == "already initialized"
    assert result.count == 9
    assert len(await module_service.list_active()) == 9


@pytest.mark.asyncio
async def test_list_active_ordered(module_service: ModuleService, modules):
    """Test active modules come back in display order."""
    orders = [m.order for m in modules]

    assert orders == sorted(orders)
    assert [m.name for m in modules][:5] == [
        "POS",
        "ORDERS",
        "KITCHEN",
        "PRODUCTS",
        "CATEGORIES",
    ]


@pytest.mark.asyncio
async def test_list_active_skips_inactive(
    db: AsyncSession,
    module_service: ModuleService,
    modules,
):
    """Test deactivated modules are not listed."""
    kitchen = next(m for m in modules if m.name == "KITCHEN")
    kitchen.is_active = False
    await db.flush()

    active = await module_service.list_active()

    assert kitchen.id not in {m.id for m in active}
    assert len(active) == 8


@pytest.mark.asyncio
async def test_list_active_empty_before_seed(module_service: ModuleService):
    """Test empty catalog lists nothing."""
    assert await module_service.list_active() == []


@pytest.mark.asyncio
async def test_store_failure_is_internal():
    """Test store failures surface as internal errors with a fixed message."""
    service = ModuleService(BrokenModuleStore())

    with pytest.raises(InternalError) as exc_info:
        await service.seed()
    assert exc_info.value.message == "Error seeding modules"
    assert exc_info.value.status_code == 500

    with pytest.raises(InternalError):
        await service.list_active()
