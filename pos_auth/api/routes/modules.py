"""
Module catalog routes.
"""

from fastapi import APIRouter, Depends

from pos_auth.schemas.module import ModuleResponse, SeedResult
from pos_auth.services.modules import ModuleService
from pos_auth.api.dependencies.services import get_module_service

router = APIRouter()


@router.get("", response_model=list[ModuleResponse])
async def list_modules(module_service: ModuleService = Depends(get_module_service)):
    """List active modules in display order."""
    modules = await module_service.list_active()
    return [ModuleResponse.model_validate(m) for m in modules]


@router.post("/seed", response_model=SeedResult)
async def seed_modules(module_service: ModuleService = Depends(get_module_service)):
    """Seed the module catalog (no-op once initialized)."""
    return await module_service.seed()
