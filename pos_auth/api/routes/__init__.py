"""
API routes aggregation.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .modules import router as modules_router
from .roles import router as roles_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(roles_router, prefix="/businesses", tags=["roles"])
router.include_router(modules_router, prefix="/modules", tags=["modules"])
