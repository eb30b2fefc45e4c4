"""
Authentication routes.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, status

from pos_auth.schemas.auth import (
    AuthResponse,
    BusinessResponse,
    LoginRequest,
    RegisterBusinessRequest,
    RegisterEmployeeRequest,
    VerifyTokenRequest,
)
from pos_auth.schemas.employee import EmployeeWithRole
from pos_auth.services.auth import AuthService
from pos_auth.api.dependencies.services import get_auth_service
from pos_auth.utils.context import set_context_business

router = APIRouter()


@router.post(
    "/register/business",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_business(
    data: RegisterBusinessRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a business with its administrator."""
    return await auth_service.register_business(data)


@router.post(
    "/register/employee",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_employee(
    data: RegisterEmployeeRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register an employee of a business."""
    set_context_business(str(data.business_id))
    return await auth_service.register_employee(data)


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email and password."""
    return await auth_service.login(data)


@router.post("/verify", response_model=AuthResponse, response_model_exclude_none=True)
async def verify_token(
    data: VerifyTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Verify a token and get a refreshed one."""
    return await auth_service.verify_token(data.token)


@router.get("/businesses/{business_id}", response_model=BusinessResponse)
async def get_business(
    business_id: UUID,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get a business with its administrator and location."""
    set_context_business(str(business_id))
    business = await auth_service.get_business_by_id(business_id)
    return BusinessResponse.model_validate(business)


@router.get("/businesses/{business_id}/employees", response_model=list[EmployeeWithRole])
async def list_employees(
    business_id: UUID,
    auth_service: AuthService = Depends(get_auth_service),
):
    """List employees of a business with their roles."""
    set_context_business(str(business_id))
    return await auth_service.get_employees_by_business_id(business_id)
