"""
Authentication schemas.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID
from pydantic import EmailStr, Field, field_validator

from pos_auth.models.business import IdentificationType
from .common import APIModel


class UserKind(str, Enum):
    """Who a token was issued to."""
    ADMIN = "admin"
    EMPLOYEE = "employee"


class RegisterBusinessRequest(APIModel):
    """Business registration: business, administrator and location data."""

    # Business
    business_name: str = Field(min_length=1, max_length=255)
    business_email: EmailStr
    business_phone: str = Field(min_length=1, max_length=50)

    # Administrator
    admin_full_name: str = Field(min_length=1, max_length=255)
    admin_email: EmailStr
    admin_phone: str = Field(min_length=1, max_length=50)
    admin_identification_number: str = Field(min_length=1, max_length=50)
    admin_identification_type: IdentificationType
    admin_password: str = Field(min_length=8, max_length=72)

    # Location
    location_state: str = Field(min_length=1, max_length=100)
    location_city: str = Field(min_length=1, max_length=100)
    location_postal_code: str = Field(min_length=1, max_length=20)
    location_address: str = Field(min_length=1, max_length=255)

    @field_validator("admin_password")
    @classmethod
    def validate_strong_password(cls, v: str) -> str:
        checks = {
            "a lowercase letter": r"[a-z]",
            "an uppercase letter": r"[A-Z]",
            "a number": r"[0-9]",
            "a symbol": r"[^A-Za-z0-9]",
        }
        missing = [label for label, pattern in checks.items() if not re.search(pattern, v)]
        if missing:
            raise ValueError(f"password must contain {', '.join(missing)}")
        return v


class RegisterEmployeeRequest(APIModel):
    """Employee registration request."""
    identification_number: str = Field(min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    role_id: UUID
    business_id: UUID


class LoginRequest(APIModel):
    """Login request."""
    email: EmailStr
    password: str = Field(min_length=1)


class VerifyTokenRequest(APIModel):
    """Token verification request."""
    token: str = Field(min_length=1)


class IdentityPayload(APIModel):
    """
    Claims carried by an identity token.

    ``module_access_id`` is the comma-joined list of module IDs the user
    may access. Rebuilt from the store on every login, never persisted.
    """
    id: UUID
    business_id: UUID
    role: UserKind
    role_id: UUID | None = None
    role_name: str | None = None
    module_access_id: str

    def to_claims(self) -> dict[str, Any]:
        """Token claims (wire names, unset role fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AuthResponse(APIModel):
    """Identity plus signed token."""
    user: IdentityPayload
    token: str


class AdministratorResponse(APIModel):
    """Administrator without credentials."""
    id: UUID
    full_name: str
    email: str
    phone_number: str
    identification_type: IdentificationType
    identification_number: str


class LocationResponse(APIModel):
    id: UUID
    state: str
    city: str
    postal_code: str
    address: str


class BusinessResponse(APIModel):
    """Business with its administrator and location."""
    id: UUID
    name: str
    email: str
    phone_number: str
    created_at: datetime
    administrator: AdministratorResponse
    location: LocationResponse
