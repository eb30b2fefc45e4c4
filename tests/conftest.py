"""
Pytest fixtures for testing.

Provides:
- Async database session on in-memory SQLite
- Test client with database override
- Services wired to repositories over the test session
- Factory fixtures for businesses and employees
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FORMAT", "text")

from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from pos_auth.main import app
from pos_auth.models.base import Base
from pos_auth.models.module import Module
from pos_auth.api.dependencies.database import get_db
from pos_auth.core.security import TokenCodec
from pos_auth.repositories import (
    BusinessRepository,
    EmployeeRepository,
    ModuleRepository,
    RoleRepository,
)
from pos_auth.schemas.auth import (
    AuthResponse,
    RegisterBusinessRequest,
    RegisterEmployeeRequest,
)
from pos_auth.services.auth import AuthService
from pos_auth.services.modules import ModuleService
from pos_auth.services.roles import RoleService


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "Str0ng!Passw0rd"
EMPLOYEE_PASSWORD = "secret123"


def access_ids(identity) -> list[str]:
    """Module IDs granted by an identity payload."""
    return [m for m in identity.module_access_id.split(",") if m]


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy own BEGIN so SAVEPOINTs behave under pysqlite
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create database session with automatic rollback.

    Each test gets a fresh transaction that's rolled back after.
    """
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Services ============


@pytest.fixture
def token_codec() -> TokenCodec:
    return TokenCodec(secret_key="test-secret-key", expire_minutes=5)


@pytest.fixture
def module_service(db: AsyncSession) -> ModuleService:
    return ModuleService(ModuleRepository(db))


@pytest.fixture
def role_service(db: AsyncSession) -> RoleService:
    return RoleService(
        roles=RoleRepository(db),
        employees=EmployeeRepository(db),
        modules=ModuleRepository(db),
    )


@pytest.fixture
def auth_service(
    db: AsyncSession,
    role_service: RoleService,
    token_codec: TokenCodec,
) -> AuthService:
    return AuthService(
        businesses=BusinessRepository(db),
        employees=EmployeeRepository(db),
        roles=RoleRepository(db),
        modules=ModuleRepository(db),
        role_service=role_service,
        token_codec=token_codec,
    )


@pytest_asyncio.fixture
async def modules(module_service: ModuleService) -> list[Module]:
    """Seeded catalog, in display order."""
    await module_service.seed()
    return await module_service.list_active()


# ============ Factory Fixtures ============


def business_request(**overrides) -> RegisterBusinessRequest:
    """Build a valid business registration with unique emails."""
    suffix = uuid4().hex[:8]
    data = {
        "business_name": f"Restaurante {suffix}",
        "business_email": f"business-{suffix}@example.com",
        "business_phone": "+57 300 000 0000",
        "admin_full_name": "Ana Gómez",
        "admin_email": f"admin-{suffix}@example.com",
        "admin_phone": "+57 300 000 0001",
        "admin_identification_number": "1020304050",
        "admin_identification_type": "CC",
        "admin_password": ADMIN_PASSWORD,
        "location_state": "Antioquia",
        "location_city": "Medellín",
        "location_postal_code": "050001",
        "location_address": "Calle 10 # 43-12",
    }
    data.update(overrides)
    return RegisterBusinessRequest(**data)


class EmployeeFactory:
    """Factory for registering test employees."""

    def __init__(self, auth_service: AuthService):
        self.auth_service = auth_service

    async def create(
        self,
        business_id: UUID,
        role_id: UUID,
        email: str | None = None,
        password: str = EMPLOYEE_PASSWORD,
    ) -> AuthResponse:
        email = email or f"employee-{uuid4().hex[:8]}@example.com"
        return await self.auth_service.register_employee(
            RegisterEmployeeRequest(
                identification_number="99887766",
                full_name="Carlos Pérez",
                email=email,
                password=password,
                role_id=role_id,
                business_id=business_id,
            )
        )


@pytest.fixture
def employee_factory(auth_service: AuthService) -> EmployeeFactory:
    return EmployeeFactory(auth_service)


@pytest_asyncio.fixture
async def business(auth_service: AuthService, modules: list[Module]) -> AuthResponse:
    """A registered business (admin identity + token) with default roles."""
    return await auth_service.register_business(business_request())


@pytest_asyncio.fixture
async def other_business(auth_service: AuthService, modules: list[Module]) -> AuthResponse:
    """A second tenant."""
    return await auth_service.register_business(business_request())


@pytest.fixture
def make_business_request():
    """Builder for business registration requests."""
    return business_request
