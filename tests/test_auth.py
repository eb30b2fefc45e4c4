"""
Tests for the authentication service.
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_auth.core.exceptions import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from pos_auth.core.security import TokenCodec
from pos_auth.models.business import Administrator, Location
from pos_auth.schemas.auth import LoginRequest, UserKind
from pos_auth.schemas.role import RoleUpdate
from pos_auth.services.auth import AuthService
from pos_auth.services.roles import RoleService

from conftest import ADMIN_PASSWORD, EMPLOYEE_PASSWORD, access_ids


async def row_count(db: AsyncSession, model) -> int:
    return await db.scalar(select(func.count()).select_from(model))


async def role_named(role_service: RoleService, business_id, name):
    roles = await role_service.find_all_by_business(business_id)
    return next(role for role in roles if role.name == name)


# ============ Business registration ============


@pytest.mark.asyncio
async def test_register_business(
    auth_service: AuthService,
    token_codec: TokenCodec,
    modules,
    make_business_request,
):
    """Test registration returns an administrator identity with every module."""
    result = await auth_service.register_business(make_business_request())

    assert result.user.role == UserKind.ADMIN
    assert result.user.role_id is None
    assert result.user.role_name is None
    assert access_ids(result.user) == [str(m.id) for m in modules]

    claims = token_codec.verify(result.token)
    assert claims["id"] == str(result.user.id)
    assert claims["businessId"] == str(result.user.business_id)
    assert claims["role"] == "admin"
    assert "roleId" not in claims


@pytest.mark.asyncio
async def test_register_business_stores_relations(
    db: AsyncSession,
    auth_service: AuthService,
    modules,
    make_business_request,
):
    """Test registration stores exactly one administrator and one location."""
    admins_before = await row_count(db, Administrator)
    locations_before = await row_count(db, Location)
    request = make_business_request()
    result = await auth_service.register_business(request)

    assert await row_count(db, Administrator) == admins_before + 1
    assert await row_count(db, Location) == locations_before + 1

    business = await auth_service.get_business_by_id(result.user.business_id)

    assert business.name == request.business_name
    assert business.administrator.id == result.user.id
    assert business.administrator.email == request.admin_email
    assert business.administrator.password_hash != ADMIN_PASSWORD
    assert business.location.city == request.location_city


@pytest.mark.asyncio
async def test_register_business_duplicate_email(
    auth_service: AuthService,
    business,
    make_business_request,
):
    """Test an administrator email can only be registered once."""
    business_record = await auth_service.get_business_by_id(business.user.business_id)
    request = make_business_request(admin_email=business_record.administrator.email)

    with pytest.raises(InvalidArgumentError) as exc_info:
        await auth_service.register_business(request)

    assert exc_info.value.message == "Email already registered"


@pytest.mark.asyncio
async def test_register_business_employee_email_taken(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
    make_business_request,
):
    """Test an employee's email cannot be reused for an administrator."""
    role = await role_named(role_service, business.user.business_id, "Cajero")
    await employee_factory.create(business.user.business_id, role.id, email="caja@example.com")

    with pytest.raises(InvalidArgumentError):
        await auth_service.register_business(
            make_business_request(admin_email="caja@example.com")
        )


@pytest.mark.asyncio
async def test_register_business_store_failure(
    auth_service: AuthService,
    monkeypatch,
    make_business_request,
):
    """Test unexpected store failures are reported as bad input."""

    async def failing(**kwargs):
        raise RuntimeError("insert rejected")

    monkeypatch.setattr(auth_service.businesses, "create_with_relations", failing)

    with pytest.raises(InvalidArgumentError) as exc_info:
        await auth_service.register_business(make_business_request())

    assert exc_info.value.message == "insert rejected"


@pytest.mark.asyncio
async def test_register_business_default_roles_failure(
    auth_service: AuthService,
    role_service: RoleService,
    modules,
    monkeypatch,
    make_business_request,
):
    """Test a failure provisioning default roles does not undo the registration."""

    async def failing(items):
        raise RuntimeError("roles table locked")

    monkeypatch.setattr(role_service.roles, "create_many", failing)

    result = await auth_service.register_business(make_business_request())

    business = await auth_service.get_business_by_id(result.user.business_id)
    assert business.id == result.user.business_id
    assert await role_service.find_all_by_business(business.id) == []
    assert access_ids(result.user) == [str(m.id) for m in modules]


def test_register_business_weak_password(make_business_request):
    """Test administrator passwords must mix character classes."""
    with pytest.raises(ValueError):
        make_business_request(admin_password="alllowercase1")


# ============ Employee registration ============


@pytest.mark.asyncio
async def test_register_employee(
    role_service: RoleService,
    employee_factory,
    business,
    modules,
):
    """Test employees get their role's permissions in the token."""
    role = await role_named(role_service, business.user.business_id, "Cajero")

    result = await employee_factory.create(business.user.business_id, role.id)

    assert result.user.role == UserKind.EMPLOYEE
    assert result.user.business_id == business.user.business_id
    assert result.user.role_id == role.id
    assert result.user.role_name == "Cajero"
    assert access_ids(result.user) == [str(modules[0].id), str(modules[3].id)]


@pytest.mark.asyncio
async def test_register_employee_role_of_other_business(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
    other_business,
):
    """Test employees can only get roles of their own business."""
    foreign = await role_named(role_service, other_business.user.business_id, "Cajero")

    with pytest.raises(InvalidArgumentError) as exc_info:
        await employee_factory.create(business.user.business_id, foreign.id)

    assert exc_info.value.message == (
        "The role is not valid or does not belong to this business"
    )
    assert await auth_service.get_employees_by_business_id(business.user.business_id) == []


@pytest.mark.asyncio
async def test_register_employee_unknown_role(employee_factory, business):
    """Test a role ID that does not exist is rejected."""
    with pytest.raises(InvalidArgumentError):
        await employee_factory.create(business.user.business_id, uuid4())


@pytest.mark.asyncio
async def test_register_employee_duplicate_email(
    role_service: RoleService,
    employee_factory,
    business,
    other_business,
):
    """Test employee emails are unique across businesses."""
    role = await role_named(role_service, business.user.business_id, "Cajero")
    other_role = await role_named(role_service, other_business.user.business_id, "Cajero")
    await employee_factory.create(business.user.business_id, role.id, email="dup@example.com")

    with pytest.raises(InvalidArgumentError) as exc_info:
        await employee_factory.create(
            other_business.user.business_id,
            other_role.id,
            email="dup@example.com",
        )

    assert exc_info.value.message == "Email already registered"


@pytest.mark.asyncio
async def test_register_employee_email_race(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
    monkeypatch,
):
    """Test the unique email constraint catches a registration that passed the check."""
    business_id = business.user.business_id
    role = await role_named(role_service, business_id, "Cajero")
    first = await employee_factory.create(business_id, role.id, email="race@example.com")

    async def email_free(email):
        return False

    monkeypatch.setattr(auth_service, "_email_in_use", email_free)

    with pytest.raises(InvalidArgumentError) as exc_info:
        await employee_factory.create(business_id, role.id, email="race@example.com")

    assert exc_info.value.message == "Email already registered"
    employees = await auth_service.get_employees_by_business_id(business_id)
    assert [e.id for e in employees] == [first.user.id]


# ============ Login ============


@pytest.mark.asyncio
async def test_login_admin(auth_service: AuthService, business, modules):
    """Test administrators log in with access to every active module."""
    record = await auth_service.get_business_by_id(business.user.business_id)

    result = await auth_service.login(
        LoginRequest(email=record.administrator.email, password=ADMIN_PASSWORD)
    )

    assert result.user.id == business.user.id
    assert result.user.role == UserKind.ADMIN
    assert access_ids(result.user) == [str(m.id) for m in modules]


@pytest.mark.asyncio
async def test_login_admin_sees_catalog_changes(
    db: AsyncSession,
    auth_service: AuthService,
    business,
    modules,
):
    """Test administrator access follows the active catalog."""
    record = await auth_service.get_business_by_id(business.user.business_id)
    modules[0].is_active = False
    await db.flush()

    result = await auth_service.login(
        LoginRequest(email=record.administrator.email, password=ADMIN_PASSWORD)
    )

    assert str(modules[0].id) not in access_ids(result.user)
    assert len(access_ids(result.user)) == 8


@pytest.mark.asyncio
async def test_login_employee(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
    modules,
):
    """Test employees log in with their role's permissions."""
    role = await role_named(role_service, business.user.business_id, "Mesero")
    registered = await employee_factory.create(
        business.user.business_id, role.id, email="mesero@example.com"
    )

    result = await auth_service.login(
        LoginRequest(email="mesero@example.com", password=EMPLOYEE_PASSWORD)
    )

    assert result.user.id == registered.user.id
    assert result.user.role == UserKind.EMPLOYEE
    assert result.user.role_name == "Mesero"
    assert access_ids(result.user) == [str(modules[3].id), str(modules[4].id)]


@pytest.mark.asyncio
async def test_login_reflects_permission_changes(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
    modules,
):
    """Test a permission change shows up on the next login."""
    business_id = business.user.business_id
    role = await role_named(role_service, business_id, "Cocinero")
    await employee_factory.create(business_id, role.id, email="cocina@example.com")

    await role_service.update(
        role.id,
        RoleUpdate(permissions=[modules[2].id, modules[3].id]),
        business_id,
    )
    result = await auth_service.login(
        LoginRequest(email="cocina@example.com", password=EMPLOYEE_PASSWORD)
    )

    assert access_ids(result.user) == [str(modules[2].id), str(modules[3].id)]


@pytest.mark.asyncio
async def test_login_wrong_password(auth_service: AuthService, business):
    """Test a wrong administrator password is rejected."""
    record = await auth_service.get_business_by_id(business.user.business_id)

    with pytest.raises(InvalidArgumentError) as exc_info:
        await auth_service.login(
            LoginRequest(email=record.administrator.email, password="Wr0ng!Password")
        )

    assert exc_info.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_employee_wrong_password(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
):
    """Test a wrong employee password gets the same message."""
    role = await role_named(role_service, business.user.business_id, "Cajero")
    await employee_factory.create(business.user.business_id, role.id, email="c@example.com")

    with pytest.raises(InvalidArgumentError) as exc_info:
        await auth_service.login(LoginRequest(email="c@example.com", password="nope"))

    assert exc_info.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(auth_service: AuthService, modules):
    """Test unknown emails get the same message as wrong passwords."""
    with pytest.raises(InvalidArgumentError) as exc_info:
        await auth_service.login(
            LoginRequest(email="nobody@example.com", password=EMPLOYEE_PASSWORD)
        )

    assert exc_info.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_dangling_role(
    db: AsyncSession,
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
):
    """Test an employee whose role is gone cannot log in."""
    role = await role_named(role_service, business.user.business_id, "Cajero")
    registered = await employee_factory.create(
        business.user.business_id, role.id, email="huerfano@example.com"
    )
    employee = await auth_service.employees.get_by_email("huerfano@example.com")
    employee.role_id = uuid4()
    await db.flush()

    with pytest.raises(InternalError) as exc_info:
        await auth_service.login(
            LoginRequest(email="huerfano@example.com", password=EMPLOYEE_PASSWORD)
        )

    assert exc_info.value.message == "Role not found for this employee"

    listed = await auth_service.get_employees_by_business_id(business.user.business_id)
    assert [e.id for e in listed] == [registered.user.id]
    assert listed[0].role is None


# ============ Token verification ============


@pytest.mark.asyncio
async def test_verify_token_reissues(auth_service: AuthService, business):
    """Test verifying returns the same identity with a new token each time."""
    first = await auth_service.verify_token(business.token)
    second = await auth_service.verify_token(business.token)

    assert first.user == business.user
    assert second.user == business.user
    assert len({business.token, first.token, second.token}) == 3


@pytest.mark.asyncio
async def test_verify_token_employee(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
):
    """Test employee role fields survive a verify round."""
    role = await role_named(role_service, business.user.business_id, "Gerente")
    registered = await employee_factory.create(business.user.business_id, role.id)

    result = await auth_service.verify_token(registered.token)

    assert result.user.role_id == role.id
    assert result.user.role_name == "Gerente"
    assert result.user.module_access_id == registered.user.module_access_id


@pytest.mark.asyncio
async def test_verify_token_expired(auth_service: AuthService, business):
    """Test expired tokens are rejected."""
    expired = TokenCodec(secret_key="test-secret-key", expire_minutes=-1)
    token = expired.sign(business.user.to_claims())

    with pytest.raises(UnauthenticatedError) as exc_info:
        await auth_service.verify_token(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid token"


@pytest.mark.asyncio
async def test_verify_token_wrong_signature(auth_service: AuthService, business):
    """Test tokens signed with another key are rejected."""
    forged = TokenCodec(secret_key="someone-else").sign(business.user.to_claims())

    with pytest.raises(UnauthenticatedError):
        await auth_service.verify_token(forged)


@pytest.mark.asyncio
async def test_verify_token_garbage(auth_service: AuthService):
    """Test malformed tokens are rejected."""
    with pytest.raises(UnauthenticatedError):
        await auth_service.verify_token("not-a-token")


@pytest.mark.asyncio
async def test_verify_token_missing_identity(auth_service: AuthService, token_codec):
    """Test validly signed tokens without identity claims are rejected."""
    token = token_codec.sign({"scope": "something-else"})

    with pytest.raises(UnauthenticatedError):
        await auth_service.verify_token(token)


# ============ Business lookups ============


@pytest.mark.asyncio
async def test_get_business_not_found(auth_service: AuthService, modules):
    """Test unknown business IDs."""
    with pytest.raises(NotFoundError) as exc_info:
        await auth_service.get_business_by_id(uuid4())

    assert exc_info.value.message == "Business not found"


@pytest.mark.asyncio
async def test_get_employees_by_business(
    auth_service: AuthService,
    role_service: RoleService,
    employee_factory,
    business,
    other_business,
):
    """Test employee listings carry role summaries and stay within the business."""
    business_id = business.user.business_id
    cajero = await role_named(role_service, business_id, "Cajero")
    mesero = await role_named(role_service, business_id, "Mesero")
    foreign = await role_named(role_service, other_business.user.business_id, "Cajero")
    await employee_factory.create(business_id, cajero.id, email="uno@example.com")
    await employee_factory.create(business_id, mesero.id, email="dos@example.com")
    await employee_factory.create(other_business.user.business_id, foreign.id)

    employees = await auth_service.get_employees_by_business_id(business_id)

    assert [(e.email, e.role.name) for e in employees] == [
        ("uno@example.com", "Cajero"),
        ("dos@example.com", "Mesero"),
    ]
    assert all(e.business_id == business_id for e in employees)
