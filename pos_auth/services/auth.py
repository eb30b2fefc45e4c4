"""
Authentication service.

Registers businesses and employees, checks credentials and issues identity
tokens. Permissions in a token are recomputed from the store every time
one is issued: administrators get every active module, employees get
their role's permissions.
"""

from uuid import UUID

import structlog

from pos_auth.core.exceptions import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
    service_boundary,
)
from pos_auth.core.interfaces.store import (
    BusinessStore,
    ConstraintViolationError,
    EmployeeStore,
    ModuleStore,
    RoleStore,
)
from pos_auth.core.security import (
    TokenCodec,
    TokenError,
    dummy_verify,
    hash_password,
    verify_password,
)
from pos_auth.models.business import Business
from pos_auth.schemas.auth import (
    AuthResponse,
    IdentityPayload,
    LoginRequest,
    RegisterBusinessRequest,
    RegisterEmployeeRequest,
    UserKind,
)
from pos_auth.schemas.employee import EmployeeResponse, EmployeeWithRole
from pos_auth.schemas.role import RoleSummary
from pos_auth.services.roles import RoleService

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid credentials"
EMAIL_TAKEN = "Email already registered"


class AuthService:
    """Authentication service."""

    def __init__(
        self,
        businesses: BusinessStore,
        employees: EmployeeStore,
        roles: RoleStore,
        modules: ModuleStore,
        role_service: RoleService,
        token_codec: TokenCodec,
    ):
        self.businesses = businesses
        self.employees = employees
        self.roles = roles
        self.modules = modules
        self.role_service = role_service
        self.token_codec = token_codec

    def _issue(self, identity: IdentityPayload) -> AuthResponse:
        """Sign an identity payload."""
        return AuthResponse(
            user=identity,
            token=self.token_codec.sign(identity.to_claims()),
        )

    async def _all_module_access(self) -> str:
        """Administrator access: every active module, in catalog order."""
        modules = await self.modules.list_active()
        return ",".join(str(module.id) for module in modules)

    async def _email_in_use(self, email: str) -> bool:
        """Login looks up administrators and employees by email, so both must be free."""
        if await self.businesses.get_admin_by_email(email):
            return True
        return await self.employees.get_by_email(email) is not None

    async def register_business(self, data: RegisterBusinessRequest) -> AuthResponse:
        """
        Register a business with its administrator and location.

        Default roles are provisioned afterwards on a best-effort basis: if
        that step fails it is logged and the business still exists.
        """
        try:
            if await self._email_in_use(data.admin_email):
                raise InvalidArgumentError(EMAIL_TAKEN)

            business = await self.businesses.create_with_relations(
                business={
                    "name": data.business_name,
                    "email": data.business_email,
                    "phone_number": data.business_phone,
                },
                administrator={
                    "identification_number": data.admin_identification_number,
                    "identification_type": data.admin_identification_type,
                    "full_name": data.admin_full_name,
                    "email": data.admin_email,
                    "phone_number": data.admin_phone,
                    "password_hash": hash_password(data.admin_password),
                },
                location={
                    "state": data.location_state,
                    "city": data.location_city,
                    "postal_code": data.location_postal_code,
                    "address": data.location_address,
                },
            )
        except ServiceError:
            raise
        except Exception as exc:
            logger.error("business_registration_failed", error=str(exc))
            raise InvalidArgumentError(str(exc)) from exc

        try:
            async with self.businesses.savepoint():
                await self.role_service.create_default_roles(business.id)
        except ServiceError as exc:
            logger.warning(
                "default_roles_skipped",
                business_id=str(business.id),
                error=exc.message,
            )

        identity = IdentityPayload(
            id=business.administrator.id,
            business_id=business.id,
            role=UserKind.ADMIN,
            module_access_id=await self._all_module_access(),
        )
        logger.info("business_registered", business_id=str(business.id))
        return self._issue(identity)

    @service_boundary("Error registering employee")
    async def register_employee(self, data: RegisterEmployeeRequest) -> AuthResponse:
        """Register an employee under a role of the same business."""
        role = await self.roles.get_for_business(data.role_id, data.business_id)
        if not role:
            raise InvalidArgumentError(
                "The role is not valid or does not belong to this business"
            )

        if await self._email_in_use(data.email):
            raise InvalidArgumentError(EMAIL_TAKEN)

        try:
            employee = await self.employees.create(
                identification_number=data.identification_number,
                full_name=data.full_name,
                email=data.email,
                password_hash=hash_password(data.password),
                role_id=role.id,
                business_id=data.business_id,
            )
        except ConstraintViolationError as exc:
            raise InvalidArgumentError(EMAIL_TAKEN) from exc

        identity = IdentityPayload(
            id=employee.id,
            business_id=employee.business_id,
            role=UserKind.EMPLOYEE,
            role_id=role.id,
            role_name=role.name,
            module_access_id=",".join(role.permissions),
        )
        logger.info(
            "employee_registered",
            employee_id=str(employee.id),
            business_id=str(employee.business_id),
        )
        return self._issue(identity)

    @service_boundary("Error during login")
    async def login(self, data: LoginRequest) -> AuthResponse:
        """
        Authenticate by email and password.

        Administrators are checked first, then employees. Every credential
        failure yields the same message so callers cannot tell which part
        was wrong. A missing employee role is a data-integrity error.
        """
        admin = await self.businesses.get_admin_by_email(data.email)
        if admin:
            if not verify_password(data.password, admin.password_hash):
                logger.info("login_failed", reason="password", kind=UserKind.ADMIN.value)
                raise InvalidArgumentError(INVALID_CREDENTIALS)

            if not admin.business:
                logger.warning("login_failed", reason="no_business", admin_id=str(admin.id))
                raise InvalidArgumentError(INVALID_CREDENTIALS)

            identity = IdentityPayload(
                id=admin.id,
                business_id=admin.business.id,
                role=UserKind.ADMIN,
                module_access_id=await self._all_module_access(),
            )
            return self._issue(identity)

        employee = await self.employees.get_by_email(data.email)
        if not employee:
            dummy_verify()
            logger.info("login_failed", reason="unknown_email")
            raise InvalidArgumentError(INVALID_CREDENTIALS)

        if not verify_password(data.password, employee.password_hash):
            logger.info("login_failed", reason="password", kind=UserKind.EMPLOYEE.value)
            raise InvalidArgumentError(INVALID_CREDENTIALS)

        role = await self.roles.get_for_business(employee.role_id, employee.business_id)
        if not role:
            logger.error(
                "employee_role_missing",
                employee_id=str(employee.id),
                role_id=str(employee.role_id),
            )
            raise InternalError("Role not found for this employee")

        identity = IdentityPayload(
            id=employee.id,
            business_id=employee.business_id,
            role=UserKind.EMPLOYEE,
            role_id=role.id,
            role_name=role.name,
            module_access_id=",".join(role.permissions),
        )
        return self._issue(identity)

    async def verify_token(self, token: str) -> AuthResponse:
        """
        Validate a token and reissue it with a fresh expiry.

        The identity is re-signed as presented; permission changes take
        effect at the next login, not the next verify.
        """
        try:
            claims = self.token_codec.verify(token)
            identity = IdentityPayload.model_validate(
                self.token_codec.strip_registered_claims(claims)
            )
        except (TokenError, ValueError) as exc:
            logger.info("token_verification_failed", error=str(exc))
            raise UnauthenticatedError("Invalid token") from exc

        return self._issue(identity)

    @service_boundary("Error fetching business")
    async def get_business_by_id(self, business_id: UUID) -> Business:
        """Business with its administrator and location."""
        business = await self.businesses.get_with_relations(business_id)
        if not business:
            raise NotFoundError("Business not found")
        return business

    @service_boundary("Error fetching employees")
    async def get_employees_by_business_id(self, business_id: UUID) -> list[EmployeeWithRole]:
        """Employees of a business, each with its role summary."""
        employees = await self.employees.list_for_business(business_id)

        result = []
        for employee in employees:
            role = await self.roles.get_for_business(employee.role_id, business_id)
            result.append(
                EmployeeWithRole(
                    **EmployeeResponse.model_validate(employee).model_dump(),
                    role=RoleSummary.model_validate(role) if role else None,
                )
            )
        return result
