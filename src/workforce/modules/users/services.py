"""User service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.core.auth.backend import hash_password, verify_password
from workforce.core.auth.principal import Principal, Role
from workforce.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from workforce.core.permissions.models import SubRole
from workforce.core.policies import CompanyPolicy, EmployeePolicy, Operation
from workforce.core.responses import PageParams
from workforce.modules.companies.models import Company
from workforce.modules.users.models import User
from workforce.modules.users.repos import UserRepository
from workforce.modules.users.schemas import ProfileUpdate, UserCreate, UserUpdate


logger = structlog.get_logger()


class UserService:
    """Service for user management operations.

    Every operation authorizes through ``EmployeePolicy`` before touching
    the store.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = UserRepository(db)
        self.policy = EmployeePolicy(db)

    async def _get_assignable_sub_role(
        self, sub_role_id: int, company_id: int | None
    ) -> SubRole:
        """A sub-role must be global or belong to the user's company."""
        sub_role = await self.db.get(SubRole, sub_role_id)
        if sub_role is None or (
            sub_role.company_id is not None and sub_role.company_id != company_id
        ):
            raise NotFoundError(resource="sub_role")
        return sub_role

    async def create_user(self, principal: Principal, data: UserCreate) -> User:
        """Create a user in a company the principal administers.

        Raises:
            ForbiddenError: If the principal may not create this user
            BadRequestError: If a company is required but missing
            NotFoundError: If the company or sub-role does not exist
            ConflictError: If the email is already registered
        """
        company_id = data.company_id
        if not principal.is_global_admin:
            if data.role == Role.SUPER_ADMIN:
                raise ForbiddenError(reason="only super admins create super admins")
            if company_id is None:
                company_id = principal.tenant_id

        if data.role != Role.SUPER_ADMIN and company_id is None:
            raise BadRequestError(
                f"company_id is required for {data.role} users",
                error_code="company_required",
            )

        self.policy.can_create(principal, company_id)

        if company_id is not None and await self.db.get(Company, company_id) is None:
            raise NotFoundError(resource="company")

        if await self.repo.get_by_email(data.email):
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": data.email},
            )

        if data.sub_role_id is not None:
            await self._get_assignable_sub_role(data.sub_role_id, company_id)

        user = User(
            email=data.email,
            full_name=data.full_name,
            password_hash=hash_password(data.password),
            role=data.role,
            company_id=company_id,
            sub_role_id=data.sub_role_id,
            timezone=data.timezone,
        )
        return await self.repo.create(user)

    async def list_users(
        self, principal: Principal, params: PageParams
    ) -> tuple[list[User], int]:
        """List the users of every company the principal can see."""
        company_ids = CompanyPolicy.accessible_company_ids(principal)
        return await self.repo.list_by_companies(company_ids, params.skip, params.limit)

    async def get_user(self, principal: Principal, user_id: int) -> User:
        return await self.policy.ensure_access(principal, user_id)

    async def update_user(
        self, principal: Principal, user_id: int, data: UserUpdate
    ) -> User:
        """Update a user.

        Raises:
            ForbiddenError: If a non super admin changes role or company
            BadRequestError: If the result breaks the role/company rule
            ConflictError: If the new email already exists
        """
        user = await self.policy.can_update(principal, user_id)
        changes = data.model_dump(exclude_unset=True)

        if ("role" in changes or "company_id" in changes) and not principal.is_global_admin:
            raise ForbiddenError(reason="only super admins change role or company")

        if "email" in changes and changes["email"] != user.email:
            if await self.repo.get_by_email(changes["email"]):
                raise ConflictError(
                    "Email already in use",
                    error_code="email_exists",
                    details={"email": changes["email"]},
                )

        role = changes.get("role", user.role)
        company_id = changes.get("company_id", user.company_id)
        if role == Role.SUPER_ADMIN and company_id is not None:
            raise BadRequestError(
                "SUPER_ADMIN users cannot belong to a company",
                error_code="invalid_company",
            )
        if role != Role.SUPER_ADMIN and company_id is None:
            raise BadRequestError(
                f"company_id is required for {role} users",
                error_code="company_required",
            )
        if company_id is not None and await self.db.get(Company, company_id) is None:
            raise NotFoundError(resource="company")

        if company_id != user.company_id and user.sub_role_id is not None:
            sub_role = await self.db.get(SubRole, user.sub_role_id)
            if sub_role is not None and sub_role.company_id is not None:
                # A company sub-role never follows its user into another tenant
                logger.info(
                    "sub_role_cleared",
                    user_id=user.id,
                    sub_role_id=sub_role.id,
                    from_company_id=user.company_id,
                    to_company_id=company_id,
                )
                user.sub_role_id = None

        for field, value in changes.items():
            setattr(user, field, value)

        return await self.repo.update(user)

    async def delete_user(self, principal: Principal, user_id: int) -> None:
        user = await self.policy.can_delete(principal, user_id)
        if user.id == principal.id:
            raise BadRequestError(
                "Cannot delete your own account",
                error_code="self_delete",
            )
        await self.repo.delete(user)

    async def get_profile(self, principal: Principal) -> User:
        return await self.policy.ensure_access(principal, principal.self_id)

    async def update_profile(self, principal: Principal, data: ProfileUpdate) -> User:
        """Update the principal's own account.

        Raises:
            BadRequestError: If the current password is wrong
            ConflictError: If the new email already exists
        """
        user = await self.policy.can_edit_profile(principal)
        changes = data.model_dump(exclude_unset=True)
        current_password = changes.pop("current_password", None)
        new_password = changes.pop("new_password", None)

        if new_password is not None:
            if not verify_password(current_password or "", user.password_hash):
                raise BadRequestError(
                    "Current password is incorrect", error_code="invalid_password"
                )
            user.password_hash = hash_password(new_password)
            logger.info("password_changed", user_id=user.id)

        if "email" in changes and changes["email"] != user.email:
            if await self.repo.get_by_email(changes["email"]):
                raise ConflictError(
                    "Email already in use",
                    error_code="email_exists",
                    details={"email": changes["email"]},
                )

        for field, value in changes.items():
            setattr(user, field, value)
        return await self.repo.update(user)

    async def assign_sub_role(
        self, principal: Principal, user_id: int, sub_role_id: int | None
    ) -> User:
        """Assign a sub-role to a user, or clear it with None."""
        user = await self.policy.ensure_access(principal, user_id, Operation.UPDATE)
        if sub_role_id is not None:
            await self._get_assignable_sub_role(sub_role_id, user.company_id)
        user.sub_role_id = sub_role_id
        return await self.repo.update(user)


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
