"""Seed data: permission catalogue, starter sub-roles and demo tenants.

Every step looks rows up before inserting, so seeding twice is harmless.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.auth.backend import hash_password
from workforce.core.auth.principal import Role
from workforce.core.permissions import DEFAULT_ROLE_PERMISSIONS, SubRole
from workforce.modules.companies.models import Company
from workforce.modules.sub_roles.repos import PermissionRepository, SubRoleRepository
from workforce.modules.sub_roles.services import PermissionService
from workforce.modules.users.models import User


logger = structlog.get_logger()

STARTER_SUB_ROLE_NAMES: dict[str, str] = {
    Role.SUPER_ADMIN: "Platform administrator",
    Role.COMPANY_ADMIN: "Company administrator",
    Role.EMPLOYEE: "Employee",
}

DEMO_COMPANIES = [
    {"name": "Acme Corporation", "industry": "Manufacturing"},
    {"name": "Globex Industries", "industry": "Logistics"},
]


async def seed_starter_sub_roles(session: AsyncSession) -> dict[str, SubRole]:
    """Create one global sub-role per coarse role from the suggested grants."""
    await PermissionService(session).initialize_permissions()

    sub_roles = SubRoleRepository(session)
    permissions = await PermissionRepository(session).get_by_names(
        sorted({name for names in DEFAULT_ROLE_PERMISSIONS.values() for name in names})
    )

    starters: dict[str, SubRole] = {}
    for role, names in DEFAULT_ROLE_PERMISSIONS.items():
        sub_role_name = STARTER_SUB_ROLE_NAMES[role]
        sub_role = await sub_roles.get_by_name(sub_role_name, None)
        if sub_role is None:
            sub_role = await sub_roles.create(
                SubRole(name=sub_role_name, description=f"Starter grants for {role}")
            )
            sub_role = await sub_roles.upsert_grants(
                sub_role, {permissions[name].id: True for name in names}
            )
            logger.info("sub_role_seeded", name=sub_role_name)
        starters[role] = sub_role
    return starters


async def _get_or_create_user(
    session: AsyncSession,
    email: str,
    full_name: str,
    role: Role,
    password: str,
    company_id: int | None,
    sub_role_id: int | None,
) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(
        email=email,
        full_name=full_name,
        password_hash=hash_password(password),
        role=role,
        company_id=company_id,
        sub_role_id=sub_role_id,
    )
    session.add(user)
    await session.flush()
    logger.info("user_seeded", email=email, role=str(role))
    return user


async def seed_default(session: AsyncSession, admin_email: str, admin_password: str) -> User:
    """Catalogue, starter sub-roles and one super admin."""
    starters = await seed_starter_sub_roles(session)
    return await _get_or_create_user(
        session,
        admin_email,
        "Platform Admin",
        Role.SUPER_ADMIN,
        admin_password,
        company_id=None,
        sub_role_id=starters[Role.SUPER_ADMIN].id,
    )


async def seed_demo(session: AsyncSession, password: str) -> list[Company]:
    """Two companies, each with an admin and two employees."""
    starters = await seed_starter_sub_roles(session)
    companies: list[Company] = []

    for data in DEMO_COMPANIES:
        result = await session.execute(select(Company).where(Company.name == data["name"]))
        company = result.scalar_one_or_none()
        if company is None:
            company = Company(**data)
            session.add(company)
            await session.flush()
            logger.info("company_seeded", name=company.name)
        companies.append(company)

        slug = data["name"].split()[0].lower()
        await _get_or_create_user(
            session,
            f"admin@{slug}.example.com",
            f"{data['name']} Admin",
            Role.COMPANY_ADMIN,
            password,
            company.id,
            starters[Role.COMPANY_ADMIN].id,
        )
        for n in (1, 2):
            await _get_or_create_user(
                session,
                f"employee{n}@{slug}.example.com",
                f"{data['name']} Employee {n}",
                Role.EMPLOYEE,
                password,
                company.id,
                starters[Role.EMPLOYEE].id,
            )

    return companies
