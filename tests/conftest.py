"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from workforce.core.auth import Role, create_access_token
from workforce.core.database import Base, get_db
from workforce.core.permissions import Permission, SubRole, SubRolePermission
from workforce.core.permissions.definitions import PERMISSION_NAMES
from workforce.main import create_app
from workforce.modules.companies.models import Company
from workforce.modules.sub_roles.services import PermissionService
from workforce.modules.users.models import User
from tests.factories import CompanyCreateFactory, UserCreateFactory, hashed_test_password


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Create an in-memory test database with every table."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session shared by the test and the app."""
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Company, User and Token Helpers
# ============================================================


MakeCompany = Callable[..., Awaitable[Company]]
MakeUser = Callable[..., Awaitable[User]]


@pytest.fixture
def make_company(db: AsyncSession) -> MakeCompany:
    """Return a coroutine that persists a company."""

    async def _make(**overrides) -> Company:
        data = CompanyCreateFactory.build(**overrides)
        company = Company(**data.model_dump())
        db.add(company)
        await db.flush()
        return company

    return _make


@pytest.fixture
def make_user(db: AsyncSession) -> MakeUser:
    """Return a coroutine that persists a user with the test password."""

    async def _make(
        role: Role = Role.EMPLOYEE,
        company: Company | None = None,
        sub_role: SubRole | None = None,
        **overrides,
    ) -> User:
        data = UserCreateFactory.build(
            role=role,
            company_id=company.id if company else None,
            **overrides,
        )
        user = User(
            email=data.email,
            full_name=data.full_name,
            password_hash=hashed_test_password(),
            role=data.role,
            company_id=data.company_id,
            sub_role_id=sub_role.id if sub_role else None,
            timezone=data.timezone,
        )
        db.add(user)
        await db.flush()
        return user

    return _make


@pytest.fixture
async def permissions(db: AsyncSession) -> dict[str, Permission]:
    """The full permission catalogue keyed by ``module.action``."""
    service = PermissionService(db)
    await service.initialize_permissions()
    return await service.repo.get_by_names(sorted(PERMISSION_NAMES))


@pytest.fixture
def make_sub_role(db: AsyncSession, permissions: dict[str, Permission]):
    """Return a coroutine that persists a sub-role with ``{name: granted}`` rows."""

    async def _make(
        grants: dict[str, bool],
        company: Company | None = None,
        name: str = "Custom",
    ) -> SubRole:
        sub_role = SubRole(name=name, company_id=company.id if company else None)
        db.add(sub_role)
        await db.flush()
        for permission_name, granted in grants.items():
            db.add(
                SubRolePermission(
                    sub_role_id=sub_role.id,
                    permission=permissions[permission_name],
                    granted=granted,
                )
            )
        await db.flush()
        await db.refresh(sub_role, ["grants"])
        return sub_role

    return _make


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a function building Authorization headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            user_id=user.id,
            role=user.role,
            company_id=user.company_id,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ============================================================
# Common Tenants
# ============================================================


@pytest.fixture
async def acme(make_company: MakeCompany) -> Company:
    return await make_company(name="Acme Corporation")


@pytest.fixture
async def globex(make_company: MakeCompany) -> Company:
    return await make_company(name="Globex Industries")


@pytest.fixture
async def super_admin(make_user: MakeUser) -> User:
    return await make_user(role=Role.SUPER_ADMIN)


@pytest.fixture
async def acme_admin(make_user: MakeUser, acme: Company) -> User:
    return await make_user(role=Role.COMPANY_ADMIN, company=acme)


@pytest.fixture
async def acme_employee(make_user: MakeUser, acme: Company) -> User:
    return await make_user(role=Role.EMPLOYEE, company=acme)


@pytest.fixture
async def globex_employee(make_user: MakeUser, globex: Company) -> User:
    return await make_user(role=Role.EMPLOYEE, company=globex)


@pytest.fixture
async def globex_admin(make_user: MakeUser, globex: Company) -> User:
    return await make_user(role=Role.COMPANY_ADMIN, company=globex)


def pytest_collection_modifyitems(items) -> None:
    """Set up the fixture named by a ``caller`` parameter before the test runs.

    Async fixtures cannot be resolved lazily via ``request.getfixturevalue``
    from inside a running async test, so request them up front.
    """
    for item in items:
        callspec = getattr(item, "callspec", None)
        if callspec is None:
            continue
        caller = callspec.params.get("caller")
        if isinstance(caller, str) and caller not in item.fixturenames:
            item.fixturenames.append(caller)
