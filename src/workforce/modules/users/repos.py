"""User repository for database operations."""

from sqlalchemy import func, select

from workforce.api.dependencies import DBSession
from workforce.modules.users.models import User


class UserRepository:
    """Repository for User database operations.

    List queries take an optional set of company ids; None means every
    company.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user and return it with its id populated."""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_companies(
        self,
        company_ids: list[int] | None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """List users with pagination.

        Args:
            company_ids: Companies to include; None for all
            skip: Number of records to skip
            limit: Maximum number of records

        Returns:
            Tuple of (users list, total count)
        """
        filters = []
        if company_ids is not None:
            filters.append(User.company_id.in_(company_ids))

        count_stmt = select(func.count()).select_from(User).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(User)
            .where(*filters)
            .order_by(User.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def search_company(
        self,
        company_id: int,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """A company's users ordered by name, optionally filtered by name."""
        filters = [User.company_id == company_id]
        if search and search.strip():
            filters.append(User.full_name.ilike(f"%{search.strip()}%"))

        count_stmt = select(func.count()).select_from(User).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(User)
            .where(*filters)
            .order_by(User.full_name, User.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update(self, user: User) -> User:
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()

