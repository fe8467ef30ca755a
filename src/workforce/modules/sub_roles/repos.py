"""Repositories for permissions and sub-roles."""

from sqlalchemy import func, or_, select

from workforce.api.dependencies import DBSession
from workforce.core.permissions.models import Permission, SubRole, SubRolePermission


class PermissionRepository:
    """Repository for the permission catalogue."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def list_permissions(self, skip: int = 0, limit: int = 20) -> tuple[list[Permission], int]:
        total = (
            await self.session.execute(select(func.count()).select_from(Permission))
        ).scalar_one()
        stmt = (
            select(Permission)
            .order_by(Permission.module, Permission.action)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_by_names(self, names: list[str]) -> dict[str, Permission]:
        stmt = select(Permission).where(Permission.name.in_(names))
        result = await self.session.execute(stmt)
        return {p.name: p for p in result.scalars().all()}

    async def existing_names(self) -> set[str]:
        result = await self.session.execute(select(Permission.name))
        return set(result.scalars().all())

    async def add_all(self, permissions: list[Permission]) -> None:
        self.session.add_all(permissions)
        await self.session.flush()


class SubRoleRepository:
    """Repository for sub-roles and their grant rows."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, sub_role: SubRole) -> SubRole:
        self.session.add(sub_role)
        await self.session.flush()
        await self.session.refresh(sub_role)
        await self.session.refresh(sub_role, ["grants"])
        return sub_role

    async def get_by_name(self, name: str, company_id: int | None) -> SubRole | None:
        stmt = select(SubRole).where(
            SubRole.name == name,
            SubRole.company_id.is_(None)
            if company_id is None
            else SubRole.company_id == company_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_visible(
        self,
        company_ids: list[int] | None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[SubRole], int]:
        """Sub-roles of the given companies plus global ones; None means all."""
        filters = []
        if company_ids is not None:
            filters.append(
                or_(SubRole.company_id.is_(None), SubRole.company_id.in_(company_ids))
            )

        count_stmt = select(func.count()).select_from(SubRole).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = select(SubRole).where(*filters).order_by(SubRole.id).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def upsert_grants(
        self, sub_role: SubRole, grants: dict[int, bool]
    ) -> SubRole:
        """Insert or update one row per (sub-role, permission id)."""
        existing = {row.permission_id: row for row in sub_role.grants}
        for permission_id, granted in grants.items():
            row = existing.get(permission_id)
            if row is None:
                permission = await self.session.get(Permission, permission_id)
                sub_role.grants.append(
                    SubRolePermission(permission=permission, granted=granted)
                )
            else:
                row.granted = granted

        await self.session.flush()
        await self.session.refresh(sub_role, ["grants"])
        return sub_role

