"""Resolve access targets from the store."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.policies.base import AccessTarget
from workforce.modules.users.models import User


async def owner_target(session: AsyncSession, user_id: int) -> AccessTarget:
    """Target for a record owned by ``user_id``.

    An unknown owner yields a target with no company, which only a global
    admin (or the owner id itself) can match.
    """
    result = await session.execute(select(User.company_id).where(User.id == user_id))
    company_id = result.scalar_one_or_none()
    return AccessTarget(owner_id=user_id, company_id=company_id)


def record_target(owner: User, resource_id: int) -> AccessTarget:
    """Target for a record that was looked up by id."""
    return AccessTarget(
        owner_id=owner.id,
        company_id=owner.company_id,
        resource_id=resource_id,
        by_reference=True,
    )
