"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.database import get_db
from workforce.core.responses import PageParams, normalize_pagination_params


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


async def get_page_params(
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
) -> PageParams:
    """Read ``page``/``limit`` query parameters, falling back on bad input."""
    return normalize_pagination_params(page, limit)


Pagination = Annotated[PageParams, Depends(get_page_params)]
