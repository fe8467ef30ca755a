"""Uniform response envelopes.

Successful responses are wrapped as ``{"status", "message", "data"}``;
list endpoints add a ``pagination`` block. Errors are not wrapped here,
they are rendered as problem details by ``workforce.core.errors``.
"""

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from workforce.config import settings
from workforce.core.constants import DEFAULT_PAGE


T = TypeVar("T")


class PageParams(BaseModel):
    """Normalized pagination parameters."""

    page: int
    limit: int

    @property
    def skip(self) -> int:
        """Number of records to skip for this page."""
        return calculate_skip(self.page, self.limit)


class PaginationInfo(BaseModel):
    """Pagination metadata returned alongside a page of data."""

    current_page: int
    total_pages: int
    total_records: int
    limit: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int | None
    previous_page: int | None


class SuccessResponse(BaseModel, Generic[T]):
    """Envelope for a successful response."""

    status: int
    message: str
    data: T


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for a page of results."""

    status: int
    message: str
    data: list[T]
    pagination: PaginationInfo


def _to_int(value: Any, default: int) -> int:
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return default


def normalize_pagination_params(
    page: Any = None,
    limit: Any = None,
    max_limit: int | None = None,
) -> PageParams:
    """Validate and normalize raw pagination parameters.

    Missing or unparsable values fall back to the defaults; the page is
    at least 1 and the limit is clamped to ``[1, max_limit]``.
    """
    max_limit = max_limit or settings.max_page_size
    normalized_page = max(1, _to_int(page or DEFAULT_PAGE, DEFAULT_PAGE))
    default_limit = settings.default_page_size
    normalized_limit = min(
        max_limit, max(1, _to_int(limit or default_limit, default_limit))
    )
    return PageParams(page=normalized_page, limit=normalized_limit)


def calculate_skip(page: int, limit: int) -> int:
    """Number of records to skip for a 1-based page."""
    return (page - 1) * limit


def generate_pagination_info(page: int, limit: int, total_records: int) -> PaginationInfo:
    """Build the pagination block for a page of ``limit`` records."""
    total_pages = math.ceil(total_records / limit) if limit else 0
    has_next_page = page < total_pages
    has_previous_page = page > 1

    return PaginationInfo(
        current_page=page,
        total_pages=total_pages,
        total_records=total_records,
        limit=limit,
        has_next_page=has_next_page,
        has_previous_page=has_previous_page,
        next_page=page + 1 if has_next_page else None,
        previous_page=page - 1 if has_previous_page else None,
    )


def success_response(
    data: T,
    message: str = "Success",
    status: int = 200,
) -> SuccessResponse[T]:
    """Wrap a payload in the success envelope."""
    return SuccessResponse(status=status, message=message, data=data)


def paginated_response(
    data: list[T],
    total: int,
    params: PageParams,
    message: str = "Data retrieved successfully",
) -> PaginatedResponse[T]:
    """Wrap a page of results with its pagination metadata."""
    return PaginatedResponse(
        status=200,
        message=message,
        data=data,
        pagination=generate_pagination_info(params.page, params.limit, total),
    )
