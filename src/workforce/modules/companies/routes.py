"""Company API routes."""

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Query, status

from workforce.api.dependencies import DBSession, Pagination
from workforce.core.auth.dependencies import CurrentPrincipal
from workforce.core.auth.principal import Role
from workforce.core.permissions import require_roles
from workforce.core.responses import (
    PaginatedResponse,
    SuccessResponse,
    paginated_response,
    success_response,
)
from workforce.modules.companies.schemas import (
    CompanyCreate,
    CompanyResponse,
    CompanyUpdate,
    DailyReport,
)
from workforce.modules.companies.services import CompanySvc


router = APIRouter(prefix="/companies", tags=["companies"])


@router.post(
    "",
    response_model=SuccessResponse[CompanyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create company",
)
@require_roles(Role.SUPER_ADMIN)
async def create_company(
    data: CompanyCreate,
    principal: CurrentPrincipal,
    service: CompanySvc,
) -> SuccessResponse[CompanyResponse]:
    company = await service.create_company(principal, data)
    return success_response(
        CompanyResponse.model_validate(company),
        message="Company created successfully",
        status=status.HTTP_201_CREATED,
    )


@router.get(
    "",
    response_model=PaginatedResponse[CompanyResponse],
    summary="List companies",
)
@require_roles(Role.SUPER_ADMIN)
async def list_companies(
    principal: CurrentPrincipal,
    service: CompanySvc,
    params: Pagination,
) -> PaginatedResponse[CompanyResponse]:
    companies, total = await service.list_companies(principal, params)
    return paginated_response(
        [CompanyResponse.model_validate(c) for c in companies],
        total,
        params,
        message="Companies retrieved successfully",
    )


@router.get(
    "/{company_id}",
    response_model=SuccessResponse[CompanyResponse],
    summary="Get company",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def get_company(
    company_id: int,
    principal: CurrentPrincipal,
    service: CompanySvc,
) -> SuccessResponse[CompanyResponse]:
    company = await service.get_company(principal, company_id)
    return success_response(CompanyResponse.model_validate(company))


@router.patch(
    "/{company_id}",
    response_model=SuccessResponse[CompanyResponse],
    summary="Update company",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def update_company(
    company_id: int,
    data: CompanyUpdate,
    principal: CurrentPrincipal,
    service: CompanySvc,
) -> SuccessResponse[CompanyResponse]:
    company = await service.update_company(principal, company_id, data)
    return success_response(
        CompanyResponse.model_validate(company),
        message="Company updated successfully",
    )


@router.delete(
    "/{company_id}",
    response_model=SuccessResponse[None],
    summary="Delete company",
)
@require_roles(Role.SUPER_ADMIN)
async def delete_company(
    company_id: int,
    principal: CurrentPrincipal,
    db: DBSession,
    service: CompanySvc,
) -> SuccessResponse[None]:
    await service.delete_company(principal, company_id)
    return success_response(None, message="Company deleted successfully")


@router.get(
    "/{company_id}/report/daily",
    response_model=SuccessResponse[DailyReport],
    summary="Daily attendance report",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def daily_report(
    company_id: int,
    principal: CurrentPrincipal,
    service: CompanySvc,
    date: Annotated[dt.date | None, Query()] = None,
) -> SuccessResponse[DailyReport]:
    report = await service.daily_report(
        principal, company_id, date or dt.datetime.now(dt.UTC).date()
    )
    return success_response(report, message="Daily report generated successfully")
