"""Dashboard API routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from workforce.core.auth.dependencies import CurrentPrincipal
from workforce.core.auth.principal import Role
from workforce.core.permissions import require_roles
from workforce.core.responses import SuccessResponse, success_response
from workforce.modules.dashboard.schemas import (
    CompanyDashboard,
    EmployeeDashboard,
    PerformanceAnalytics,
    PlatformDashboard,
    QuickStats,
    RecentTasks,
    TopPerformers,
)
from workforce.modules.dashboard.services import DashboardSvc


router = APIRouter(prefix="/dashboard", tags=["dashboard"])

CompanyQuery = Annotated[
    int | None,
    Query(description="Required for super admins; company admins get their own."),
]


@router.get(
    "/employee",
    response_model=SuccessResponse[EmployeeDashboard],
    summary="Employee dashboard",
)
@require_roles(Role.EMPLOYEE)
async def employee_dashboard(
    principal: CurrentPrincipal,
    service: DashboardSvc,
) -> SuccessResponse[EmployeeDashboard]:
    data = await service.employee_dashboard(principal)
    return success_response(data, message="Dashboard data retrieved successfully")


@router.get(
    "/employee/quick-stats",
    response_model=SuccessResponse[QuickStats],
    summary="Employee quick stats",
)
@require_roles(Role.EMPLOYEE)
async def quick_stats(
    principal: CurrentPrincipal,
    service: DashboardSvc,
) -> SuccessResponse[QuickStats]:
    data = await service.quick_stats(principal)
    return success_response(data, message="Quick stats retrieved successfully")


@router.get(
    "/employee/analytics/performance",
    response_model=SuccessResponse[PerformanceAnalytics],
    summary="Employee performance analytics",
)
@require_roles(Role.EMPLOYEE)
async def performance(
    principal: CurrentPrincipal,
    service: DashboardSvc,
) -> SuccessResponse[PerformanceAnalytics]:
    data = await service.performance(principal)
    return success_response(data, message="Performance analytics retrieved successfully")


@router.get(
    "/company-admin",
    response_model=SuccessResponse[CompanyDashboard],
    summary="Company dashboard",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def company_dashboard(
    principal: CurrentPrincipal,
    service: DashboardSvc,
    company_id: CompanyQuery = None,
) -> SuccessResponse[CompanyDashboard]:
    data = await service.company_dashboard(principal, company_id)
    return success_response(data, message="Company dashboard retrieved successfully")


@router.get(
    "/company-admin/top-performers",
    response_model=SuccessResponse[TopPerformers],
    summary="Today's top performers",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def top_performers(
    principal: CurrentPrincipal,
    service: DashboardSvc,
    company_id: CompanyQuery = None,
) -> SuccessResponse[TopPerformers]:
    data = await service.top_performers(principal, company_id)
    return success_response(data, message="Top performers retrieved successfully")


@router.get(
    "/company-admin/recent-tasks",
    response_model=SuccessResponse[RecentTasks],
    summary="Recent company tasks",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def recent_tasks(
    principal: CurrentPrincipal,
    service: DashboardSvc,
    company_id: CompanyQuery = None,
) -> SuccessResponse[RecentTasks]:
    data = await service.recent_tasks(principal, company_id)
    return success_response(data, message="Recent company tasks retrieved successfully")


@router.get(
    "/super-admin",
    response_model=SuccessResponse[PlatformDashboard],
    summary="Platform dashboard",
)
@require_roles(Role.SUPER_ADMIN)
async def platform_dashboard(
    principal: CurrentPrincipal,
    service: DashboardSvc,
) -> SuccessResponse[PlatformDashboard]:
    data = await service.platform_dashboard(principal)
    return success_response(data, message="Super admin dashboard retrieved successfully")
