"""Attendance API routes."""

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Query, status

from workforce.api.dependencies import Pagination
from workforce.core.auth.dependencies import CurrentPrincipal
from workforce.core.auth.principal import Role
from workforce.core.constants import MAX_NAME_LENGTH
from workforce.core.permissions import require_roles
from workforce.core.responses import (
    PaginatedResponse,
    SuccessResponse,
    paginated_response,
    success_response,
)
from workforce.modules.attendance.schemas import (
    AttendanceCreate,
    AttendanceResponse,
    AttendanceStats,
    AttendanceUpdate,
    ClockRequest,
    EmployeeHours,
)
from workforce.modules.attendance.services import AttendanceSvc


router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post(
    "/clock-in",
    response_model=SuccessResponse[AttendanceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Clock in",
)
@require_roles(Role.EMPLOYEE)
async def clock_in(
    principal: CurrentPrincipal,
    service: AttendanceSvc,
    data: ClockRequest | None = None,
) -> SuccessResponse[AttendanceResponse]:
    record = await service.clock_in(principal, data.note if data else None)
    return success_response(
        AttendanceResponse.model_validate(record),
        message="Clocked in successfully",
        status=status.HTTP_201_CREATED,
    )


@router.post(
    "/clock-out",
    response_model=SuccessResponse[AttendanceResponse],
    summary="Clock out",
)
@require_roles(Role.EMPLOYEE)
async def clock_out(
    principal: CurrentPrincipal,
    service: AttendanceSvc,
    data: ClockRequest | None = None,
) -> SuccessResponse[AttendanceResponse]:
    record = await service.clock_out(principal, data.note if data else None)
    return success_response(
        AttendanceResponse.model_validate(record), message="Clocked out successfully"
    )


@router.get(
    "/today",
    response_model=PaginatedResponse[AttendanceResponse],
    summary="Today's attendance",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def today(
    principal: CurrentPrincipal,
    service: AttendanceSvc,
    params: Pagination,
) -> PaginatedResponse[AttendanceResponse]:
    records, total = await service.today(principal, params)
    return paginated_response(
        [AttendanceResponse.model_validate(r) for r in records],
        total,
        params,
        message="Today's attendance retrieved successfully",
    )


@router.get(
    "/my-records",
    response_model=PaginatedResponse[AttendanceResponse],
    summary="My attendance records",
)
@require_roles(Role.EMPLOYEE)
async def my_records(
    principal: CurrentPrincipal,
    service: AttendanceSvc,
    params: Pagination,
    start_date: Annotated[dt.date | None, Query()] = None,
    end_date: Annotated[dt.date | None, Query()] = None,
) -> PaginatedResponse[AttendanceResponse]:
    records, total = await service.my_records(principal, params, start_date, end_date)
    return paginated_response(
        [AttendanceResponse.model_validate(r) for r in records],
        total,
        params,
        message="Attendance records retrieved successfully",
    )


@router.post(
    "/create",
    response_model=SuccessResponse[AttendanceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create attendance record",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def create_record(
    data: AttendanceCreate,
    principal: CurrentPrincipal,
    service: AttendanceSvc,
) -> SuccessResponse[AttendanceResponse]:
    record = await service.create_record(principal, data)
    return success_response(
        AttendanceResponse.model_validate(record),
        message="Attendance record created successfully",
        status=status.HTTP_201_CREATED,
    )


@router.get(
    "/stats",
    response_model=SuccessResponse[AttendanceStats],
    summary="Year-to-date attendance stats",
    description="Defaults to the caller; admins may pass the user_id of a user they manage.",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.EMPLOYEE)
async def stats(
    principal: CurrentPrincipal,
    service: AttendanceSvc,
    user_id: Annotated[int | None, Query()] = None,
) -> SuccessResponse[AttendanceStats]:
    result = await service.stats(principal, user_id)
    return success_response(result, message="Attendance stats retrieved successfully")


@router.get(
    "/hours",
    response_model=PaginatedResponse[EmployeeHours],
    summary="Employee hours by date range",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def hours_report(
    principal: CurrentPrincipal,
    service: AttendanceSvc,
    params: Pagination,
    company_id: Annotated[int | None, Query()] = None,
    start_date: Annotated[dt.date | None, Query()] = None,
    end_date: Annotated[dt.date | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=MAX_NAME_LENGTH)] = None,
) -> PaginatedResponse[EmployeeHours]:
    rows, total = await service.hours_report(
        principal, params, company_id, start_date, end_date, search
    )
    return paginated_response(
        rows, total, params, message="Employee hours retrieved successfully"
    )


@router.get(
    "/{attendance_id}",
    response_model=SuccessResponse[AttendanceResponse],
    summary="Get attendance record",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.EMPLOYEE)
async def get_record(
    attendance_id: int,
    principal: CurrentPrincipal,
    service: AttendanceSvc,
) -> SuccessResponse[AttendanceResponse]:
    record = await service.get_record(principal, attendance_id)
    return success_response(AttendanceResponse.model_validate(record))


@router.patch(
    "/{attendance_id}",
    response_model=SuccessResponse[AttendanceResponse],
    summary="Update attendance record",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.EMPLOYEE)
async def update_record(
    attendance_id: int,
    data: AttendanceUpdate,
    principal: CurrentPrincipal,
    service: AttendanceSvc,
) -> SuccessResponse[AttendanceResponse]:
    record = await service.update_record(principal, attendance_id, data)
    return success_response(
        AttendanceResponse.model_validate(record),
        message="Attendance record updated successfully",
    )


@router.delete(
    "/{attendance_id}",
    response_model=SuccessResponse[None],
    summary="Delete attendance record",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def delete_record(
    attendance_id: int,
    principal: CurrentPrincipal,
    service: AttendanceSvc,
) -> SuccessResponse[None]:
    await service.delete_record(principal, attendance_id)
    return success_response(None, message="Attendance record deleted successfully")
