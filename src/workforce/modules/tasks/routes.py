"""Task API routes."""

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Query, status

from workforce.api.dependencies import Pagination
from workforce.core.auth.dependencies import CurrentPrincipal
from workforce.core.auth.principal import Role
from workforce.core.permissions import require_roles
from workforce.core.responses import (
    PaginatedResponse,
    SuccessResponse,
    paginated_response,
    success_response,
)
from workforce.modules.tasks.schemas import (
    TaskCreate,
    TaskResponse,
    TaskStats,
    TaskStatusUpdate,
    TaskUpdate,
)
from workforce.modules.tasks.services import TaskSvc


ALL_ROLES = (Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.EMPLOYEE)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=SuccessResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
@require_roles(*ALL_ROLES)
async def create_task(
    data: TaskCreate,
    principal: CurrentPrincipal,
    service: TaskSvc,
) -> SuccessResponse[TaskResponse]:
    task = await service.create_task(principal, data)
    return success_response(
        TaskResponse.model_validate(task),
        message="Task created successfully",
        status=status.HTTP_201_CREATED,
    )


@router.get(
    "/my-tasks",
    response_model=PaginatedResponse[TaskResponse],
    summary="My tasks",
)
@require_roles(*ALL_ROLES)
async def my_tasks(
    principal: CurrentPrincipal,
    service: TaskSvc,
    params: Pagination,
    start_date: Annotated[dt.date | None, Query()] = None,
    end_date: Annotated[dt.date | None, Query()] = None,
) -> PaginatedResponse[TaskResponse]:
    tasks, total = await service.my_tasks(principal, params, start_date, end_date)
    return paginated_response(
        [TaskResponse.model_validate(t) for t in tasks],
        total,
        params,
        message="Tasks retrieved successfully",
    )


@router.get(
    "/my-tasks/stats",
    response_model=SuccessResponse[TaskStats],
    summary="My task statistics",
)
@require_roles(*ALL_ROLES)
async def my_stats(
    principal: CurrentPrincipal,
    service: TaskSvc,
) -> SuccessResponse[TaskStats]:
    return success_response(await service.my_stats(principal))


@router.get(
    "/company/{company_id}",
    response_model=PaginatedResponse[TaskResponse],
    summary="Company tasks",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def company_tasks(
    company_id: int,
    principal: CurrentPrincipal,
    service: TaskSvc,
    params: Pagination,
) -> PaginatedResponse[TaskResponse]:
    tasks, total = await service.company_tasks(principal, company_id, params)
    return paginated_response(
        [TaskResponse.model_validate(t) for t in tasks],
        total,
        params,
        message="Company tasks retrieved successfully",
    )


@router.get(
    "/{task_id}",
    response_model=SuccessResponse[TaskResponse],
    summary="Get task",
)
@require_roles(*ALL_ROLES)
async def get_task(
    task_id: int,
    principal: CurrentPrincipal,
    service: TaskSvc,
) -> SuccessResponse[TaskResponse]:
    task = await service.get_task(principal, task_id)
    return success_response(TaskResponse.model_validate(task))


@router.patch(
    "/{task_id}",
    response_model=SuccessResponse[TaskResponse],
    summary="Update task",
)
@require_roles(*ALL_ROLES)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    principal: CurrentPrincipal,
    service: TaskSvc,
) -> SuccessResponse[TaskResponse]:
    task = await service.update_task(principal, task_id, data)
    return success_response(
        TaskResponse.model_validate(task), message="Task updated successfully"
    )


@router.put(
    "/{task_id}/status",
    response_model=SuccessResponse[TaskResponse],
    summary="Set task status",
)
@require_roles(*ALL_ROLES)
async def set_status(
    task_id: int,
    data: TaskStatusUpdate,
    principal: CurrentPrincipal,
    service: TaskSvc,
) -> SuccessResponse[TaskResponse]:
    task = await service.set_status(principal, task_id, data.status)
    return success_response(
        TaskResponse.model_validate(task), message="Task status updated successfully"
    )


@router.delete(
    "/{task_id}",
    response_model=SuccessResponse[None],
    summary="Delete task",
)
@require_roles(*ALL_ROLES)
async def delete_task(
    task_id: int,
    principal: CurrentPrincipal,
    service: TaskSvc,
) -> SuccessResponse[None]:
    await service.delete_task(principal, task_id)
    return success_response(None, message="Task deleted successfully")
