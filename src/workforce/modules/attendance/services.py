"""Attendance service for clocking and record management."""

import datetime as dt
from collections import defaultdict
from typing import Annotated

import structlog
from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.core.auth.principal import Principal
from workforce.core.constants import MAX_REPORT_RANGE_DAYS
from workforce.core.errors import BadRequestError, ConflictError, NotFoundError
from workforce.core.policies import AttendancePolicy, CompanyPolicy, Operation
from workforce.core.responses import PageParams
from workforce.core.utils.dates import as_utc, days_between, local_today, working_days
from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.attendance.repos import AttendanceRepository
from workforce.modules.attendance.schemas import (
    AttendanceCreate,
    AttendanceStats,
    AttendanceUpdate,
    DailyHours,
    EmployeeHours,
)
from workforce.modules.companies.models import Company
from workforce.modules.users.models import User
from workforce.modules.users.repos import UserRepository


logger = structlog.get_logger()


class AttendanceService:
    """Service for attendance operations.

    "Today" is the current calendar day in the clocking user's timezone.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = AttendanceRepository(db)
        self.policy = AttendancePolicy(db)

    async def _get_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user")
        return user

    async def clock_in(self, principal: Principal, note: str | None = None) -> AttendanceRecord:
        """Open today's record for the principal.

        Raises:
            BadRequestError: If the principal already clocked in today
        """
        await self.policy.can_create(principal, principal.self_id)
        user = await self._get_user(principal.self_id)
        today = local_today(user.timezone)
        now = dt.datetime.now(dt.UTC)

        record = await self.repo.get_for_day(user.id, today)
        if record is not None and record.clock_in_at is not None:
            raise BadRequestError("Already clocked in today", error_code="already_clocked_in")

        if record is None:
            record = await self.repo.create(
                AttendanceRecord(user_id=user.id, date=today, clock_in_at=now, note=note)
            )
        else:
            record.clock_in_at = now
            record.note = note or record.note
            record = await self.repo.update(record)

        logger.info("clocked_in", user_id=user.id, date=str(today))
        return record

    async def clock_out(self, principal: Principal, note: str | None = None) -> AttendanceRecord:
        """Close today's record for the principal.

        Raises:
            BadRequestError: If there is no open record for today
        """
        await self.policy.can_update(principal, principal.self_id)
        user = await self._get_user(principal.self_id)
        today = local_today(user.timezone)

        record = await self.repo.get_for_day(user.id, today)
        if record is None or record.clock_in_at is None:
            raise BadRequestError(
                "Must clock in before clocking out", error_code="not_clocked_in"
            )
        if record.clock_out_at is not None:
            raise BadRequestError("Already clocked out today", error_code="already_clocked_out")

        record.clock_out_at = dt.datetime.now(dt.UTC)
        if note:
            record.note = note
        record = await self.repo.update(record)

        logger.info("clocked_out", user_id=user.id, date=str(today))
        return record

    async def today(
        self, principal: Principal, params: PageParams
    ) -> tuple[list[AttendanceRecord], int]:
        """Today's records across the companies the principal can see.

        Each record is matched against the current day in its owner's
        timezone, the same day ``clock_in`` stamped it with.
        """
        company_ids = CompanyPolicy.accessible_company_ids(principal)
        for company_id in company_ids or ():
            self.policy.can_access_company_data(principal, company_id)

        now = dt.datetime.now(dt.UTC)
        days = {
            timezone: local_today(timezone, now)
            for timezone in await self.repo.user_timezones(company_ids)
        }
        return await self.repo.list_for_local_days(
            days, company_ids, params.skip, params.limit
        )

    async def my_records(
        self,
        principal: Principal,
        params: PageParams,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> tuple[list[AttendanceRecord], int]:
        """The principal's own records in an optional date range.

        Raises:
            BadRequestError: If the range is inverted
        """
        if start_date and end_date and start_date > end_date:
            raise BadRequestError(
                "Start date must be before end date", error_code="invalid_date_range"
            )
        await self.policy.can_read(principal, principal.self_id)
        return await self.repo.list_for_user(
            principal.self_id, start_date, end_date, params.skip, params.limit
        )

    async def stats(self, principal: Principal, user_id: int | None = None) -> AttendanceStats:
        """Year-to-date attendance totals of a user, the principal by default.

        The year and "today" follow the user's own timezone.
        """
        target_id = user_id if user_id is not None else principal.self_id
        await self.policy.can_read(principal, target_id)
        user = await self._get_user(target_id)

        today = local_today(user.timezone)
        year_start = today.replace(month=1, day=1)
        records = await self.repo.list_between([user.id], year_start, today)

        present_days = sum(1 for r in records if r.clock_in_at is not None)
        hours = [r.hours_worked for r in records if r.hours_worked is not None]
        total_hours = sum(hours)
        workdays = working_days(year_start, today)
        absence_days = max(0, workdays - present_days)

        return AttendanceStats(
            user_id=user.id,
            year=today.year,
            total_days=len(records),
            present_days=present_days,
            complete_days=len(hours),
            working_days=workdays,
            absence_days=absence_days,
            total_hours=round(total_hours, 2),
            average_hours=round(total_hours / len(hours), 2) if hours else 0.0,
            attendance_rate=round(present_days / workdays * 100) if workdays else 0,
            absence_rate=round(absence_days / workdays * 100) if workdays else 0,
        )

    async def hours_report(
        self,
        principal: Principal,
        params: PageParams,
        company_id: int | None = None,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        search: str | None = None,
    ) -> tuple[list[EmployeeHours], int]:
        """Hours worked per employee of one company over a date range.

        A company admin defaults to their own company; a super admin must
        name one. The range defaults to the current month up to today and
        the page is taken over employees, ordered by name.

        Raises:
            BadRequestError: If no company is given or the range is invalid
            NotFoundError: If the company does not exist
        """
        company_id = company_id if company_id is not None else principal.tenant_id
        if company_id is None:
            raise BadRequestError(
                "company_id is required", error_code="company_required"
            )
        self.policy.can_access_company_data(principal, company_id)
        if await self.db.get(Company, company_id) is None:
            raise NotFoundError(resource="company")

        today = dt.datetime.now(dt.UTC).date()
        start_date = start_date or today.replace(day=1)
        end_date = end_date or today
        if start_date > end_date:
            raise BadRequestError(
                "Start date must be before end date", error_code="invalid_date_range"
            )
        if (end_date - start_date).days >= MAX_REPORT_RANGE_DAYS:
            raise BadRequestError(
                f"Date range cannot exceed {MAX_REPORT_RANGE_DAYS} days",
                error_code="date_range_too_long",
            )

        users, total = await UserRepository(self.db).search_company(
            company_id, search, params.skip, params.limit
        )
        records = await self.repo.list_between([u.id for u in users], start_date, end_date)
        by_user: dict[int, dict[dt.date, AttendanceRecord]] = defaultdict(dict)
        for record in records:
            by_user[record.user_id][record.date] = record

        days = days_between(start_date, end_date)
        workdays = working_days(start_date, end_date)
        rows = []
        for user in users:
            own = by_user[user.id]
            daily = [
                DailyHours(
                    date=day,
                    hours_worked=own[day].hours_worked or 0.0,
                    clock_in_at=own[day].clock_in_at,
                    clock_out_at=own[day].clock_out_at,
                    note=own[day].note,
                )
                if day in own
                else DailyHours(date=day, hours_worked=0.0)
                for day in days
            ]
            present_days = sum(1 for r in own.values() if r.clock_in_at is not None)
            rows.append(
                EmployeeHours(
                    user_id=user.id,
                    full_name=user.full_name,
                    email=user.email,
                    role=user.role,
                    total_hours=round(sum(d.hours_worked for d in daily), 2),
                    present_days=present_days,
                    work_days=workdays,
                    attendance_rate=(
                        round(present_days / workdays * 100, 2) if workdays else 0.0
                    ),
                    daily=daily,
                )
            )
        return rows, total

    async def create_record(
        self, principal: Principal, data: AttendanceCreate
    ) -> AttendanceRecord:
        """Enter a record on behalf of a user.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user already has a record that day
        """
        await self.policy.can_create(principal, data.user_id)
        await self._get_user(data.user_id)

        if await self.repo.get_for_day(data.user_id, data.date) is not None:
            raise ConflictError(
                "Attendance already recorded for this day",
                error_code="attendance_exists",
                details={"user_id": data.user_id, "date": data.date.isoformat()},
            )
        return await self.repo.create(AttendanceRecord(**data.model_dump()))

    async def get_record(self, principal: Principal, attendance_id: int) -> AttendanceRecord:
        return await self.policy.ensure_access(principal, attendance_id)

    async def update_record(
        self, principal: Principal, attendance_id: int, data: AttendanceUpdate
    ) -> AttendanceRecord:
        """Update times or note of a record.

        Raises:
            BadRequestError: If the resulting times are out of order
        """
        record = await self.policy.ensure_access(principal, attendance_id, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        clock_in_at = changes.get("clock_in_at", record.clock_in_at)
        clock_out_at = changes.get("clock_out_at", record.clock_out_at)
        if clock_out_at is not None and (
            clock_in_at is None or as_utc(clock_out_at) < as_utc(clock_in_at)
        ):
            raise BadRequestError(
                "clock_out_at must not be before clock_in_at",
                error_code="invalid_clock_times",
            )

        for field, value in changes.items():
            setattr(record, field, value)
        return await self.repo.update(record)

    async def delete_record(self, principal: Principal, attendance_id: int) -> None:
        record = await self.policy.ensure_access(principal, attendance_id, Operation.DELETE)
        await self.repo.delete(record)


# Type alias for dependency injection
AttendanceSvc = Annotated[AttendanceService, Depends(AttendanceService)]
