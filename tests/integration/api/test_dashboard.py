"""Integration tests for dashboard endpoints."""

import datetime as dt

import pytest
from httpx import AsyncClient

from workforce.core.auth import Role
from workforce.core.utils.dates import WORKING_WEEKDAYS, local_today, week_start
from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.tasks.models import Task


pytestmark = pytest.mark.integration


def _shift(user, day: dt.date, hours: float | None) -> AttendanceRecord:
    """A record clocked in at 08:00 UTC; ``hours=None`` leaves it open."""
    clock_in = dt.datetime.combine(day, dt.time(8), tzinfo=dt.UTC)
    return AttendanceRecord(
        user_id=user.id,
        date=day,
        clock_in_at=clock_in,
        clock_out_at=clock_in + dt.timedelta(hours=hours) if hours is not None else None,
    )


@pytest.fixture
def today() -> dt.date:
    return local_today("UTC")


class TestEmployeeDashboard:
    async def test_week_against_previous_week(
        self, client: AsyncClient, db, acme_employee, auth_headers, today
    ):
        start = week_start(today)
        db.add_all(
            [
                _shift(acme_employee, start, 8),
                _shift(acme_employee, start - dt.timedelta(days=7), 4),
                Task(user_id=acme_employee.id, date=start, title="Audit", duration=2),
                Task(user_id=acme_employee.id, date=start, title="Review", duration=1),
                Task(
                    user_id=acme_employee.id,
                    date=start - dt.timedelta(days=7),
                    title="Plan",
                    duration=1,
                ),
            ]
        )
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/employee", headers=auth_headers(acme_employee)
        )

        assert response.status_code == 200
        week = response.json()["data"]["week"]
        assert week["week_start"] == start.isoformat()
        assert week["week_end"] == (start + dt.timedelta(days=4)).isoformat()
        assert week["hours"] == 8.0
        assert week["hours_change_percentage"] == 100.0
        assert week["tasks"] == 2
        assert week["tasks_change_percentage"] == 100.0
        assert week["present_days"] == 1
        assert week["previous_week_present_days"] == 1
        assert week["present_days_change_percentage"] == 0.0
        assert week["absence_days"] == 4
        assert week["working_days"] == 5

    async def test_empty_history(self, client: AsyncClient, acme_employee, auth_headers, today):
        response = await client.get(
            "/api/v1/dashboard/employee", headers=auth_headers(acme_employee)
        )

        data = response.json()["data"]
        assert data["today"] == {
            "date": today.isoformat(),
            "clock_in_at": None,
            "clock_out_at": None,
            "status": "not_started",
        }
        assert data["week"]["hours_change_percentage"] == 0.0
        assert data["recent_tasks"] == []

    async def test_recent_tasks_are_the_newest_five(
        self, client: AsyncClient, db, acme_employee, auth_headers, today
    ):
        tasks = [
            Task(user_id=acme_employee.id, date=today, title=f"Task {n}", duration=1)
            for n in range(6)
        ]
        db.add_all(tasks)
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/employee", headers=auth_headers(acme_employee)
        )

        recent = response.json()["data"]["recent_tasks"]
        assert len(recent) == 5
        assert recent[0]["title"] == "Task 5"

    async def test_quick_stats_while_clocked_in(
        self, client: AsyncClient, db, acme_employee, auth_headers, today
    ):
        db.add_all(
            [
                _shift(acme_employee, today, None),
                Task(user_id=acme_employee.id, date=today, title="Audit", duration=2),
            ]
        )
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/employee/quick-stats", headers=auth_headers(acme_employee)
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "is_clocked_in": True,
            "today_status": "active",
            "total_tasks": 1,
            "monthly_attendance": 1,
        }

    async def test_performance_this_month_against_last(
        self, client: AsyncClient, db, acme_employee, auth_headers, today
    ):
        last_month = today.replace(day=1) - dt.timedelta(days=1)
        db.add_all(
            [
                _shift(acme_employee, today, 8),
                Task(user_id=acme_employee.id, date=today, title="Audit", duration=3),
                Task(user_id=acme_employee.id, date=today, title="Review", duration=1),
                Task(user_id=acme_employee.id, date=last_month, title="Plan", duration=2),
            ]
        )
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/employee/analytics/performance",
            headers=auth_headers(acme_employee),
        )

        data = response.json()["data"]
        assert data["productivity"] == {
            "this_month": 4.0,
            "last_month": 2.0,
            "change_percentage": 100.0,
        }
        assert data["tasks_this_month"] == 2
        assert data["average_task_hours"] == 2.0
        assert data["attendance"] == {
            "present_days": 1,
            "percentage": round(100 / today.day),
        }
        assert data["goals"]["monthly_task_hours"] == 160

    @pytest.mark.parametrize(
        "path",
        [
            "/api/v1/dashboard/employee",
            "/api/v1/dashboard/employee/quick-stats",
            "/api/v1/dashboard/employee/analytics/performance",
        ],
    )
    async def test_admins_have_no_employee_dashboard(
        self, client: AsyncClient, acme_admin, auth_headers, path
    ):
        response = await client.get(path, headers=auth_headers(acme_admin))

        assert response.status_code == 403


class TestCompanyDashboard:
    async def test_counts_only_own_employees(
        self,
        client: AsyncClient,
        db,
        make_user,
        acme,
        acme_admin,
        acme_employee,
        globex_employee,
        auth_headers,
        today,
    ):
        await make_user(role=Role.EMPLOYEE, company=acme)
        start = week_start(today)
        db.add_all(
            [
                _shift(acme_employee, today, 8),
                _shift(globex_employee, today, 8),
                Task(user_id=acme_employee.id, date=start, title="Audit", duration=2),
                Task(user_id=globex_employee.id, date=start, title="Other", duration=2),
            ]
        )
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/company-admin", headers=auth_headers(acme_admin)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["company_id"] == acme.id
        assert data["total_employees"] == 2
        assert data["today"] == {"present": 1, "total": 2, "rate": 50}
        assert data["week"]["tasks"] == 1
        expected_hours = 8.0 if today.weekday() in WORKING_WEEKDAYS else 0.0
        assert data["week"]["total_hours"] == expected_hours
        assert data["week"]["average_hours_per_employee"] == expected_hours / 2

    async def test_super_admin_must_name_company(
        self, client: AsyncClient, super_admin, globex, auth_headers
    ):
        headers = auth_headers(super_admin)

        missing = await client.get("/api/v1/dashboard/company-admin", headers=headers)
        named = await client.get(
            "/api/v1/dashboard/company-admin",
            params={"company_id": globex.id},
            headers=headers,
        )
        unknown = await client.get(
            "/api/v1/dashboard/company-admin",
            params={"company_id": 999999},
            headers=headers,
        )

        assert missing.status_code == 400
        assert missing.json()["type"].endswith("/errors/company_required")
        assert named.status_code == 200
        assert named.json()["data"]["company_id"] == globex.id
        assert unknown.status_code == 404

    @pytest.mark.parametrize(
        "path",
        [
            "/api/v1/dashboard/company-admin",
            "/api/v1/dashboard/company-admin/top-performers",
            "/api/v1/dashboard/company-admin/recent-tasks",
        ],
    )
    async def test_admin_cannot_report_on_other_company(
        self, client: AsyncClient, acme_admin, globex, auth_headers, path
    ):
        response = await client.get(
            path, params={"company_id": globex.id}, headers=auth_headers(acme_admin)
        )

        assert response.status_code == 403

    async def test_employees_are_refused(
        self, client: AsyncClient, acme_employee, auth_headers
    ):
        response = await client.get(
            "/api/v1/dashboard/company-admin", headers=auth_headers(acme_employee)
        )

        assert response.status_code == 403

    async def test_top_performers(
        self,
        client: AsyncClient,
        db,
        make_user,
        acme,
        acme_admin,
        globex_employee,
        auth_headers,
        today,
    ):
        for hours in (1, 2, 3, 4, 5):
            employee = await make_user(role=Role.EMPLOYEE, company=acme)
            db.add(_shift(employee, today, hours))
        still_working = await make_user(role=Role.EMPLOYEE, company=acme)
        db.add(_shift(still_working, today, None))
        db.add(_shift(globex_employee, today, 10))
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/company-admin/top-performers",
            headers=auth_headers(acme_admin),
        )

        data = response.json()["data"]
        assert data["total_employees_worked"] == 5
        assert [p["hours_worked"] for p in data["performers"]] == [5.0, 4.0, 3.0, 2.0]
        assert data["highest_hours"] == 5.0
        assert data["average_hours"] == 3.5

    async def test_recent_tasks(
        self,
        client: AsyncClient,
        db,
        acme_admin,
        acme_employee,
        globex_employee,
        auth_headers,
        today,
    ):
        db.add_all(
            [
                Task(user_id=acme_employee.id, date=today, title=f"Task {n}", duration=1.5)
                for n in range(5)
            ]
        )
        await db.flush()
        db.add(Task(user_id=globex_employee.id, date=today, title="Foreign", duration=9))
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/company-admin/recent-tasks",
            headers=auth_headers(acme_admin),
        )

        data = response.json()["data"]
        assert [t["title"] for t in data["tasks"]] == ["Task 4", "Task 3", "Task 2", "Task 1"]
        assert {t["employee"]["id"] for t in data["tasks"]} == {acme_employee.id}
        assert data["total_duration"] == 6.0
        assert data["average_duration"] == 1.5


class TestPlatformDashboard:
    async def test_platform_totals(
        self,
        client: AsyncClient,
        db,
        super_admin,
        acme,
        globex,
        acme_employee,
        globex_employee,
        auth_headers,
        today,
    ):
        yesterday = today - dt.timedelta(days=1)
        db.add_all(
            [
                _shift(acme_employee, yesterday, 8),
                _shift(globex_employee, today, 3),
                Task(user_id=acme_employee.id, date=yesterday, title="Audit", duration=2),
                Task(user_id=globex_employee.id, date=today, title="Review", duration=1),
            ]
        )
        await db.flush()

        response = await client.get(
            "/api/v1/dashboard/super-admin", headers=auth_headers(super_admin)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["id"] for c in data["top_companies_by_work_hours"]] == [acme.id, globex.id]
        assert data["top_companies_by_work_hours"][0]["total_work_hours"] == 8.0
        assert data["statistics"] == {
            "total_companies": 2,
            "total_users": 3,
            "today_total_work_hours": 3.0,
            "today_total_tasks": 1,
        }
        assert data["last_tasks"][0]["company"] == {"id": globex.id, "name": globex.name}

    async def test_company_admins_are_refused(
        self, client: AsyncClient, acme_admin, auth_headers
    ):
        response = await client.get(
            "/api/v1/dashboard/super-admin", headers=auth_headers(acme_admin)
        )

        assert response.status_code == 403
