"""Integration tests for tenant isolation.

A company admin must never reach another company's records, and a record
of another company must be indistinguishable from one that does not exist.
"""

import datetime as dt

import pytest
from httpx import AsyncClient

from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.tasks.models import Task


pytestmark = pytest.mark.integration


def _comparable(body: dict) -> dict:
    """Problem body without the per-request fields."""
    return {k: v for k, v in body.items() if k not in {"instance", "trace_id"}}


@pytest.fixture
async def globex_task(db, globex_employee) -> Task:
    task = Task(
        user_id=globex_employee.id,
        date=dt.date(2024, 3, 1),
        title="Ship order 42",
        duration=1.5,
    )
    db.add(task)
    await db.flush()
    return task


@pytest.fixture
async def globex_record(db, globex_employee) -> AttendanceRecord:
    record = AttendanceRecord(
        user_id=globex_employee.id,
        date=dt.date(2024, 3, 1),
        clock_in_at=dt.datetime(2024, 3, 1, 8, tzinfo=dt.UTC),
    )
    db.add(record)
    await db.flush()
    return record


class TestForeignRecordsLookMissing:
    """Cross-tenant lookups by id return the same 404 as missing ids."""

    async def test_foreign_task_is_not_found(
        self, client: AsyncClient, acme_admin, globex_task, auth_headers
    ):
        headers = auth_headers(acme_admin)

        foreign = await client.get(f"/api/v1/tasks/{globex_task.id}", headers=headers)
        missing = await client.get("/api/v1/tasks/999999", headers=headers)

        assert foreign.status_code == 404
        assert missing.status_code == 404
        assert _comparable(foreign.json()) == _comparable(missing.json())
        assert "Ship order" not in foreign.text

    async def test_foreign_attendance_is_not_found(
        self, client: AsyncClient, acme_admin, globex_record, auth_headers
    ):
        headers = auth_headers(acme_admin)

        foreign = await client.get(f"/api/v1/attendance/{globex_record.id}", headers=headers)
        missing = await client.get("/api/v1/attendance/999999", headers=headers)

        assert foreign.status_code == 404
        assert _comparable(foreign.json()) == _comparable(missing.json())

    async def test_foreign_user_is_not_found(
        self, client: AsyncClient, acme_admin, globex_employee, auth_headers
    ):
        response = await client.get(
            f"/api/v1/users/{globex_employee.id}", headers=auth_headers(acme_admin)
        )

        assert response.status_code == 404

    async def test_foreign_company_is_not_found(
        self, client: AsyncClient, acme_admin, globex, auth_headers
    ):
        response = await client.get(
            f"/api/v1/companies/{globex.id}", headers=auth_headers(acme_admin)
        )

        assert response.status_code == 404

    async def test_foreign_task_cannot_be_modified(
        self, client: AsyncClient, db, acme_admin, globex_task, auth_headers
    ):
        headers = auth_headers(acme_admin)

        patch = await client.patch(
            f"/api/v1/tasks/{globex_task.id}", json={"title": "Hijacked"}, headers=headers
        )
        delete = await client.delete(f"/api/v1/tasks/{globex_task.id}", headers=headers)

        assert patch.status_code == 404
        assert delete.status_code == 404
        await db.refresh(globex_task)
        assert globex_task.title == "Ship order 42"

    async def test_employee_cannot_read_colleague_task(
        self, client: AsyncClient, db, acme, acme_employee, make_user, auth_headers
    ):
        colleague = await make_user(company=acme)
        task = Task(user_id=colleague.id, date=dt.date(2024, 3, 1), title="Private", duration=1)
        db.add(task)
        await db.flush()

        response = await client.get(f"/api/v1/tasks/{task.id}", headers=auth_headers(acme_employee))

        assert response.status_code == 404


class TestExplicitCompanyTargets:
    """Naming another company explicitly is refused outright."""

    async def test_company_tasks_of_foreign_company_forbidden(
        self, client: AsyncClient, acme_admin, globex, auth_headers
    ):
        response = await client.get(
            f"/api/v1/tasks/company/{globex.id}", headers=auth_headers(acme_admin)
        )

        assert response.status_code == 403
        body = response.json()
        assert body["detail"] == "Access forbidden"
        assert "reason" not in body

    async def test_report_for_nonexistent_company_forbidden_for_company_admin(
        self, client: AsyncClient, acme_admin, auth_headers
    ):
        response = await client.get(
            "/api/v1/companies/999999/report/daily", headers=auth_headers(acme_admin)
        )

        assert response.status_code == 403

    async def test_report_for_nonexistent_company_not_found_for_super_admin(
        self, client: AsyncClient, super_admin, auth_headers
    ):
        response = await client.get(
            "/api/v1/companies/999999/report/daily", headers=auth_headers(super_admin)
        )

        assert response.status_code == 404

    async def test_creating_task_for_foreign_user_forbidden(
        self, client: AsyncClient, acme_admin, globex_employee, auth_headers
    ):
        response = await client.post(
            "/api/v1/tasks",
            json={
                "user_id": globex_employee.id,
                "date": "2024-03-01",
                "title": "Not yours",
            },
            headers=auth_headers(acme_admin),
        )

        assert response.status_code == 403


class TestListingsStayInTenant:
    async def test_user_listing_only_shows_own_company(
        self,
        client: AsyncClient,
        acme,
        make_user,
        make_sub_role,
        acme_employee,
        globex_employee,
        auth_headers,
    ):
        sub_role = await make_sub_role({"users.read": True}, company=acme)
        admin = await make_user(role="COMPANY_ADMIN", company=acme, sub_role=sub_role)

        response = await client.get("/api/v1/users", headers=auth_headers(admin))

        assert response.status_code == 200
        ids = {u["id"] for u in response.json()["data"]}
        assert acme_employee.id in ids
        assert globex_employee.id not in ids

    async def test_super_admin_sees_every_company(
        self, client: AsyncClient, super_admin, acme, globex, auth_headers
    ):
        response = await client.get("/api/v1/companies", headers=auth_headers(super_admin))

        assert response.status_code == 200
        names = {c["name"] for c in response.json()["data"]}
        assert {"Acme Corporation", "Globex Industries"} <= names
