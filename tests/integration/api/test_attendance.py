"""Integration tests for attendance endpoints."""

import datetime as dt

import pytest
from httpx import AsyncClient

from workforce.core.utils.dates import local_today, working_days
from workforce.modules.attendance.models import AttendanceRecord


pytestmark = pytest.mark.integration


class TestClocking:
    """Tests for the clock-in / clock-out flow."""

    async def test_clock_in_then_out(self, client: AsyncClient, acme_employee, auth_headers):
        headers = auth_headers(acme_employee)

        clock_in = await client.post(
            "/api/v1/attendance/clock-in", json={"note": "On site"}, headers=headers
        )
        assert clock_in.status_code == 201
        record = clock_in.json()["data"]
        assert record["user_id"] == acme_employee.id
        assert record["clock_in_at"] is not None
        assert record["clock_out_at"] is None
        assert record["note"] == "On site"

        clock_out = await client.post("/api/v1/attendance/clock-out", json={}, headers=headers)
        assert clock_out.status_code == 200
        data = clock_out.json()["data"]
        assert data["id"] == record["id"]
        assert data["clock_out_at"] is not None
        assert data["hours_worked"] >= 0

    async def test_double_clock_in_rejected(
        self, client: AsyncClient, acme_employee, auth_headers
    ):
        headers = auth_headers(acme_employee)
        await client.post("/api/v1/attendance/clock-in", json={}, headers=headers)

        response = await client.post("/api/v1/attendance/clock-in", json={}, headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Already clocked in today"

    async def test_clock_out_without_clock_in(
        self, client: AsyncClient, acme_employee, auth_headers
    ):
        response = await client.post(
            "/api/v1/attendance/clock-out", json={}, headers=auth_headers(acme_employee)
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Must clock in before clocking out"

    async def test_double_clock_out_rejected(
        self, client: AsyncClient, acme_employee, auth_headers
    ):
        headers = auth_headers(acme_employee)
        await client.post("/api/v1/attendance/clock-in", json={}, headers=headers)
        await client.post("/api/v1/attendance/clock-out", json={}, headers=headers)

        response = await client.post("/api/v1/attendance/clock-out", json={}, headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Already clocked out today"

    async def test_admins_do_not_clock(self, client: AsyncClient, acme_admin, auth_headers):
        response = await client.post(
            "/api/v1/attendance/clock-in", json={}, headers=auth_headers(acme_admin)
        )

        assert response.status_code == 403

    async def test_unauthenticated_clock_in(self, client: AsyncClient):
        response = await client.post("/api/v1/attendance/clock-in", json={})

        assert response.status_code == 401


class TestRecords:
    """Tests for record management by admins and owners."""

    @pytest.fixture
    async def record(self, db, acme_employee) -> AttendanceRecord:
        record = AttendanceRecord(
            user_id=acme_employee.id,
            date=dt.date(2024, 3, 1),
            clock_in_at=dt.datetime(2024, 3, 1, 9, tzinfo=dt.UTC),
            clock_out_at=dt.datetime(2024, 3, 1, 17, 30, tzinfo=dt.UTC),
        )
        db.add(record)
        await db.flush()
        return record

    async def test_my_records_date_range(
        self, client: AsyncClient, acme_employee, record, auth_headers
    ):
        headers = auth_headers(acme_employee)

        inside = await client.get(
            "/api/v1/attendance/my-records",
            params={"start_date": "2024-03-01", "end_date": "2024-03-31"},
            headers=headers,
        )
        outside = await client.get(
            "/api/v1/attendance/my-records",
            params={"start_date": "2024-04-01"},
            headers=headers,
        )

        assert inside.status_code == 200
        assert [r["id"] for r in inside.json()["data"]] == [record.id]
        assert inside.json()["data"][0]["hours_worked"] == 8.5
        assert outside.json()["data"] == []
        assert outside.json()["pagination"]["total_records"] == 0

    async def test_inverted_range_rejected(
        self, client: AsyncClient, acme_employee, auth_headers
    ):
        response = await client.get(
            "/api/v1/attendance/my-records",
            params={"start_date": "2024-03-31", "end_date": "2024-03-01"},
            headers=auth_headers(acme_employee),
        )

        assert response.status_code == 400

    async def test_admin_creates_record_for_employee(
        self, client: AsyncClient, acme_admin, acme_employee, record, auth_headers
    ):
        headers = auth_headers(acme_admin)
        payload = {
            "user_id": acme_employee.id,
            "date": "2024-03-02",
            "clock_in_at": "2024-03-02T09:00:00Z",
            "clock_out_at": "2024-03-02T12:00:00Z",
        }

        created = await client.post("/api/v1/attendance/create", json=payload, headers=headers)
        duplicate = await client.post(
            "/api/v1/attendance/create",
            json={**payload, "date": "2024-03-01"},
            headers=headers,
        )

        assert created.status_code == 201
        assert created.json()["data"]["hours_worked"] == 3.0
        assert duplicate.status_code == 409

    async def test_owner_updates_note(
        self, client: AsyncClient, acme_employee, record, auth_headers
    ):
        response = await client.patch(
            f"/api/v1/attendance/{record.id}",
            json={"note": "Left early for appointment"},
            headers=auth_headers(acme_employee),
        )

        assert response.status_code == 200
        assert response.json()["data"]["note"] == "Left early for appointment"

    async def test_clock_out_before_clock_in_rejected(
        self, client: AsyncClient, acme_admin, record, auth_headers
    ):
        response = await client.patch(
            f"/api/v1/attendance/{record.id}",
            json={"clock_out_at": "2024-03-01T08:00:00Z"},
            headers=auth_headers(acme_admin),
        )

        assert response.status_code == 400

    async def test_employee_cannot_delete(
        self, client: AsyncClient, acme_employee, record, auth_headers
    ):
        response = await client.delete(
            f"/api/v1/attendance/{record.id}", headers=auth_headers(acme_employee)
        )

        assert response.status_code == 403

    async def test_admin_deletes_record(
        self, client: AsyncClient, acme_admin, record, auth_headers
    ):
        headers = auth_headers(acme_admin)

        deleted = await client.delete(f"/api/v1/attendance/{record.id}", headers=headers)
        lookup = await client.get(f"/api/v1/attendance/{record.id}", headers=headers)

        assert deleted.status_code == 200
        assert deleted.json()["data"] is None
        assert lookup.status_code == 404

    async def test_today_lists_own_company_only(
        self, client: AsyncClient, acme_admin, acme_employee, globex_employee, auth_headers
    ):
        await client.post(
            "/api/v1/attendance/clock-in", json={}, headers=auth_headers(acme_employee)
        )
        await client.post(
            "/api/v1/attendance/clock-in", json={}, headers=auth_headers(globex_employee)
        )

        response = await client.get("/api/v1/attendance/today", headers=auth_headers(acme_admin))

        assert response.status_code == 200
        assert {r["user_id"] for r in response.json()["data"]} == {acme_employee.id}

    async def test_today_follows_each_users_timezone(
        self, client: AsyncClient, db, acme, acme_admin, make_user, auth_headers
    ):
        # UTC+14 and UTC-11 are always on different calendar days
        east = await make_user(company=acme, timezone="Pacific/Kiritimati")
        west = await make_user(company=acme, timezone="Pacific/Pago_Pago")
        east_today = local_today(east.timezone)
        west_today = local_today(west.timezone)
        db.add_all(
            [
                AttendanceRecord(user_id=east.id, date=east_today),
                AttendanceRecord(user_id=west.id, date=west_today),
                AttendanceRecord(user_id=east.id, date=west_today),
            ]
        )
        await db.flush()

        response = await client.get("/api/v1/attendance/today", headers=auth_headers(acme_admin))

        data = response.json()["data"]
        assert {(r["user_id"], r["date"]) for r in data} == {
            (east.id, east_today.isoformat()),
            (west.id, west_today.isoformat()),
        }
        assert response.json()["pagination"]["total_records"] == 2


class TestAttendanceStats:
    async def test_year_to_date(self, client: AsyncClient, db, acme_employee, auth_headers):
        today = local_today("UTC")
        clock_in = dt.datetime.combine(today, dt.time(8), tzinfo=dt.UTC)
        db.add_all(
            [
                AttendanceRecord(
                    user_id=acme_employee.id,
                    date=today,
                    clock_in_at=clock_in,
                    clock_out_at=clock_in + dt.timedelta(hours=8),
                ),
                AttendanceRecord(
                    user_id=acme_employee.id,
                    date=today.replace(year=today.year - 1, day=1),
                    clock_in_at=clock_in,
                ),
            ]
        )
        await db.flush()

        response = await client.get(
            "/api/v1/attendance/stats", headers=auth_headers(acme_employee)
        )

        assert response.status_code == 200
        stats = response.json()["data"]
        workdays = working_days(today.replace(month=1, day=1), today)
        assert stats["user_id"] == acme_employee.id
        assert stats["year"] == today.year
        assert stats["total_days"] == 1
        assert stats["present_days"] == 1
        assert stats["complete_days"] == 1
        assert stats["total_hours"] == 8.0
        assert stats["average_hours"] == 8.0
        assert stats["working_days"] == workdays
        assert stats["absence_days"] == max(0, workdays - 1)

    async def test_admin_reads_employee_stats(
        self, client: AsyncClient, acme_admin, acme_employee, auth_headers
    ):
        response = await client.get(
            "/api/v1/attendance/stats",
            params={"user_id": acme_employee.id},
            headers=auth_headers(acme_admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["user_id"] == acme_employee.id

    @pytest.mark.parametrize("caller", ["globex_admin", "globex_employee"])
    async def test_other_users_stats_are_refused(
        self, client: AsyncClient, request, acme_employee, auth_headers, caller
    ):
        user = request.getfixturevalue(caller)

        response = await client.get(
            "/api/v1/attendance/stats",
            params={"user_id": acme_employee.id},
            headers=auth_headers(user),
        )

        assert response.status_code == 403


class TestHoursReport:
    """Hours per employee over 2024-03-03 (Sunday) to 2024-03-09 (Saturday)."""

    RANGE = {"start_date": "2024-03-03", "end_date": "2024-03-09"}

    @pytest.fixture
    async def alice(self, db, make_user, acme):
        alice = await make_user(company=acme, full_name="Alice Archer")
        clock_in = dt.datetime(2024, 3, 3, 8, tzinfo=dt.UTC)
        db.add_all(
            [
                AttendanceRecord(
                    user_id=alice.id,
                    date=dt.date(2024, 3, 3),
                    clock_in_at=clock_in,
                    clock_out_at=clock_in + dt.timedelta(hours=8),
                ),
                AttendanceRecord(
                    user_id=alice.id,
                    date=dt.date(2024, 3, 4),
                    clock_in_at=clock_in + dt.timedelta(days=1),
                ),
                AttendanceRecord(
                    user_id=alice.id,
                    date=dt.date(2024, 3, 10),
                    clock_in_at=clock_in + dt.timedelta(days=7),
                ),
            ]
        )
        await db.flush()
        return alice

    @pytest.fixture
    async def bob(self, make_user, acme):
        return await make_user(company=acme, full_name="Bob Baker")

    async def test_rows_per_employee(
        self, client: AsyncClient, acme_admin, alice, bob, globex_employee, auth_headers
    ):
        response = await client.get(
            "/api/v1/attendance/hours", params=self.RANGE, headers=auth_headers(acme_admin)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total_records"] == 3
        first, second = body["data"][:2]
        assert first["user_id"] == alice.id
        assert first["total_hours"] == 8.0
        assert first["present_days"] == 2
        assert first["work_days"] == 5
        assert first["attendance_rate"] == 40.0
        assert len(first["daily"]) == 7
        assert first["daily"][0]["hours_worked"] == 8.0
        assert first["daily"][1]["hours_worked"] == 0.0
        assert first["daily"][1]["clock_in_at"] is not None
        assert second["user_id"] == bob.id
        assert second["total_hours"] == 0.0
        assert globex_employee.id not in {row["user_id"] for row in body["data"]}

    async def test_search_and_paging(
        self, client: AsyncClient, acme_admin, alice, bob, auth_headers
    ):
        headers = auth_headers(acme_admin)

        searched = await client.get(
            "/api/v1/attendance/hours",
            params={**self.RANGE, "search": "ali"},
            headers=headers,
        )
        paged = await client.get(
            "/api/v1/attendance/hours",
            params={**self.RANGE, "limit": 1, "page": 2},
            headers=headers,
        )

        assert [row["user_id"] for row in searched.json()["data"]] == [alice.id]
        assert [row["user_id"] for row in paged.json()["data"]] == [bob.id]
        assert paged.json()["pagination"]["total_records"] == 3

    async def test_super_admin_names_company(
        self, client: AsyncClient, super_admin, acme, alice, auth_headers
    ):
        headers = auth_headers(super_admin)

        missing = await client.get("/api/v1/attendance/hours", params=self.RANGE, headers=headers)
        named = await client.get(
            "/api/v1/attendance/hours",
            params={**self.RANGE, "company_id": acme.id},
            headers=headers,
        )

        assert missing.status_code == 400
        assert named.status_code == 200
        assert named.json()["data"][0]["user_id"] == alice.id

    async def test_foreign_company_refused(
        self, client: AsyncClient, acme_admin, globex, auth_headers
    ):
        response = await client.get(
            "/api/v1/attendance/hours",
            params={**self.RANGE, "company_id": globex.id},
            headers=auth_headers(acme_admin),
        )

        assert response.status_code == 403

    @pytest.mark.parametrize(
        "params",
        [
            {"start_date": "2024-03-09", "end_date": "2024-03-03"},
            {"start_date": "2023-01-01", "end_date": "2024-03-03"},
        ],
    )
    async def test_bad_range_rejected(
        self, client: AsyncClient, acme_admin, auth_headers, params
    ):
        response = await client.get(
            "/api/v1/attendance/hours", params=params, headers=auth_headers(acme_admin)
        )

        assert response.status_code == 400

    async def test_employees_are_refused(
        self, client: AsyncClient, acme_employee, auth_headers
    ):
        response = await client.get(
            "/api/v1/attendance/hours", params=self.RANGE, headers=auth_headers(acme_employee)
        )

        assert response.status_code == 403
