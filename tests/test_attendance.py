"""Attendance module test suite — check in/out lifecycle, uniqueness, views."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

from sqlalchemy import func, select

from dayflow.attendance.models import AttendanceRecord
from dayflow.attendance.service import (
    MAX_HISTORY_RANGE_DAYS,
    AttendanceService,
    local_today,
    week_start,
)
from dayflow.common.constants import AttendanceStatus
from tests.conftest import TestSessionFactory


async def _seed_record(user_id, day: date, status=AttendanceStatus.present) -> None:
    async with TestSessionFactory() as session:
        session.add(
            AttendanceRecord(
                user_id=user_id,
                date=day,
                check_in=datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)
                + timedelta(hours=9),
                status=status,
            )
        )
        await session.commit()


# ── Week helper ─────────────────────────────────────────────────────


class TestWeekStart:

    def test_sunday_is_its_own_week_start(self):
        assert week_start(date(2026, 1, 4)) == date(2026, 1, 4)

    def test_saturday_goes_back_to_sunday(self):
        assert week_start(date(2026, 1, 10)) == date(2026, 1, 4)

    def test_monday(self):
        assert week_start(date(2026, 1, 5)) == date(2026, 1, 4)


# ── Check in / out ──────────────────────────────────────────────────


class TestCheckInOut:

    async def test_check_in_creates_present_row(self, client, employee):
        resp = await client.post("/api/attendance/check-in", headers=employee["headers"])
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["status"] == "present"
        assert data["date"] == local_today().isoformat()
        assert data["check_in"] is not None
        assert data["check_out"] is None

    async def test_double_check_in_conflict_single_row(self, client, employee):
        first = await client.post("/api/attendance/check-in", headers=employee["headers"])
        assert first.status_code == 201

        second = await client.post("/api/attendance/check-in", headers=employee["headers"])
        assert second.status_code == 409
        assert second.json() == {"error": "Already checked in today"}

        async with TestSessionFactory() as session:
            count = (
                await session.execute(
                    select(func.count())
                    .select_from(AttendanceRecord)
                    .where(AttendanceRecord.user_id == employee["id"])
                )
            ).scalar_one()
        assert count == 1

    async def test_concurrent_check_in_hits_unique_constraint(self, client, employee):
        """A racing check-in that misses the pre-check still gets 409."""
        first = await client.post("/api/attendance/check-in", headers=employee["headers"])
        assert first.status_code == 201

        with patch.object(
            AttendanceService, "_get_record", new=AsyncMock(return_value=None),
        ):
            second = await client.post(
                "/api/attendance/check-in", headers=employee["headers"],
            )
        assert second.status_code == 409
        assert second.json() == {"error": "Already checked in today"}

        async with TestSessionFactory() as session:
            count = (
                await session.execute(
                    select(func.count())
                    .select_from(AttendanceRecord)
                    .where(AttendanceRecord.user_id == employee["id"])
                )
            ).scalar_one()
        assert count == 1

    async def test_check_out_after_check_in(self, client, employee):
        await client.post("/api/attendance/check-in", headers=employee["headers"])
        resp = await client.post("/api/attendance/check-out", headers=employee["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"]["check_out"] is not None

    async def test_check_out_without_check_in(self, client, employee):
        resp = await client.post("/api/attendance/check-out", headers=employee["headers"])
        assert resp.status_code == 404

    async def test_double_check_out_conflict(self, client, employee):
        await client.post("/api/attendance/check-in", headers=employee["headers"])
        await client.post("/api/attendance/check-out", headers=employee["headers"])
        resp = await client.post("/api/attendance/check-out", headers=employee["headers"])
        assert resp.status_code == 409

    async def test_check_in_requires_auth(self, client):
        resp = await client.post("/api/attendance/check-in")
        assert resp.status_code == 401


# ── Reads ───────────────────────────────────────────────────────────


class TestAttendanceViews:

    async def test_today_is_null_before_check_in(self, client, employee):
        resp = await client.get("/api/attendance/today", headers=employee["headers"])
        assert resp.status_code == 200
        assert resp.json() == {"data": None}

    async def test_today_after_check_in(self, client, employee):
        await client.post("/api/attendance/check-in", headers=employee["headers"])
        resp = await client.get("/api/attendance/today", headers=employee["headers"])
        assert resp.json()["data"]["user_id"] == str(employee["id"])

    async def test_week_only_includes_current_week(self, client, employee):
        today = local_today()
        start = week_start(today)
        await _seed_record(employee["id"], start)
        await _seed_record(employee["id"], start - timedelta(days=1))

        resp = await client.get("/api/attendance/week", headers=employee["headers"])
        assert resp.status_code == 200
        dates = [row["date"] for row in resp.json()["data"]]
        assert dates == [start.isoformat()]

    async def test_history_range_newest_first(self, client, employee):
        await _seed_record(employee["id"], date(2026, 3, 2))
        await _seed_record(employee["id"], date(2026, 3, 3), AttendanceStatus.half_day)
        await _seed_record(employee["id"], date(2026, 4, 1))

        resp = await client.get(
            "/api/attendance/history",
            headers=employee["headers"],
            params={"from_date": "2026-03-01", "to_date": "2026-03-31"},
        )
        assert resp.status_code == 200
        rows = resp.json()["data"]
        assert [r["date"] for r in rows] == ["2026-03-03", "2026-03-02"]
        assert rows[0]["status"] == "half-day"

    async def test_history_inverted_range(self, client, employee):
        resp = await client.get(
            "/api/attendance/history",
            headers=employee["headers"],
            params={"from_date": "2026-03-31", "to_date": "2026-03-01"},
        )
        assert resp.status_code == 400

    async def test_history_is_scoped_to_caller(self, client, employee, admin):
        await _seed_record(admin["id"], date(2026, 3, 2))
        resp = await client.get(
            "/api/attendance/history",
            headers=employee["headers"],
            params={"from_date": "2026-03-01", "to_date": "2026-03-31"},
        )
        assert resp.json()["data"] == []

    async def test_history_range_cap(self, client, employee):
        start = date(2025, 1, 1)
        at_cap = start + timedelta(days=MAX_HISTORY_RANGE_DAYS)

        resp = await client.get(
            "/api/attendance/history",
            headers=employee["headers"],
            params={"from_date": start.isoformat(), "to_date": at_cap.isoformat()},
        )
        assert resp.status_code == 200

        resp = await client.get(
            "/api/attendance/history",
            headers=employee["headers"],
            params={
                "from_date": start.isoformat(),
                "to_date": (at_cap + timedelta(days=1)).isoformat(),
            },
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": f"Date range cannot exceed {MAX_HISTORY_RANGE_DAYS} days"}
