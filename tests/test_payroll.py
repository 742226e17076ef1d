"""Payroll module test suite — admin entry, immutability of period, payslips."""

from __future__ import annotations

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, patch

from sqlalchemy import func, select

from dayflow.common.audit import AuditLog
from dayflow.notifications.models import Notification
from dayflow.payroll.models import PayrollRecord
from dayflow.payroll.service import PayrollService
from tests.conftest import TestSessionFactory


def _payroll_body(user_id, **overrides) -> dict:
    body = {
        "user_id": str(user_id),
        "month": 1,
        "year": 2026,
        "basic_salary": "50000.00",
        "allowances": "5000.50",
        "deductions": "2000.25",
    }
    body.update(overrides)
    return body


async def _create(client, admin, user_id, **overrides) -> dict:
    resp = await client.post(
        "/api/admin/payroll",
        headers=admin["headers"],
        json=_payroll_body(user_id, **overrides),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["payroll"]


# ── Create ──────────────────────────────────────────────────────────


class TestCreatePayroll:

    async def test_net_salary_is_computed(self, client, admin, employee):
        payroll = await _create(client, admin, employee["id"])
        assert Decimal(payroll["net_salary"]) == Decimal("53000.25")
        assert payroll["payment_status"] == "pending"

    async def test_defaults_for_allowances_and_deductions(self, client, admin, employee):
        resp = await client.post(
            "/api/admin/payroll",
            headers=admin["headers"],
            json={"user_id": str(employee["id"]), "month": 2, "year": 2026, "basic_salary": "40000"},
        )
        assert resp.status_code == 201
        payroll = resp.json()["payroll"]
        assert Decimal(payroll["allowances"]) == 0
        assert Decimal(payroll["net_salary"]) == Decimal("40000")

    async def test_duplicate_period_conflict(self, client, admin, employee):
        await _create(client, admin, employee["id"])
        resp = await client.post(
            "/api/admin/payroll",
            headers=admin["headers"],
            json=_payroll_body(employee["id"], basic_salary="1.00"),
        )
        assert resp.status_code == 409

        async with TestSessionFactory() as session:
            count = (
                await session.execute(select(func.count()).select_from(PayrollRecord))
            ).scalar_one()
        assert count == 1

    async def test_concurrent_duplicate_hits_unique_constraint(self, client, admin, employee):
        """A racing create that misses the pre-check still gets 409."""
        await _create(client, admin, employee["id"])

        with patch.object(
            PayrollService, "_period_exists", new=AsyncMock(return_value=False),
        ):
            resp = await client.post(
                "/api/admin/payroll",
                headers=admin["headers"],
                json=_payroll_body(employee["id"], basic_salary="1.00"),
            )
        assert resp.status_code == 409

        async with TestSessionFactory() as session:
            rows = (await session.execute(select(PayrollRecord))).scalars().all()
        assert len(rows) == 1
        assert rows[0].basic_salary == Decimal("50000.00")

    async def test_maximum_amounts_fit_net_salary(self, client, admin, employee):
        payroll = await _create(
            client, admin, employee["id"],
            basic_salary="99999999.99", allowances="99999999.99", deductions="0",
        )
        assert Decimal(payroll["net_salary"]) == Decimal("199999999.98")

        net_type = PayrollRecord.__table__.c.net_salary.type
        amount_type = PayrollRecord.__table__.c.basic_salary.type
        assert net_type.precision >= amount_type.precision + 1

    async def test_amount_above_column_precision_rejected(self, client, admin, employee):
        resp = await client.post(
            "/api/admin/payroll",
            headers=admin["headers"],
            json=_payroll_body(employee["id"], basic_salary="100000000.00"),
        )
        assert resp.status_code == 400
        assert "basic_salary" in resp.json()["errors"]

    async def test_unknown_user(self, client, admin):
        resp = await client.post(
            "/api/admin/payroll",
            headers=admin["headers"],
            json=_payroll_body(uuid.uuid4()),
        )
        assert resp.status_code == 404

    async def test_month_out_of_range(self, client, admin, employee):
        resp = await client.post(
            "/api/admin/payroll",
            headers=admin["headers"],
            json=_payroll_body(employee["id"], month=13),
        )
        assert resp.status_code == 400
        assert "month" in resp.json()["errors"]

    async def test_create_writes_audit_and_notification(self, client, admin, employee):
        await _create(client, admin, employee["id"])

        async with TestSessionFactory() as session:
            audit = (await session.execute(select(AuditLog))).scalars().one()
            note = (await session.execute(select(Notification))).scalars().one()

        assert audit.action == "Payroll Created"
        assert audit.details["net_salary"] == "53000.25"
        assert note.user_id == employee["id"]
        assert note.title == "Payroll Updated"
        assert note.message == "Payroll for 1/2026 has been processed."


# ── Update ──────────────────────────────────────────────────────────


class TestUpdatePayroll:

    async def test_update_amounts_recomputes_net(self, client, admin, employee):
        payroll = await _create(client, admin, employee["id"])
        resp = await client.put(
            f"/api/admin/payroll/{payroll['id']}",
            headers=admin["headers"],
            json={"deductions": "0", "payment_status": "paid"},
        )
        assert resp.status_code == 200
        updated = resp.json()["payroll"]
        assert Decimal(updated["net_salary"]) == Decimal("55000.50")
        assert updated["payment_status"] == "paid"

    async def test_period_and_employee_are_immutable(self, client, admin, employee):
        payroll = await _create(client, admin, employee["id"])
        for field, value in (
            ("month", 2),
            ("year", 2027),
            ("user_id", str(admin["id"])),
        ):
            resp = await client.put(
                f"/api/admin/payroll/{payroll['id']}",
                headers=admin["headers"],
                json={field: value},
            )
            assert resp.status_code == 400, field

        async with TestSessionFactory() as session:
            row = await session.get(PayrollRecord, uuid.UUID(payroll["id"]))
            assert (row.user_id, row.month, row.year) == (employee["id"], 1, 2026)

    async def test_empty_update_rejected(self, client, admin, employee):
        payroll = await _create(client, admin, employee["id"])
        resp = await client.put(
            f"/api/admin/payroll/{payroll['id']}",
            headers=admin["headers"],
            json={},
        )
        assert resp.status_code == 400

    async def test_update_unknown_payroll(self, client, admin):
        resp = await client.put(
            f"/api/admin/payroll/{uuid.uuid4()}",
            headers=admin["headers"],
            json={"payment_status": "paid"},
        )
        assert resp.status_code == 404


# ── Employee view ───────────────────────────────────────────────────


class TestMyPayroll:

    async def test_own_payroll_summary(self, client, admin, employee):
        await _create(client, admin, employee["id"], month=1)
        await _create(client, admin, employee["id"], month=2, allowances="0", deductions="0")

        resp = await client.get("/api/payroll", headers=employee["headers"])
        assert resp.status_code == 200
        body = resp.json()
        assert [(r["month"], r["year"]) for r in body["data"]] == [(2, 2026), (1, 2026)]
        assert Decimal(body["total_earnings"]) == Decimal("103000.25")
        assert body["latest"]["month"] == 2

    async def test_no_payroll_yet(self, client, employee):
        resp = await client.get("/api/payroll", headers=employee["headers"])
        assert resp.json() == {"data": [], "total_earnings": "0", "latest": None}

    async def test_only_own_rows_visible(self, client, admin, employee):
        await _create(client, admin, admin["id"])
        resp = await client.get("/api/payroll", headers=employee["headers"])
        assert resp.json()["data"] == []
