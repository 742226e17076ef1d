"""Profile self-service test suite — read and edit own contact fields."""

from __future__ import annotations

from dayflow.profiles.models import Profile
from tests.conftest import TestSessionFactory


async def test_get_own_profile(client, employee):
    resp = await client.get("/api/profile", headers=employee["headers"])
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == str(employee["id"])
    assert data["employee_id"] == employee["employee_id"]
    assert data["role"] == "employee"


async def test_update_own_contact_fields(client, employee):
    resp = await client.put(
        "/api/profile",
        headers=employee["headers"],
        json={"phone": "+91 98765 43210", "address": "12 MG Road, Pune"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["profile"]["phone"] == "+91 98765 43210"
    assert body["profile"]["address"] == "12 MG Road, Pune"
    # untouched fields keep their values
    assert body["profile"]["full_name"] == employee["full_name"]


async def test_employee_cannot_change_role(client, employee):
    resp = await client.put(
        "/api/profile",
        headers=employee["headers"],
        json={"role": "admin"},
    )
    assert resp.status_code == 400

    async with TestSessionFactory() as session:
        profile = await session.get(Profile, employee["id"])
        assert profile.role.value == "employee"


async def test_employee_cannot_change_salary(client, employee):
    resp = await client.put(
        "/api/profile",
        headers=employee["headers"],
        json={"basic_salary": "999999.00"},
    )
    assert resp.status_code == 400
    assert "basic_salary" in resp.json()["errors"]


async def test_profile_requires_auth(client):
    resp = await client.get("/api/profile")
    assert resp.status_code == 401
