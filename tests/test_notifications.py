"""Notification module test suite — listing, mark read, bulk mark, ownership."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.common.constants import NOTIFICATION_LIST_LIMIT
from dayflow.notifications.models import Notification
from dayflow.notifications.service import NotificationService
from tests.conftest import TestSessionFactory


# ── Helpers ─────────────────────────────────────────────────────────


async def _create_notification(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    title: str = "Test Notification",
    message: str = "Test message body",
) -> Notification:
    """Create a notification directly via the service."""
    return await NotificationService.create_notification(
        db, user_id=user_id, title=title, message=message,
    )


# ═════════════════════════════════════════════════════════════════════
# Service
# ═════════════════════════════════════════════════════════════════════


class TestNotificationService:

    async def test_create_notification_defaults_unread(self, db, employee):
        notification = await _create_notification(db, employee["id"])
        assert notification.id is not None
        assert notification.read is False

    async def test_list_is_capped(self, db, employee):
        for i in range(NOTIFICATION_LIST_LIMIT + 5):
            await _create_notification(db, employee["id"], title=f"n{i}")
        rows = await NotificationService.get_notifications(db, employee["id"])
        assert len(rows) == NOTIFICATION_LIST_LIMIT

    async def test_unread_count(self, db, employee):
        first = await _create_notification(db, employee["id"])
        await _create_notification(db, employee["id"])
        await NotificationService.mark_read(db, first.id, employee["id"])
        assert await NotificationService.get_unread_count(db, employee["id"]) == 1


# ═════════════════════════════════════════════════════════════════════
# HTTP
# ═════════════════════════════════════════════════════════════════════


async def _seed(user_id: uuid.UUID, count: int = 1) -> list[uuid.UUID]:
    async with TestSessionFactory() as session:
        ids = []
        for i in range(count):
            n = await _create_notification(session, user_id, title=f"Note {i}")
            ids.append(n.id)
        await session.commit()
    return ids


class TestNotificationEndpoints:

    async def test_list_own_notifications(self, client, employee, admin):
        await _seed(employee["id"], 2)
        await _seed(admin["id"], 1)

        resp = await client.get("/api/notifications", headers=employee["headers"])
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["data"]) == 2
        assert body["unread"] == 2
        assert all(n["user_id"] == str(employee["id"]) for n in body["data"])

    async def test_mark_read(self, client, employee):
        (note_id,) = await _seed(employee["id"])
        resp = await client.put(
            f"/api/notifications/{note_id}/read", headers=employee["headers"],
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["read"] is True

    async def test_mark_read_other_users_notification(self, client, employee, admin):
        (note_id,) = await _seed(admin["id"])
        resp = await client.put(
            f"/api/notifications/{note_id}/read", headers=employee["headers"],
        )
        assert resp.status_code == 403

        async with TestSessionFactory() as session:
            note = await session.get(Notification, note_id)
            assert note.read is False

    async def test_mark_read_missing(self, client, employee):
        resp = await client.put(
            f"/api/notifications/{uuid.uuid4()}/read", headers=employee["headers"],
        )
        assert resp.status_code == 404

    async def test_mark_all_read(self, client, employee, admin):
        await _seed(employee["id"], 3)
        await _seed(admin["id"], 1)

        resp = await client.put("/api/notifications/read-all", headers=employee["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"]["count"] == 3

        async with TestSessionFactory() as session:
            unread = (
                await session.execute(
                    select(Notification).where(Notification.read.is_(False))
                )
            ).scalars().all()
        assert [n.user_id for n in unread] == [admin["id"]]
