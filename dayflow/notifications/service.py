"""Notification service — CRUD operations and cross-module helper dispatchers."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.common.constants import NOTIFICATION_LIST_LIMIT, LeaveAction
from dayflow.common.exceptions import ForbiddenException, NotFoundException
from dayflow.notifications.models import Notification


# ── Core service ────────────────────────────────────────────────────


class NotificationService:
    """Async notification operations."""

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        title: str,
        message: str,
    ) -> Notification:
        """Create a new notification and flush to DB."""
        notification = Notification(user_id=user_id, title=title, message=message)
        db.add(notification)
        await db.flush()
        return notification

    @staticmethod
    async def get_notifications(
        db: AsyncSession,
        user_id: uuid.UUID,
        *,
        limit: int = NOTIFICATION_LIST_LIMIT,
    ) -> list[Notification]:
        """Return the newest notifications for a user."""
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def mark_read(
        db: AsyncSession,
        notification_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Notification:
        """Mark a single notification as read. Verifies ownership."""
        notification = await db.get(Notification, notification_id)

        if notification is None:
            raise NotFoundException("Notification", notification_id)

        if notification.user_id != user_id:
            raise ForbiddenException("You can only mark your own notifications as read.")

        notification.read = True
        await db.flush()
        return notification

    @staticmethod
    async def mark_all_read(
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> int:
        """Bulk-mark all unread notifications as read. Returns count updated."""
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
            .values(read=True)
        )
        await db.flush()
        return result.rowcount  # type: ignore[return-value]

    @staticmethod
    async def get_unread_count(
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> int:
        """Return the number of unread notifications for a user."""
        result = await db.execute(
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        )
        return result.scalar_one()


# ── Cross-module helper dispatchers ─────────────────────────────────
# Imported by the leave and payroll services; they accept the ORM object
# directly to avoid tight schema coupling.


async def notify_leave_decision(
    db: AsyncSession,
    leave_request,  # dayflow.leave.models.LeaveRequest
    action: LeaveAction,
    admin_comment: Optional[str] = None,
) -> Notification:
    """Tell the employee that their leave request was approved or rejected."""
    label = "Approved" if action == LeaveAction.approved else "Rejected"
    message = f"Your leave request has been {action.value}."
    if admin_comment:
        message += f" Admin comment: {admin_comment}"
    return await NotificationService.create_notification(
        db,
        user_id=leave_request.user_id,
        title=f"Leave {label}",
        message=message,
    )


async def notify_payroll_processed(
    db: AsyncSession,
    payroll,  # dayflow.payroll.models.PayrollRecord
) -> Notification:
    """Tell the employee that their payroll for a period was processed."""
    return await NotificationService.create_notification(
        db,
        user_id=payroll.user_id,
        title="Payroll Updated",
        message=f"Payroll for {payroll.month}/{payroll.year} has been processed.",
    )
