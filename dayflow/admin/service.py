"""Admin service — console dashboard, direct notifications and audit trail."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.attendance.models import AttendanceRecord
from dayflow.attendance.service import local_today
from dayflow.common.audit import AuditLog, list_audit_logs
from dayflow.common.constants import (
    AUDIT_LOG_LIST_LIMIT,
    DASHBOARD_PENDING_LEAVES,
    AttendanceStatus,
)
from dayflow.common.exceptions import NotFoundException
from dayflow.leave.service import LeaveService
from dayflow.notifications.models import Notification
from dayflow.notifications.schemas import NotificationCreate
from dayflow.notifications.service import NotificationService
from dayflow.payroll.service import PayrollService
from dayflow.profiles.models import Profile

logger = logging.getLogger(__name__)


class AdminService:
    """Static service class for admin console operations."""

    # ── Dashboard ───────────────────────────────────────────────────

    @staticmethod
    async def get_dashboard(db: AsyncSession) -> dict:
        """Headline numbers for the admin home page.

        Present-today counts rows with status ``present`` for the local
        date; the payroll total covers the current calendar month.
        """
        today = local_today()

        total_employees = (
            await db.execute(select(func.count()).select_from(Profile))
        ).scalar_one()

        present_today = (
            await db.execute(
                select(func.count())
                .select_from(AttendanceRecord)
                .where(
                    AttendanceRecord.date == today,
                    AttendanceRecord.status == AttendanceStatus.present,
                )
            )
        ).scalar_one()

        return {
            "stats": {
                "total_employees": total_employees,
                "present_today": present_today,
                "pending_leaves": await LeaveService.count_pending(db),
                "month_payroll_total": await PayrollService.period_total(
                    db, today.month, today.year
                ),
            },
            "pending_leaves": await LeaveService.latest_pending(
                db, DASHBOARD_PENDING_LEAVES
            ),
        }

    # ── Notifications ───────────────────────────────────────────────

    @staticmethod
    async def send_notification(
        db: AsyncSession,
        admin_id: uuid.UUID,
        data: NotificationCreate,
    ) -> Notification:
        if await db.get(Profile, data.user_id) is None:
            raise NotFoundException("User", data.user_id)
        notification = await NotificationService.create_notification(
            db, user_id=data.user_id, title=data.title, message=data.message,
        )
        logger.info("Admin %s notified %s: %s", admin_id, data.user_id, data.title)
        return notification

    # ── Audit trail ─────────────────────────────────────────────────

    @staticmethod
    async def get_audit_logs(db: AsyncSession) -> list[AuditLog]:
        return await list_audit_logs(db, AUDIT_LOG_LIST_LIMIT)
