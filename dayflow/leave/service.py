"""Leave service layer — applications and the admin approval workflow.

Business logic:
  - Employees apply for leave; new requests are always pending
  - Status moves one way only: pending → approved | rejected
  - Decisions notify the employee and write an audit row (best effort)
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dayflow.common.audit import create_audit_entry
from dayflow.common.constants import AuditAction, LeaveAction, LeaveStatus
from dayflow.common.exceptions import ConflictError, NotFoundException
from dayflow.common.side_effects import run_best_effort
from dayflow.leave.models import LeaveRequest
from dayflow.leave.schemas import LeaveActionRequest, LeaveRequestCreate
from dayflow.notifications.service import notify_leave_decision

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════
# LeaveService
# ═════════════════════════════════════════════════════════════════════


class LeaveService:
    """Async leave operations."""

    # ── Employee side ───────────────────────────────────────────────

    @staticmethod
    async def apply_leave(
        db: AsyncSession,
        user_id: uuid.UUID,
        data: LeaveRequestCreate,
    ) -> LeaveRequest:
        """Create a pending leave request for the caller."""
        leave_req = LeaveRequest(
            user_id=user_id,
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            remarks=data.remarks,
            status=LeaveStatus.pending,
        )
        db.add(leave_req)
        await db.flush()
        logger.info(
            "Leave applied by %s: %s %s..%s",
            user_id, data.leave_type.value, data.start_date, data.end_date,
        )
        return leave_req

    @staticmethod
    async def get_my_leaves(
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> tuple[list[LeaveRequest], dict[str, int]]:
        """Own requests newest first, plus a count per status."""
        result = await db.execute(
            select(LeaveRequest)
            .where(LeaveRequest.user_id == user_id)
            .order_by(LeaveRequest.created_at.desc())
        )
        rows = list(result.scalars().all())

        count_result = await db.execute(
            select(LeaveRequest.status, func.count())
            .where(LeaveRequest.user_id == user_id)
            .group_by(LeaveRequest.status)
        )
        counts = {status.value: 0 for status in LeaveStatus}
        for status, count in count_result.all():
            counts[LeaveStatus(status).value] = count
        return rows, counts

    # ── Admin side ──────────────────────────────────────────────────

    @staticmethod
    async def list_all(
        db: AsyncSession,
        status_filter: Optional[LeaveStatus] = None,
    ) -> list[LeaveRequest]:
        """Every leave request newest first, with the employee loaded."""
        query = (
            select(LeaveRequest)
            .options(selectinload(LeaveRequest.employee))
            .order_by(LeaveRequest.created_at.desc())
        )
        if status_filter is not None:
            query = query.where(LeaveRequest.status == status_filter)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count_pending(db: AsyncSession) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(LeaveRequest)
            .where(LeaveRequest.status == LeaveStatus.pending)
        )
        return result.scalar_one()

    @staticmethod
    async def latest_pending(db: AsyncSession, limit: int) -> list[LeaveRequest]:
        result = await db.execute(
            select(LeaveRequest)
            .where(LeaveRequest.status == LeaveStatus.pending)
            .options(selectinload(LeaveRequest.employee))
            .order_by(LeaveRequest.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def decide(
        db: AsyncSession,
        admin_id: uuid.UUID,
        data: LeaveActionRequest,
    ) -> LeaveRequest:
        """Approve or reject a pending leave request.

        The status update is conditional on the row still being pending, so
        two admins racing on the same request cannot both decide it.
        """
        leave_req = await db.get(LeaveRequest, data.leave_id)
        if leave_req is None:
            raise NotFoundException("Leave request", data.leave_id)
        if leave_req.status != LeaveStatus.pending:
            raise ConflictError(f"Leave request is already {leave_req.status.value}")

        new_status = LeaveStatus(data.action.value)
        result = await db.execute(
            update(LeaveRequest)
            .where(
                LeaveRequest.id == data.leave_id,
                LeaveRequest.status == LeaveStatus.pending,
            )
            .values(
                status=new_status,
                admin_comment=data.admin_comment,
                approved_by=admin_id,
                updated_at=datetime.now(timezone.utc),
            )
        )
        if result.rowcount == 0:
            raise ConflictError("Leave request was already decided")
        await db.refresh(leave_req)

        logger.info(
            "Admin %s %s leave %s of %s",
            admin_id, new_status.value, leave_req.id, leave_req.user_id,
        )

        await run_best_effort(
            db, "notification on leave-action", notify_leave_decision,
            leave_req, data.action, data.admin_comment,
        )
        await run_best_effort(
            db, "audit log on leave-action", create_audit_entry,
            action=(
                AuditAction.leave_approved
                if data.action == LeaveAction.approved
                else AuditAction.leave_rejected
            ),
            performed_by=admin_id,
            target_user_id=leave_req.user_id,
            details={
                "leave_id": str(leave_req.id),
                "action": data.action.value,
                "admin_comment": data.admin_comment,
            },
        )
        return leave_req
