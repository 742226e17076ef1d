"""Payroll service — admin entry and employee payslip views.

net_salary is computed by the database from the three amount columns;
every write refreshes the row so callers always see the stored value.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dayflow.common.audit import create_audit_entry
from dayflow.common.constants import AuditAction
from dayflow.common.exceptions import ConflictError, NotFoundException
from dayflow.common.side_effects import run_best_effort
from dayflow.notifications.service import notify_payroll_processed
from dayflow.payroll.models import PayrollRecord
from dayflow.payroll.schemas import PayrollCreate, PayrollUpdate
from dayflow.profiles.models import Profile

logger = logging.getLogger(__name__)


def _audit_details(payroll: PayrollRecord) -> dict:
    return {
        "payroll_id": str(payroll.id),
        "month": payroll.month,
        "year": payroll.year,
        "basic_salary": str(payroll.basic_salary),
        "allowances": str(payroll.allowances),
        "deductions": str(payroll.deductions),
        "net_salary": str(payroll.net_salary),
        "payment_status": payroll.payment_status.value,
    }


class PayrollService:
    """Async payroll operations."""

    @staticmethod
    async def _period_exists(
        db: AsyncSession, user_id: uuid.UUID, month: int, year: int
    ) -> bool:
        result = await db.execute(
            select(PayrollRecord.id).where(
                PayrollRecord.user_id == user_id,
                PayrollRecord.month == month,
                PayrollRecord.year == year,
            )
        )
        return result.first() is not None

    # ── Admin writes ────────────────────────────────────────────────

    @staticmethod
    async def create_payroll(
        db: AsyncSession,
        admin_id: uuid.UUID,
        data: PayrollCreate,
    ) -> PayrollRecord:
        """Create the payroll entry for (user, month, year). Duplicates are 409."""
        if await db.get(Profile, data.user_id) is None:
            raise NotFoundException("User", data.user_id)

        if await PayrollService._period_exists(db, data.user_id, data.month, data.year):
            raise ConflictError(
                f"Payroll for {data.month}/{data.year} already exists for this employee"
            )

        payroll = PayrollRecord(**data.model_dump())
        db.add(payroll)
        try:
            await db.flush()
        except IntegrityError:
            raise ConflictError(
                f"Payroll for {data.month}/{data.year} already exists for this employee"
            )
        await db.refresh(payroll)

        logger.info(
            "Admin %s created payroll %s/%s for %s (net %s)",
            admin_id, payroll.month, payroll.year, payroll.user_id, payroll.net_salary,
        )
        await PayrollService._after_write(db, admin_id, payroll, AuditAction.payroll_created)
        return payroll

    @staticmethod
    async def update_payroll(
        db: AsyncSession,
        admin_id: uuid.UUID,
        payroll_id: uuid.UUID,
        data: PayrollUpdate,
    ) -> PayrollRecord:
        """Edit amounts and payment status of an existing entry."""
        payroll = await db.get(PayrollRecord, payroll_id)
        if payroll is None:
            raise NotFoundException("Payroll", payroll_id)

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(payroll, key, value)
        await db.flush()
        await db.refresh(payroll)

        logger.info(
            "Admin %s updated payroll %s (net %s, %s)",
            admin_id, payroll.id, payroll.net_salary, payroll.payment_status.value,
        )
        await PayrollService._after_write(db, admin_id, payroll, AuditAction.payroll_updated)
        return payroll

    @staticmethod
    async def _after_write(
        db: AsyncSession,
        admin_id: uuid.UUID,
        payroll: PayrollRecord,
        action: AuditAction,
    ) -> None:
        await run_best_effort(
            db, f"audit log on {action.value}", create_audit_entry,
            action=action,
            performed_by=admin_id,
            target_user_id=payroll.user_id,
            details=_audit_details(payroll),
        )
        await run_best_effort(
            db, f"notification on {action.value}", notify_payroll_processed, payroll,
        )

    # ── Reads ───────────────────────────────────────────────────────

    @staticmethod
    async def get_my_payroll(
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> tuple[list[PayrollRecord], Decimal, Optional[PayrollRecord]]:
        """Own rows (newest period first), total net earnings and the latest row."""
        result = await db.execute(
            select(PayrollRecord)
            .where(PayrollRecord.user_id == user_id)
            .order_by(PayrollRecord.year.desc(), PayrollRecord.month.desc())
        )
        rows = list(result.scalars().all())
        total = sum((r.net_salary for r in rows), Decimal("0"))
        return rows, total, rows[0] if rows else None

    @staticmethod
    async def list_all(db: AsyncSession) -> list[PayrollRecord]:
        result = await db.execute(
            select(PayrollRecord)
            .options(selectinload(PayrollRecord.employee))
            .order_by(PayrollRecord.year.desc(), PayrollRecord.month.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def period_total(db: AsyncSession, month: int, year: int) -> Decimal:
        """Sum of net_salary across all employees for one pay period."""
        result = await db.execute(
            select(func.coalesce(func.sum(PayrollRecord.net_salary), 0)).where(
                PayrollRecord.month == month,
                PayrollRecord.year == year,
            )
        )
        return Decimal(str(result.scalar_one()))
