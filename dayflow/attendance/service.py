"""Attendance service layer — check in/out and read views.

Business logic:
  - One attendance row per employee per local calendar day
  - Check-in creates the row, check-out completes it exactly once
  - Read operations for today, the current week, a date range and the
    admin daily view
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dayflow.attendance.models import AttendanceRecord
from dayflow.common.constants import AttendanceStatus
from dayflow.common.exceptions import (
    BadRequestException,
    ConflictError,
    NotFoundException,
)
from dayflow.config import settings

logger = logging.getLogger(__name__)

# ── Constants ───────────────────────────────────────────────────────

MAX_HISTORY_RANGE_DAYS = 366


def local_today() -> date:
    """Current calendar date in the configured office timezone."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


# ═════════════════════════════════════════════════════════════════════
# AttendanceService
# ═════════════════════════════════════════════════════════════════════


class AttendanceService:
    """Async attendance operations: check in/out and reads."""

    @staticmethod
    async def _get_record(
        db: AsyncSession,
        user_id: uuid.UUID,
        target_date: date,
    ) -> Optional[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date == target_date,
            )
        )
        return result.scalars().first()

    # ── Check in / out ──────────────────────────────────────────────

    @staticmethod
    async def check_in(db: AsyncSession, user_id: uuid.UUID) -> AttendanceRecord:
        """Create today's attendance row for the caller.

        A second check-in on the same date is a conflict. Two concurrent
        check-ins race on the (user_id, date) unique constraint; the loser
        gets the same 409.
        """
        today = local_today()
        if await AttendanceService._get_record(db, user_id, today) is not None:
            raise ConflictError("Already checked in today")

        record = AttendanceRecord(
            user_id=user_id,
            date=today,
            check_in=datetime.now(timezone.utc),
            status=AttendanceStatus.present,
        )
        db.add(record)
        try:
            await db.flush()
        except IntegrityError:
            raise ConflictError("Already checked in today")

        logger.info("User %s checked in for %s", user_id, today)
        return record

    @staticmethod
    async def check_out(db: AsyncSession, user_id: uuid.UUID) -> AttendanceRecord:
        """Set check_out on today's row. Allowed once per day."""
        today = local_today()
        record = await AttendanceService._get_record(db, user_id, today)
        if record is None:
            raise NotFoundException("Check-in for today")
        if record.check_out is not None:
            raise ConflictError("Already checked out today")

        record.check_out = datetime.now(timezone.utc)
        await db.flush()
        logger.info("User %s checked out for %s", user_id, today)
        return record

    # ── Reads ───────────────────────────────────────────────────────

    @staticmethod
    async def get_today(
        db: AsyncSession, user_id: uuid.UUID
    ) -> Optional[AttendanceRecord]:
        return await AttendanceService._get_record(db, user_id, local_today())

    @staticmethod
    async def get_week(db: AsyncSession, user_id: uuid.UUID) -> list[AttendanceRecord]:
        """Rows of the current Sunday-start week, newest first."""
        today = local_today()
        result = await db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date >= week_start(today),
                AttendanceRecord.date <= today,
            )
            .order_by(AttendanceRecord.date.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_history(
        db: AsyncSession,
        user_id: uuid.UUID,
        from_date: date,
        to_date: date,
    ) -> list[AttendanceRecord]:
        """Own rows in an inclusive date range, newest first."""
        if from_date > to_date:
            raise BadRequestException("from_date must be on or before to_date")
        if (to_date - from_date).days > MAX_HISTORY_RANGE_DAYS:
            raise BadRequestException(
                f"Date range cannot exceed {MAX_HISTORY_RANGE_DAYS} days"
            )

        result = await db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date >= from_date,
                AttendanceRecord.date <= to_date,
            )
            .order_by(AttendanceRecord.date.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_by_date(db: AsyncSession, target_date: date) -> list[AttendanceRecord]:
        """All employees' rows for one date, latest check-in first (admin view)."""
        result = await db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.date == target_date)
            .options(selectinload(AttendanceRecord.employee))
            .order_by(AttendanceRecord.check_in.desc())
        )
        return list(result.scalars().all())
