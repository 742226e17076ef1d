"""Attendance router — check in/out and the caller's own attendance views.

All endpoints require authentication and only ever touch the caller's rows.
The admin daily view lives under /api/admin/attendance.
"""


from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.attendance.schemas import (
    AttendanceListResponse,
    AttendanceRecordResponse,
    ClockResponse,
    TodayResponse,
)
from dayflow.attendance.service import AttendanceService
from dayflow.auth.dependencies import get_current_user
from dayflow.database import get_db
from dayflow.profiles.models import Profile

router = APIRouter(prefix="", tags=["attendance"])


# ── POST /check-in ──────────────────────────────────────────────────

@router.post("/check-in", response_model=ClockResponse, status_code=201)
async def check_in(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record today's check-in for the current user."""
    record = await AttendanceService.check_in(db, profile.id)
    return ClockResponse(data=AttendanceRecordResponse.model_validate(record))


# ── POST /check-out ─────────────────────────────────────────────────

@router.post("/check-out", response_model=ClockResponse)
async def check_out(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record today's check-out for the current user."""
    record = await AttendanceService.check_out(db, profile.id)
    return ClockResponse(data=AttendanceRecordResponse.model_validate(record))


# ── GET /today ──────────────────────────────────────────────────────

@router.get("/today", response_model=TodayResponse)
async def today_attendance(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    record = await AttendanceService.get_today(db, profile.id)
    if record is None:
        return TodayResponse(data=None)
    return TodayResponse(data=AttendanceRecordResponse.model_validate(record))


# ── GET /week ───────────────────────────────────────────────────────

@router.get("/week", response_model=AttendanceListResponse)
async def week_attendance(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Rows of the current Sunday-start week, newest first."""
    rows = await AttendanceService.get_week(db, profile.id)
    return AttendanceListResponse(
        data=[AttendanceRecordResponse.model_validate(r) for r in rows]
    )


# ── GET /history ────────────────────────────────────────────────────

@router.get("/history", response_model=AttendanceListResponse)
async def attendance_history(
    from_date: date = Query(..., description="Start date (inclusive)"),
    to_date: date = Query(..., description="End date (inclusive)"),
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await AttendanceService.get_history(db, profile.id, from_date, to_date)
    return AttendanceListResponse(
        data=[AttendanceRecordResponse.model_validate(r) for r in rows]
    )
