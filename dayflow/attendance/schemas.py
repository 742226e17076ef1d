"""Attendance Pydantic v2 schemas — request / response validation."""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from dayflow.common.constants import AttendanceStatus
from dayflow.profiles.schemas import EmployeeBrief


# ═════════════════════════════════════════════════════════════════════
# Attendance record
# ═════════════════════════════════════════════════════════════════════


class AttendanceRecordResponse(BaseModel):
    """Single attendance record for a day."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus


class AttendanceWithEmployee(AttendanceRecordResponse):
    """Attendance row of the admin daily view, with the employee name / code."""

    employee: EmployeeBrief


# ═════════════════════════════════════════════════════════════════════
# Responses
# ═════════════════════════════════════════════════════════════════════


class ClockResponse(BaseModel):
    """Response after a check-in or check-out action."""

    success: bool = True
    data: AttendanceRecordResponse


class TodayResponse(BaseModel):
    data: Optional[AttendanceRecordResponse] = None


class AttendanceListResponse(BaseModel):
    data: list[AttendanceRecordResponse]


class DailyAttendanceResponse(BaseModel):
    date: date
    data: list[AttendanceWithEmployee]
