"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Request  → request bodies (write)
  - *Out                → response bodies (read)
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dayflow.common.constants import LeaveAction, LeaveStatus, LeaveType
from dayflow.profiles.schemas import EmployeeBrief


# ═════════════════════════════════════════════════════════════════════
# Leave Request — Create
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestCreate(BaseModel):
    """Employee leave application."""

    leave_type: LeaveType
    start_date: date
    end_date: date
    remarks: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date.")
        return self


class LeaveActionRequest(BaseModel):
    """Admin decision on a pending leave request."""

    leave_id: uuid.UUID
    action: LeaveAction
    admin_comment: Optional[str] = Field(default=None, max_length=2000)


# ═════════════════════════════════════════════════════════════════════
# Leave Request — Response
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    remarks: Optional[str] = None
    status: LeaveStatus
    admin_comment: Optional[str] = None
    approved_by: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class LeaveRequestWithEmployee(LeaveRequestOut):
    """Admin list row, joined with the employee's name and code."""

    employee: EmployeeBrief


class LeaveStatusCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class MyLeaveResponse(BaseModel):
    data: list[LeaveRequestOut]
    counts: LeaveStatusCounts


class LeaveMutationResponse(BaseModel):
    success: bool = True
    leave: LeaveRequestOut


class LeaveListResponse(BaseModel):
    data: list[LeaveRequestWithEmployee]
