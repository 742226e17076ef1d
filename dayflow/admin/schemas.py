"""Admin console schemas — dashboard, audit log and generic responses."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from dayflow.leave.schemas import LeaveRequestWithEmployee


# ── Dashboard ───────────────────────────────────────────────────────

class DashboardStats(BaseModel):
    total_employees: int
    present_today: int
    pending_leaves: int
    month_payroll_total: Decimal


class DashboardResponse(BaseModel):
    stats: DashboardStats
    pending_leaves: list[LeaveRequestWithEmployee]


# ── Audit log ───────────────────────────────────────────────────────

class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    action: str
    performed_by: uuid.UUID
    target_user_id: Optional[uuid.UUID] = None
    details: Optional[dict[str, Any]] = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    data: list[AuditLogOut]


# ── Generic ─────────────────────────────────────────────────────────

class SuccessResponse(BaseModel):
    success: bool = True
