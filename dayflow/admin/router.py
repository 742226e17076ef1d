"""Admin router — employee provisioning, approvals, payroll entry, reviews.

Every endpoint depends on ``require_admin``, which re-reads the caller's
stored role on each request.
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.admin.schemas import (
    AuditLogListResponse,
    AuditLogOut,
    DashboardResponse,
    SuccessResponse,
)
from dayflow.admin.service import AdminService
from dayflow.attendance.schemas import AttendanceWithEmployee, DailyAttendanceResponse
from dayflow.attendance.service import AttendanceService
from dayflow.auth.dependencies import require_admin
from dayflow.common.constants import LeaveStatus
from dayflow.database import get_db
from dayflow.leave.schemas import (
    LeaveActionRequest,
    LeaveListResponse,
    LeaveMutationResponse,
    LeaveRequestOut,
    LeaveRequestWithEmployee,
)
from dayflow.leave.service import LeaveService
from dayflow.notifications.schemas import NotificationCreate
from dayflow.payroll.schemas import (
    PayrollCreate,
    PayrollListResponse,
    PayrollMutationResponse,
    PayrollOut,
    PayrollUpdate,
    PayrollWithEmployee,
)
from dayflow.payroll.service import PayrollService
from dayflow.profiles.models import Profile
from dayflow.profiles.schemas import (
    AddEmployeeRequest,
    AddEmployeeResponse,
    ProfileAdminUpdate,
    ProfileBrief,
    ProfileListResponse,
    ProfileMutationResponse,
    ProfileOut,
    RoleUpdateRequest,
)
from dayflow.profiles.service import ProfileService

router = APIRouter(prefix="", tags=["admin"])


# ═══════════════════════════════════════════════════════════════════
# EMPLOYEES & ROLES
# ═══════════════════════════════════════════════════════════════════

@router.post("/add-employee", response_model=AddEmployeeResponse, status_code=201)
async def add_employee(
    body: AddEmployeeRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an employee account with a one-time temporary password."""
    profile, temp_password = await ProfileService.add_employee(db, admin.id, body)
    return AddEmployeeResponse(
        user_id=profile.id,
        temp_password=temp_password,
        profile=ProfileOut.model_validate(profile),
    )


@router.post("/update-role", response_model=ProfileMutationResponse)
async def update_role(
    body: RoleUpdateRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileService.update_role(db, admin.id, body.user_id, body.role)
    return ProfileMutationResponse(profile=ProfileOut.model_validate(profile))


@router.get("/profiles", response_model=ProfileListResponse)
async def list_profiles(
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    rows = await ProfileService.list_profiles(db)
    return ProfileListResponse(data=[ProfileBrief.model_validate(p) for p in rows])


@router.put("/profiles/{user_id}", response_model=ProfileMutationResponse)
async def update_profile(
    user_id: uuid.UUID,
    body: ProfileAdminUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Edit HR fields of any profile. Role changes go through /update-role."""
    profile = await ProfileService.admin_update_profile(db, admin.id, user_id, body)
    return ProfileMutationResponse(profile=ProfileOut.model_validate(profile))


# ═══════════════════════════════════════════════════════════════════
# LEAVE
# ═══════════════════════════════════════════════════════════════════

@router.get("/leaves", response_model=LeaveListResponse)
async def list_leaves(
    status: Optional[LeaveStatus] = Query(None),
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    rows = await LeaveService.list_all(db, status_filter=status)
    return LeaveListResponse(
        data=[LeaveRequestWithEmployee.model_validate(r) for r in rows]
    )


@router.post("/leave-action", response_model=LeaveMutationResponse)
async def leave_action(
    body: LeaveActionRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a pending leave request."""
    leave_req = await LeaveService.decide(db, admin.id, body)
    return LeaveMutationResponse(leave=LeaveRequestOut.model_validate(leave_req))


# ═══════════════════════════════════════════════════════════════════
# PAYROLL
# ═══════════════════════════════════════════════════════════════════

@router.get("/payrolls", response_model=PayrollListResponse)
async def list_payrolls(
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    rows = await PayrollService.list_all(db)
    return PayrollListResponse(data=[PayrollWithEmployee.model_validate(r) for r in rows])


@router.post("/payroll", response_model=PayrollMutationResponse, status_code=201)
async def create_payroll(
    body: PayrollCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create the payroll entry for one employee and month. Duplicates are 409."""
    payroll = await PayrollService.create_payroll(db, admin.id, body)
    return PayrollMutationResponse(payroll=PayrollOut.model_validate(payroll))


@router.put("/payroll/{payroll_id}", response_model=PayrollMutationResponse)
async def update_payroll(
    payroll_id: uuid.UUID,
    body: PayrollUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Edit amounts / payment status. Employee and period are immutable."""
    payroll = await PayrollService.update_payroll(db, admin.id, payroll_id, body)
    return PayrollMutationResponse(payroll=PayrollOut.model_validate(payroll))


# ═══════════════════════════════════════════════════════════════════
# ATTENDANCE, NOTIFICATIONS, AUDIT, DASHBOARD
# ═══════════════════════════════════════════════════════════════════

@router.get("/attendance", response_model=DailyAttendanceResponse)
async def attendance_by_date(
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All employees' attendance for one date."""
    rows = await AttendanceService.list_by_date(db, target_date)
    return DailyAttendanceResponse(
        date=target_date,
        data=[AttendanceWithEmployee.model_validate(r) for r in rows],
    )


@router.post("/notifications", response_model=SuccessResponse, status_code=201)
async def send_notification(
    body: NotificationCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await AdminService.send_notification(db, admin.id, body)
    return SuccessResponse()


@router.get("/audit-logs", response_model=AuditLogListResponse)
async def audit_logs(
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    rows = await AdminService.get_audit_logs(db)
    return AuditLogListResponse(data=[AuditLogOut.model_validate(r) for r in rows])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    _admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    data = await AdminService.get_dashboard(db)
    return DashboardResponse(
        stats=data["stats"],
        pending_leaves=[
            LeaveRequestWithEmployee.model_validate(r) for r in data["pending_leaves"]
        ],
    )
