"""Leave router — apply for leave and list own requests.

Approvals are admin-only and live under /api/admin/leave-action.
"""


from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.dependencies import get_current_user
from dayflow.database import get_db
from dayflow.leave.schemas import (
    LeaveMutationResponse,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveStatusCounts,
    MyLeaveResponse,
)
from dayflow.leave.service import LeaveService
from dayflow.profiles.models import Profile

router = APIRouter(prefix="", tags=["leave"])


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=LeaveMutationResponse, status_code=201)
async def apply_leave(
    body: LeaveRequestCreate,
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Submit a leave request. end_date before start_date is a 400."""
    leave_req = await LeaveService.apply_leave(db, profile.id, body)
    return LeaveMutationResponse(leave=LeaveRequestOut.model_validate(leave_req))


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=MyLeaveResponse)
async def my_leaves(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Own leave requests, newest first, with a count per status."""
    rows, counts = await LeaveService.get_my_leaves(db, profile.id)
    return MyLeaveResponse(
        data=[LeaveRequestOut.model_validate(r) for r in rows],
        counts=LeaveStatusCounts(**counts),
    )
