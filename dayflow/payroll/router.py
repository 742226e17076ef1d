"""Payroll router — the caller's own payroll history.

Creating and editing payroll entries is admin-only (/api/admin/payroll).
"""


from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.dependencies import get_current_user
from dayflow.database import get_db
from dayflow.payroll.schemas import MyPayrollResponse, PayrollOut
from dayflow.payroll.service import PayrollService
from dayflow.profiles.models import Profile

router = APIRouter(prefix="", tags=["payroll"])


@router.get("", response_model=MyPayrollResponse)
async def my_payroll(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows, total, latest = await PayrollService.get_my_payroll(db, profile.id)
    return MyPayrollResponse(
        data=[PayrollOut.model_validate(r) for r in rows],
        total_earnings=total,
        latest=PayrollOut.model_validate(latest) if latest is not None else None,
    )
