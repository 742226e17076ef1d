"""Profile endpoints — the caller's own profile."""


from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.dependencies import get_current_user
from dayflow.auth.schemas import MeResponse
from dayflow.database import get_db
from dayflow.profiles.models import Profile
from dayflow.profiles.schemas import (
    ProfileMutationResponse,
    ProfileOut,
    ProfileSelfUpdate,
)
from dayflow.profiles.service import ProfileService

router = APIRouter(prefix="", tags=["profiles"])


@router.get("", response_model=MeResponse)
async def get_own_profile(profile: Profile = Depends(get_current_user)):
    return MeResponse(data=ProfileOut.model_validate(profile))


@router.put("", response_model=ProfileMutationResponse)
async def update_own_profile(
    body: ProfileSelfUpdate,
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update contact fields. Privileged fields are rejected with 400."""
    updated = await ProfileService.update_own_profile(db, profile, body)
    return ProfileMutationResponse(profile=ProfileOut.model_validate(updated))
