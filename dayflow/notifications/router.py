"""Notification endpoints — list, mark read, mark all read."""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.dependencies import get_current_user
from dayflow.database import get_db
from dayflow.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
)
from dayflow.notifications.service import NotificationService
from dayflow.profiles.models import Profile

router = APIRouter(prefix="", tags=["notifications"])


# ── GET / — list current user's notifications ───────────────────────

@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the newest notifications for the authenticated user."""
    rows = await NotificationService.get_notifications(db, profile.id)
    unread = await NotificationService.get_unread_count(db, profile.id)
    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in rows],
        unread=unread,
    )


# ── PUT /read-all — bulk mark all as read ───────────────────────────
# NOTE: This route MUST be registered before /{notification_id}/read.

@router.put("/read-all")
async def mark_all_read(
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark all unread notifications as read for the authenticated user."""
    count = await NotificationService.mark_all_read(db, profile.id)
    return {"success": True, "data": {"count": count}}


# ── PUT /{notification_id}/read — mark single as read ───────────────

@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: uuid.UUID,
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark a single notification as read."""
    notification = await NotificationService.mark_read(db, notification_id, profile.id)
    return {
        "success": True,
        "data": NotificationResponse.model_validate(notification),
    }
