"""Notification Pydantic schemas for request / response validation."""


import uuid
from datetime import datetime

from pydantic import BaseModel, Field


# ── Requests ────────────────────────────────────────────────────────

class NotificationCreate(BaseModel):
    """Admin-sent notification."""

    user_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


# ── Responses ───────────────────────────────────────────────────────

class NotificationResponse(BaseModel):
    """Single notification in API responses."""

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    message: str
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    """Newest notifications plus the unread badge count."""

    data: list[NotificationResponse]
    unread: int
