"""Auth dependencies — bearer-token validation and the admin role gate."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.models import User, UserSession
from dayflow.auth.service import hash_token
from dayflow.common.constants import UserRole
from dayflow.common.exceptions import ForbiddenException, UnauthorizedException
from dayflow.config import settings
from dayflow.database import get_db
from dayflow.profiles.models import Profile

logger = logging.getLogger(__name__)


def extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthorizedException("Missing Authorization header")
    token = auth_header[7:].strip()
    if not token:
        raise UnauthorizedException("Missing Authorization header")
    return token


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """Validate JWT, verify session, return the caller's Profile."""
    token = extract_bearer(request)

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise UnauthorizedException("Token has expired")
    except JWTError:
        raise UnauthorizedException("Invalid token")

    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    # Verify session exists, not revoked, not expired
    result = await db.execute(
        select(UserSession).where(
            UserSession.token_hash == hash_token(token),
            UserSession.is_revoked.is_(False),
            UserSession.expires_at > datetime.now(timezone.utc),
        ),
    )
    if result.scalars().first() is None:
        raise UnauthorizedException("Session invalid or expired")

    try:
        user_id = uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise UnauthorizedException("Invalid token")

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedException("User account is inactive or not found")

    profile = await db.get(Profile, user_id)
    if profile is None:
        # Authenticated but without a profile row there is no role to grant.
        raise ForbiddenException("Profile not found for this account")

    request.state.token_hash = hash_token(token)
    return profile


# ── Role gate ───────────────────────────────────────────────────────

async def require_admin(
    request: Request,
    profile: Profile = Depends(get_current_user),
) -> Profile:
    """Re-check the caller's *stored* role on every privileged request."""
    if profile.role != UserRole.admin:
        logger.warning(
            "Non-admin attempted %s %s",
            request.method,
            request.url.path,
            extra={"user_id": str(profile.id), "role": profile.role.value},
        )
        raise ForbiddenException("Forbidden: admin role required")
    return profile
