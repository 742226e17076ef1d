"""Auth router — signup, login, logout, current user, password change."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.dependencies import get_current_user
from dayflow.auth.models import User
from dayflow.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MeResponse,
    SignupRequest,
    TokenResponse,
)
from dayflow.auth.service import (
    authenticate,
    change_password,
    create_session,
    revoke_session,
    signup,
)
from dayflow.common.rate_limit import credential_limit
from dayflow.database import get_db
from dayflow.profiles.models import Profile
from dayflow.profiles.schemas import ProfileOut

router = APIRouter(prefix="", tags=["auth"])


def _client_info(request: Request) -> tuple[str | None, str | None]:
    ip = request.client.host if request.client else None
    return ip, request.headers.get("user-agent")


# ── POST /signup ────────────────────────────────────────────────────

@router.post("/signup", response_model=TokenResponse, status_code=201)
@credential_limit
async def signup_user(
    request: Request,
    body: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """Register an account; the profile row is created alongside it."""
    profile = await signup(
        db,
        email=body.email,
        password=body.password,
        employee_id=body.employee_id,
        full_name=body.full_name,
    )
    user = await db.get(User, profile.id)
    access_token, expires_in = await create_session(db, user, *_client_info(request))
    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
        profile=ProfileOut.model_validate(profile),
    )


# ── POST /login ─────────────────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
@credential_limit
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await authenticate(db, body.email, body.password)
    access_token, expires_in = await create_session(db, user, *_client_info(request))
    profile = await db.get(Profile, user.id)
    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
        profile=ProfileOut.model_validate(profile),
    )


# ── POST /logout ────────────────────────────────────────────────────

@router.post("/logout")
async def logout(
    request: Request,
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Revoke the session bound to the presented bearer token."""
    await revoke_session(db, request.state.token_hash)
    return {"success": True}


# ── GET /me ─────────────────────────────────────────────────────────

@router.get("/me", response_model=MeResponse)
async def me(profile: Profile = Depends(get_current_user)):
    return MeResponse(data=ProfileOut.model_validate(profile))


# ── POST /change-password ───────────────────────────────────────────

@router.post("/change-password", response_model=MeResponse)
@credential_limit
async def change_own_password(
    request: Request,
    body: ChangePasswordRequest,
    profile: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Set a new password; clears the first-login flag set for provisioned accounts."""
    updated = await change_password(
        db, profile.id, body.current_password, body.new_password,
    )
    return MeResponse(data=ProfileOut.model_validate(updated))
