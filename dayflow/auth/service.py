"""Auth service — password hashing, JWT management, accounts, session lifecycle."""

from __future__ import annotations

import hashlib
import logging
import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from jose import jwt
from passlib.context import CryptContext
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.models import User, UserSession
from dayflow.common.constants import (
    ADMIN_BOOTSTRAP_LOCK_KEY,
    EMPLOYEE_ID_PREFIX,
    UserRole,
)
from dayflow.common.exceptions import (
    BadRequestException,
    ConflictError,
    UnauthorizedException,
)
from dayflow.config import settings
from dayflow.profiles.models import Profile

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ───────────────────────────────────────────────────────

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def generate_temp_password(length: Optional[int] = None) -> str:
    """Random temporary password that always contains a digit, a capital and a symbol."""
    length = length or settings.TEMP_PASSWORD_LENGTH
    alphabet = string.ascii_lowercase + string.digits
    body = "".join(secrets.choice(alphabet) for _ in range(length))
    return body + "A1!"


# ── JWT helpers ─────────────────────────────────────────────────────

def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def create_access_token(user_id: uuid.UUID) -> tuple[str, int]:
    """Return (encoded_jwt, expires_in_seconds)."""
    expires_in = settings.JWT_EXPIRY_HOURS * 3600
    payload = {
        "sub": str(user_id),
        "type": "access",
        "jti": uuid.uuid4().hex,
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in


# ── Accounts ────────────────────────────────────────────────────────

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalars().first()


async def _lock_admin_bootstrap(db: AsyncSession) -> None:
    """Serialize first-admin detection across concurrent signups.

    The PostgreSQL advisory lock is held until the request transaction ends.
    SQLite already serializes writers.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    await db.execute(
        text("SELECT pg_advisory_xact_lock(:key)"), {"key": ADMIN_BOOTSTRAP_LOCK_KEY}
    )


async def _admin_exists(db: AsyncSession) -> bool:
    result = await db.execute(
        select(func.count()).select_from(Profile).where(Profile.role == UserRole.admin)
    )
    return result.scalar_one() > 0


async def create_account(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    employee_id: Optional[str] = None,
    full_name: Optional[str] = None,
    role: UserRole = UserRole.employee,
    is_first_login: bool = False,
    department: Optional[str] = None,
    designation: Optional[str] = None,
    basic_salary: Optional[Decimal] = None,
    phone: Optional[str] = None,
) -> Profile:
    """Create a login account and its profile row in one flush.

    ``employee_id`` defaults to ``EMP-`` + the first eight characters of the
    new user id; ``full_name`` defaults to an empty string.
    """
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("Email already exists")
    if employee_id:
        existing = await db.execute(
            select(Profile.id).where(Profile.employee_id == employee_id)
        )
        if existing.first() is not None:
            raise ConflictError("Employee ID already exists")

    user = User(id=uuid.uuid4(), email=email, password_hash=hash_password(password))
    profile = Profile(
        id=user.id,
        employee_id=employee_id or f"{EMPLOYEE_ID_PREFIX}{str(user.id)[:8]}",
        email=email,
        full_name=full_name or "",
        role=role,
        is_first_login=is_first_login,
        department=department,
        designation=designation,
        basic_salary=basic_salary,
        phone=phone,
    )
    try:
        db.add(user)
        await db.flush()
        db.add(profile)
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError("Employee ID or email already exists") from exc
    await db.refresh(profile)
    return profile


async def signup(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    employee_id: Optional[str],
    full_name: Optional[str],
) -> Profile:
    """Self-service registration.

    The very first account becomes the bootstrap admin; every later signup
    is an employee. Further admins are appointed via ``/api/admin/update-role``.
    """
    await _lock_admin_bootstrap(db)
    role = UserRole.employee if await _admin_exists(db) else UserRole.admin
    profile = await create_account(
        db,
        email=email,
        password=password,
        employee_id=employee_id,
        full_name=full_name,
        role=role,
    )
    logger.info("Registered %s as %s", profile.employee_id, role.value)
    return profile


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the active user for the credentials, or raise 401."""
    user = await get_user_by_email(db, email)
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for %s", email)
        raise UnauthorizedException("Invalid email or password")
    return user


async def change_password(
    db: AsyncSession,
    user_id: uuid.UUID,
    current_password: str,
    new_password: str,
) -> Profile:
    """Replace the password and clear the first-login flag."""
    user = await db.get(User, user_id)
    if user is None or not verify_password(current_password, user.password_hash):
        raise BadRequestException("Current password is incorrect")
    if current_password == new_password:
        raise BadRequestException("New password must differ from the current one")

    user.password_hash = hash_password(new_password)
    profile = await db.get(Profile, user_id)
    profile.is_first_login = False
    await db.flush()
    await db.refresh(profile)
    return profile


# ── Session management ──────────────────────────────────────────────

async def create_session(
    db: AsyncSession,
    user: User,
    ip: Optional[str],
    user_agent: Optional[str],
) -> tuple[str, int]:
    """Issue an access token and persist its session.  Returns (token, expires_in)."""
    access_token, expires_in = create_access_token(user.id)
    session = UserSession(
        user_id=user.id,
        token_hash=hash_token(access_token),
        ip_address=ip,
        user_agent=user_agent,
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    )
    db.add(session)
    await db.flush()
    return access_token, expires_in


async def revoke_session(db: AsyncSession, token_hash: str) -> None:
    """Mark a session as revoked by its token hash."""
    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == token_hash),
    )
    session = result.scalars().first()
    if session:
        session.is_revoked = True
        await db.flush()
