"""Shared test fixtures — async DB, client, auth helpers, factories.

Reusable across all test modules (auth, attendance, leave, payroll, admin).
Uses a temporary SQLite file via aiosqlite, so no PostgreSQL is needed.
"""

from __future__ import annotations

import os

# Set test JWT_SECRET before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")

import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from dayflow.auth.service import create_access_token, hash_password, hash_token
from dayflow.common.constants import UserRole
from dayflow.config import settings
from dayflow.database import Base, get_db
from dayflow.main import create_app

# Import ALL model modules so SQLAlchemy can resolve cross-module relationships
import dayflow.auth.models  # noqa: F401
import dayflow.profiles.models  # noqa: F401
import dayflow.attendance.models  # noqa: F401
import dayflow.leave.models  # noqa: F401
import dayflow.payroll.models  # noqa: F401
import dayflow.notifications.models  # noqa: F401
import dayflow.common.audit  # noqa: F401

# ── SQLite compat: compile PG-specific types to TEXT/BLOB ───────────

from sqlalchemy.dialects.postgresql import INET, JSONB, UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _jsonb_sqlite(element, compiler, **kw):
    return "TEXT"


@compiles(INET, "sqlite")
def _inet_sqlite(element, compiler, **kw):
    return "TEXT"


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (file-backed SQLite) ──────────────────────────────
# A file outlives any single connection, so a rolled-back IntegrityError
# cannot take the schema with it.

TEST_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="dayflow-tests-"), "dayflow.db")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)

DEFAULT_PASSWORD = "Password123!"
# bcrypt is slow on purpose; hash the shared test password once.
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Turn the limiter off by default; rate-limit tests switch it back on."""
    from dayflow.common.rate_limit import limiter

    limiter.reset()
    limiter.enabled = False
    yield
    limiter.enabled = True
    limiter.reset()


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Account factory ─────────────────────────────────────────────────
# Seed data is committed so request sessions, which open their own
# connections, can see it.


async def seed_account(
    *,
    role: UserRole = UserRole.employee,
    email: Optional[str] = None,
    employee_id: Optional[str] = None,
    full_name: str = "Test User",
    basic_salary: Optional[Decimal] = None,
    with_session: bool = True,
) -> dict:
    """Insert a user + profile (+ session) and return ids and auth headers."""
    from dayflow.auth.models import User, UserSession
    from dayflow.profiles.models import Profile

    user_id = uuid.uuid4()
    suffix = user_id.hex[:6]
    email = email or f"user.{suffix}@dayflow.io"
    employee_id = employee_id or f"EMP-{suffix.upper()}"

    headers: dict[str, str] = {}
    async with TestSessionFactory() as session:
        session.add(User(id=user_id, email=email, password_hash=DEFAULT_PASSWORD_HASH))
        await session.flush()
        session.add(
            Profile(
                id=user_id,
                employee_id=employee_id,
                email=email,
                full_name=full_name,
                role=role,
                basic_salary=basic_salary,
            )
        )
        if with_session:
            token, expires_in = create_access_token(user_id)
            session.add(
                UserSession(
                    user_id=user_id,
                    token_hash=hash_token(token),
                    expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
                )
            )
            headers = {"Authorization": f"Bearer {token}"}
        await session.commit()

    return {
        "id": user_id,
        "email": email,
        "employee_id": employee_id,
        "full_name": full_name,
        "headers": headers,
    }


@pytest.fixture
async def employee() -> dict:
    """An employee account with a live session."""
    return await seed_account(full_name="Ada Employee")


@pytest.fixture
async def admin() -> dict:
    """An admin account with a live session."""
    return await seed_account(role=UserRole.admin, full_name="Grace Admin")


# ── Auth helpers ────────────────────────────────────────────────────

def make_token(user_id: uuid.UUID, *, expired: bool = False, token_type: str = "access") -> str:
    """Sign a JWT directly (no session row) for negative tests."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS)
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
