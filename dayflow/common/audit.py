"""Audit log model and async helper for recording privileged actions."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from dayflow.common.constants import AuditAction
from dayflow.database import Base


# ── Append-only audit table ─────────────────────────────────────────

class AuditLog(Base):
    """Append-only log of privileged mutations."""

    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    action: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    performed_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    details: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        sa.Index("ix_audit_logs_performed_by", "performed_by"),
        sa.Index("ix_audit_logs_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} by {self.performed_by} on {self.target_user_id}>"


# ── Helper to create an entry ───────────────────────────────────────

async def create_audit_entry(
    session: AsyncSession,
    *,
    action: AuditAction | str,
    performed_by: uuid.UUID,
    target_user_id: Optional[uuid.UUID] = None,
    details: Optional[dict[str, Any]] = None,
) -> AuditLog:
    """
    Create and flush an audit-log entry.

    Args:
        session: Async SQLAlchemy session.
        action: An ``AuditAction`` or free-form label.
        performed_by: UUID of the admin performing the action.
        target_user_id: UUID of the affected user, if any.
        details: JSON-serialisable context (ids, amounts, comments).
    """
    entry = AuditLog(
        action=action.value if isinstance(action, AuditAction) else action,
        performed_by=performed_by,
        target_user_id=target_user_id,
        details=details,
    )
    session.add(entry)
    await session.flush()
    return entry


async def list_audit_logs(session: AsyncSession, limit: int) -> list[AuditLog]:
    """Return the newest audit entries first."""
    result = await session.execute(
        sa.select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())
