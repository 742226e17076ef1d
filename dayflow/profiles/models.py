"""Profile ORM model — one HR profile per user account."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from dayflow.common.constants import UserRole, enum_values
from dayflow.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    employee_id: Mapped[str] = mapped_column(sa.String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(sa.String(200), default="")
    phone: Mapped[Optional[str]] = mapped_column(sa.String(30))
    address: Mapped[Optional[str]] = mapped_column(sa.Text)
    department: Mapped[Optional[str]] = mapped_column(sa.String(100))
    designation: Mapped[Optional[str]] = mapped_column(sa.String(100))
    date_of_joining: Mapped[Optional[date]] = mapped_column(sa.Date)
    profile_image: Mapped[Optional[str]] = mapped_column(sa.String(500))
    basic_salary: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(10, 2))
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(UserRole, name="app_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.employee,
    )
    is_first_login: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Profile {self.employee_id!r} role={self.role}>"
