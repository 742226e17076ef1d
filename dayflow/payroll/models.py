"""Payroll ORM model: PayrollRecord — one row per employee per pay period."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dayflow.common.constants import PaymentStatus, enum_values
from dayflow.database import Base
from dayflow.profiles.models import Profile


class PayrollRecord(Base):
    __tablename__ = "payroll"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "month", "year", name="uq_payroll_user_period"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_payroll_month"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)
    allowances: Mapped[Decimal] = mapped_column(
        sa.Numeric(10, 2), nullable=False, default=Decimal("0"),
    )
    deductions: Mapped[Decimal] = mapped_column(
        sa.Numeric(10, 2), nullable=False, default=Decimal("0"),
    )
    # net_salary is a GENERATED ALWAYS column — read-only in ORM.
    # Two wider digits hold basic + allowances at their maximum.
    net_salary: Mapped[Decimal] = mapped_column(
        sa.Numeric(12, 2),
        sa.Computed("basic_salary + allowances - deductions", persisted=True),
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        sa.Enum(PaymentStatus, name="payment_status", values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.pending,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    employee: Mapped[Profile] = relationship()

    def __repr__(self) -> str:
        return f"<PayrollRecord {self.user_id} {self.month}/{self.year}>"
