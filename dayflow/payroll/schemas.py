"""Payroll Pydantic v2 schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dayflow.common.constants import PaymentStatus
from dayflow.profiles.schemas import EmployeeBrief

_AMOUNT = dict(ge=0, max_digits=10, decimal_places=2)


# ── Requests ────────────────────────────────────────────────────────

class PayrollCreate(BaseModel):
    """New payroll entry for one employee and pay period."""

    user_id: uuid.UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    basic_salary: Decimal = Field(..., **_AMOUNT)
    allowances: Decimal = Field(default=Decimal("0"), **_AMOUNT)
    deductions: Decimal = Field(default=Decimal("0"), **_AMOUNT)
    payment_status: PaymentStatus = PaymentStatus.pending


class PayrollUpdate(BaseModel):
    """Edit of an existing entry. The employee and period are immutable."""

    model_config = ConfigDict(extra="forbid")

    basic_salary: Optional[Decimal] = Field(default=None, **_AMOUNT)
    allowances: Optional[Decimal] = Field(default=None, **_AMOUNT)
    deductions: Optional[Decimal] = Field(default=None, **_AMOUNT)
    payment_status: Optional[PaymentStatus] = None

    @model_validator(mode="after")
    def at_least_one_field(self) -> "PayrollUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided.")
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null.")
        return self


# ── Responses ───────────────────────────────────────────────────────

class PayrollOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    month: int
    year: int
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime


class PayrollWithEmployee(PayrollOut):
    employee: EmployeeBrief


class PayrollMutationResponse(BaseModel):
    success: bool = True
    payroll: PayrollOut


class MyPayrollResponse(BaseModel):
    """Own payroll history with the running total and the latest period."""

    data: list[PayrollOut]
    total_earnings: Decimal
    latest: Optional[PayrollOut] = None


class PayrollListResponse(BaseModel):
    data: list[PayrollWithEmployee]
