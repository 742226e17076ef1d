"""Profile Pydantic v2 schemas.

Naming conventions:
  - *Update / *Request  → request bodies (write)
  - *Out                → response bodies (read)
  - *Brief              → compact embedded representations
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from dayflow.common.constants import UserRole


# ── Embedded / shared ───────────────────────────────────────────────

class EmployeeBrief(BaseModel):
    """Employee name and code embedded in leave / payroll / attendance rows."""

    model_config = ConfigDict(from_attributes=True)

    full_name: Optional[str] = None
    employee_id: str


class ProfileBrief(BaseModel):
    """Row of the admin employee picker."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: str
    full_name: Optional[str] = None
    email: str
    department: Optional[str] = None
    designation: Optional[str] = None
    role: UserRole


# ── Responses ───────────────────────────────────────────────────────

class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    date_of_joining: Optional[date] = None
    profile_image: Optional[str] = None
    basic_salary: Optional[Decimal] = None
    role: UserRole
    is_first_login: bool = False
    created_at: datetime
    updated_at: datetime


# ── Requests ────────────────────────────────────────────────────────

class ProfileSelfUpdate(BaseModel):
    """Contact fields an employee may change on their own profile."""

    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)
    address: Optional[str] = Field(default=None, max_length=1000)
    profile_image: Optional[str] = Field(default=None, max_length=500)


class ProfileAdminUpdate(ProfileSelfUpdate):
    """HR fields an admin may change. Role changes go through update-role."""

    department: Optional[str] = Field(default=None, max_length=100)
    designation: Optional[str] = Field(default=None, max_length=100)
    date_of_joining: Optional[date] = None
    basic_salary: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class AddEmployeeRequest(BaseModel):
    employee_id: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    department: Optional[str] = Field(default=None, max_length=100)
    designation: Optional[str] = Field(default=None, max_length=100)
    basic_salary: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    phone: Optional[str] = Field(default=None, max_length=30)


class AddEmployeeResponse(BaseModel):
    success: bool = True
    user_id: uuid.UUID
    temp_password: str
    profile: ProfileOut


class RoleUpdateRequest(BaseModel):
    user_id: uuid.UUID
    role: UserRole


class ProfileMutationResponse(BaseModel):
    success: bool = True
    profile: ProfileOut


class ProfileListResponse(BaseModel):
    data: list[ProfileBrief]
