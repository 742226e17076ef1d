"""Enums and constants for DayFlow — matching the database CHECK / ENUM values."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    employee = "employee"
    admin = "admin"


# ── Attendance ──────────────────────────────────────────────────────

class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"
    half_day = "half-day"
    leave = "leave"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveType(str, enum.Enum):
    paid = "paid"
    sick = "sick"
    unpaid = "unpaid"


class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class LeaveAction(str, enum.Enum):
    """Decisions an admin may take on a pending leave request."""

    approved = "approved"
    rejected = "rejected"


# ── Payroll ─────────────────────────────────────────────────────────

class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"


# ── Audit actions ───────────────────────────────────────────────────

class AuditAction(str, enum.Enum):
    create_employee = "create_employee"
    leave_approved = "Leave Approved"
    leave_rejected = "Leave Rejected"
    payroll_created = "Payroll Created"
    payroll_updated = "Payroll Updated"
    role_updated = "Role Updated"
    profile_updated = "Profile Updated"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum *values* (e.g. ``half-day``) rather than member names."""
    return [member.value for member in enum_cls]


# ── Misc constants ──────────────────────────────────────────────────

EMPLOYEE_ID_PREFIX = "EMP-"
# pg_advisory_xact_lock key guarding the first-signup admin bootstrap
ADMIN_BOOTSTRAP_LOCK_KEY = 0x446179466C6F77
NOTIFICATION_LIST_LIMIT = 100
AUDIT_LOG_LIST_LIMIT = 200
DASHBOARD_PENDING_LEAVES = 5
