"""Common module — shared utilities for DayFlow."""

from dayflow.common.audit import AuditLog, create_audit_entry, list_audit_logs
from dayflow.common.constants import (
    AttendanceStatus,
    AuditAction,
    LeaveAction,
    LeaveStatus,
    LeaveType,
    PaymentStatus,
    UserRole,
)
from dayflow.common.exceptions import (
    AppException,
    BadRequestException,
    ConflictError,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    register_exception_handlers,
)
from dayflow.common.side_effects import run_best_effort

__all__ = [
    # Audit
    "AuditLog",
    "create_audit_entry",
    "list_audit_logs",
    # Constants / Enums
    "AttendanceStatus",
    "AuditAction",
    "LeaveAction",
    "LeaveStatus",
    "LeaveType",
    "PaymentStatus",
    "UserRole",
    # Exceptions
    "AppException",
    "BadRequestException",
    "ConflictError",
    "ForbiddenException",
    "NotFoundException",
    "UnauthorizedException",
    "register_exception_handlers",
    # Side effects
    "run_best_effort",
]
