"""Profile service — self-service edits, admin provisioning and role management."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dayflow.auth.service import create_account, generate_temp_password
from dayflow.common.audit import create_audit_entry
from dayflow.common.constants import AuditAction, UserRole
from dayflow.common.exceptions import NotFoundException
from dayflow.common.side_effects import run_best_effort
from dayflow.notifications.service import NotificationService
from dayflow.profiles.models import Profile
from dayflow.profiles.schemas import (
    AddEmployeeRequest,
    ProfileAdminUpdate,
    ProfileSelfUpdate,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """Async profile operations."""

    @staticmethod
    async def get_profile(db: AsyncSession, user_id: uuid.UUID) -> Profile:
        profile = await db.get(Profile, user_id)
        if profile is None:
            raise NotFoundException("User", user_id)
        return profile

    @staticmethod
    async def list_profiles(db: AsyncSession) -> list[Profile]:
        result = await db.execute(
            select(Profile).order_by(Profile.full_name, Profile.employee_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def _apply_update(
        db: AsyncSession,
        profile: Profile,
        data: ProfileSelfUpdate,
    ) -> dict[str, Any]:
        changes = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(profile, key, value)
        await db.flush()
        await db.refresh(profile)
        return changes

    @staticmethod
    async def update_own_profile(
        db: AsyncSession, profile: Profile, data: ProfileSelfUpdate
    ) -> Profile:
        await ProfileService._apply_update(db, profile, data)
        return profile

    @staticmethod
    async def admin_update_profile(
        db: AsyncSession,
        admin_id: uuid.UUID,
        user_id: uuid.UUID,
        data: ProfileAdminUpdate,
    ) -> Profile:
        profile = await ProfileService.get_profile(db, user_id)
        changes = await ProfileService._apply_update(db, profile, data)
        await run_best_effort(
            db, "audit log on profile update", create_audit_entry,
            action=AuditAction.profile_updated,
            performed_by=admin_id,
            target_user_id=user_id,
            details={"fields": sorted(changes)},
        )
        return profile

    # ── Provisioning ────────────────────────────────────────────────

    @staticmethod
    async def add_employee(
        db: AsyncSession,
        admin_id: uuid.UUID,
        data: AddEmployeeRequest,
    ) -> tuple[Profile, str]:
        """Create an employee account with a temporary password.

        Returns (profile, temp_password). The employee must change the
        password on first login.
        """
        temp_password = generate_temp_password()
        profile = await create_account(
            db,
            email=data.email,
            password=temp_password,
            employee_id=data.employee_id,
            full_name=data.full_name,
            role=UserRole.employee,
            is_first_login=True,
            department=data.department,
            designation=data.designation,
            basic_salary=data.basic_salary,
            phone=data.phone,
        )
        logger.info("Admin %s provisioned employee %s", admin_id, profile.employee_id)

        await run_best_effort(
            db, "audit log on add-employee", create_audit_entry,
            action=AuditAction.create_employee,
            performed_by=admin_id,
            target_user_id=profile.id,
            details={
                "employee_id": data.employee_id,
                "full_name": data.full_name,
                "email": data.email,
            },
        )
        await run_best_effort(
            db, "notification on add-employee", NotificationService.create_notification,
            user_id=profile.id,
            title="Account created",
            message="Your account was created. Use the temporary password provided by HR.",
        )
        return profile, temp_password

    # ── Roles ───────────────────────────────────────────────────────

    @staticmethod
    async def update_role(
        db: AsyncSession,
        admin_id: uuid.UUID,
        user_id: uuid.UUID,
        role: UserRole,
    ) -> Profile:
        profile = await ProfileService.get_profile(db, user_id)
        previous = profile.role
        profile.role = role
        await db.flush()
        await db.refresh(profile)
        logger.info("Admin %s changed role of %s: %s -> %s", admin_id, user_id, previous.value, role.value)

        await run_best_effort(
            db, "audit log on update-role", create_audit_entry,
            action=AuditAction.role_updated,
            performed_by=admin_id,
            target_user_id=user_id,
            details={"new_role": role.value, "previous_role": previous.value},
        )
        return profile
