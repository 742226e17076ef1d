#!/usr/bin/env python3
"""Promote an existing DayFlow account to the admin role.

Used to bootstrap or recover admin access outside the HTTP API, e.g. when
the only admin has been demoted.

Usage:
    python scripts/promote_admin.py hr@company.com
    python scripts/promote_admin.py hr@company.com --demote

Exit codes:
    0 = role updated (or already set)
    1 = no account with that email
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dayflow.auth.service import get_user_by_email
from dayflow.common.constants import UserRole
from dayflow.database import async_session_factory, engine
from dayflow.profiles.models import Profile

logger = logging.getLogger("promote_admin")


# ══════════════════════════════════════════════════════════════════════
# Role change
# ══════════════════════════════════════════════════════════════════════


async def set_role(email: str, role: UserRole) -> bool:
    async with async_session_factory() as session:
        user = await get_user_by_email(session, email)
        profile = await session.get(Profile, user.id) if user else None
        if profile is None:
            logger.error("No account found for %s", email)
            return False

        if profile.role == role:
            logger.info("%s (%s) is already %s", email, profile.employee_id, role.value)
            return True

        previous = profile.role
        profile.role = role
        await session.commit()
        logger.info(
            "%s (%s): %s -> %s", email, profile.employee_id, previous.value, role.value,
        )
        return True


async def _run(email: str, role: UserRole) -> bool:
    try:
        return await set_role(email, role)
    finally:
        await engine.dispose()


# ══════════════════════════════════════════════════════════════════════
# CLI
# ══════════════════════════════════════════════════════════════════════


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Change a DayFlow account's role")
    parser.add_argument("email", help="Login email of the account")
    parser.add_argument(
        "--demote", action="store_true", help="Set the role back to employee",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    role = UserRole.employee if args.demote else UserRole.admin
    ok = asyncio.run(_run(args.email, role))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
