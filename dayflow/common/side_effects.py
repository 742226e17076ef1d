"""Best-effort side effects (audit rows, notifications) for privileged mutations.

A side effect runs inside a SAVEPOINT so that its failure rolls back only
its own writes; the primary mutation in the enclosing transaction is kept.
Failures are logged and never surfaced to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def run_best_effort(
    db: AsyncSession,
    label: str,
    operation: Callable[..., Awaitable[Any]],
    *args: Any,
    **kwargs: Any,
) -> bool:
    """Run ``operation(db, *args, **kwargs)`` in a savepoint.

    Returns True when the side effect was written, False when it failed.
    """
    try:
        async with db.begin_nested():
            await operation(db, *args, **kwargs)
    except SQLAlchemyError:
        logger.exception("Best-effort %s failed; primary mutation kept", label)
        return False
    return True
