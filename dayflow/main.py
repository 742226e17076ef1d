"""DayFlow — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from dayflow.admin.router import router as admin_router
from dayflow.attendance.router import router as attendance_router
from dayflow.auth.router import router as auth_router
from dayflow.common.exceptions import register_exception_handlers
from dayflow.common.rate_limit import limiter
from dayflow.config import settings
from dayflow.database import engine
from dayflow.leave.router import router as leave_router
from dayflow.notifications.router import router as notifications_router
from dayflow.payroll.router import router as payroll_router
from dayflow.profiles.router import router as profiles_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("DayFlow starting (environment=%s)", settings.ENVIRONMENT)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="DayFlow",
        description="HR management — attendance, leave, payroll and employee self-service",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers ({"error": ...} bodies)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(profiles_router, prefix="/api/profile", tags=["profiles"])
    app.include_router(attendance_router, prefix="/api/attendance", tags=["attendance"])
    app.include_router(leave_router, prefix="/api/leave", tags=["leave"])
    app.include_router(payroll_router, prefix="/api/payroll", tags=["payroll"])
    app.include_router(notifications_router, prefix="/api/notifications", tags=["notifications"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    return app


app = create_app()
