"""
FastAPI Application Entry Point

Food Ordering Backend - merchants manage venues and menus, diners place
orders, merchants progress them through the order lifecycle.

Endpoints:
    - POST /auth/register, POST /auth/login
    - GET  /public/venues[/{venue_id}[/menu]]
    - /diner/...: Diner account and orders
    - /merchant/...: Venue, menu and order management
    - GET  /health: System health check

Run:
    python -m foodorder.main
    uvicorn foodorder.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from foodorder.api import routers
from foodorder.core.config import Settings, get_settings, setup_logging
from foodorder.core.errors import FoodOrderError, InvalidRequest, Unauthenticated
from foodorder.database import create_engine, create_session_factory, init_db
from foodorder.schemas import HealthResponse
from foodorder.services.identity import BaseIdentityService, build_identity_service

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Malformed request"


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    identity_service: Optional[BaseIdentityService] = None,
) -> FastAPI:
    """
    Build the application with explicitly injected handles.

    Args:
        settings: Configuration (defaults to cached environment settings)
        engine: Async engine; created from settings when omitted
        session_factory: Session factory; created from the engine when omitted
        identity_service: Token service; built from settings when omitted

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if engine is None and session_factory is None:
        engine = create_engine(settings)
    if session_factory is None:
        session_factory = create_session_factory(engine)
    identity_service = identity_service or build_identity_service(settings)

    # =========================================================================
    # APPLICATION LIFECYCLE
    # =========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application startup and shutdown events.
        """
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Debug: {settings.debug}")
        logger.info(f"   Strict status transitions: {settings.enforce_status_transitions}")
        logger.info("=" * 60)

        if engine is not None:
            await init_db(engine)
            logger.info("✅ Database initialized")

        logger.info(f"✅ Identity Service: {identity_service.provider_name}")

        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

        logger.info("✅ Application ready!")

        yield  # Application runs

        logger.info("Shutting down...")
        if engine is not None:
            await engine.dispose()
        logger.info("✅ Cleanup complete")

    # =========================================================================
    # APPLICATION INSTANCE
    # =========================================================================

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Multi-tenant food ordering backend: merchants manage venues and menus, "
            "diners place orders priced server-side against the live menu."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.identity_service = identity_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        expose_headers=["Content-Length"],
        max_age=12 * 3600,
    )

    for router in routers:
        app.include_router(router)

    # =========================================================================
    # ROOT & HEALTH ENDPOINTS
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """API root with navigation links."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "documentation": "/docs",
            "health": "/health",
        }

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="System Health Check",
    )
    async def health_check() -> HealthResponse:
        """Verify the database is reachable."""
        db_status = "healthy"
        try:
            async with session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"
            logger.error(f"Database health check failed: {e}")

        return HealthResponse(
            status="operational" if db_status == "healthy" else "degraded",
            database=db_status,
            timestamp=datetime.now(timezone.utc),
        )

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.exception_handler(FoodOrderError)
    async def domain_exception_handler(request: Request, exc: FoodOrderError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        error = InvalidRequest(_format_validation_errors(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")

        content: dict[str, Any] = {
            "success": False,
            "error": "Internal",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        }
        return JSONResponse(status_code=500, content=content)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "foodorder.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
