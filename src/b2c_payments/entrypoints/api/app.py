"""FastAPI application factory.

    uvicorn --factory b2c_payments.entrypoints.api.app:create_app
"""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog
from fastapi import FastAPI, Request, Response

from b2c_payments.bootstrap import build_application
from b2c_payments.config import get_settings
from b2c_payments.entrypoints.api.errors import register_exception_handlers
from b2c_payments.entrypoints.api.routes import payment_router
from b2c_payments.infrastructure.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from b2c_payments.bootstrap import PaymentsApplication
    from b2c_payments.config import Settings

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    application: PaymentsApplication | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Build the HTTP app around a PaymentsApplication.

    The notification dispatcher is started on startup and drained on
    shutdown, so in-flight notifications finish before the process exits.
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings)
    payments = application or build_application(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            env=settings.app_env,
            providers=list(payments.provider_registry.provider_types),
        )
        payments.dispatcher.start()
        try:
            yield
        finally:
            logger.info("application_shutdown")
            payments.dispatcher.shutdown(wait=True)

    app = FastAPI(
        title="B2C Mobile Money Payments",
        description="Initiate business-to-consumer mobile-money payments and track their status.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )
    app.state.payments = payments
    app.state.settings = settings

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next: Any) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response

    register_exception_handlers(app)
    app.include_router(payment_router)
    return app
