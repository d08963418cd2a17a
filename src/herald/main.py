"""FastAPI application factory and lifespan management."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from herald.config import settings
from herald.logging_config import configure_logging
from herald.services.notification_service import AdminNotificationService

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=settings.json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    service: AdminNotificationService = app.state.notification_service
    service.init()

    # Start background jobs
    from herald.workers.scheduler import run_cleanup_scheduler, run_digest_scheduler
    app.state.cleanup_task = asyncio.create_task(run_cleanup_scheduler(app))
    app.state.digest_task = None
    digest_interval = service.email_digest_interval_seconds
    if digest_interval is not None:
        app.state.digest_task = asyncio.create_task(run_digest_scheduler(app, digest_interval))

    logger.info("Herald API started")
    yield

    # Shutdown
    for task in (app.state.cleanup_task, app.state.digest_task):
        if task is None:
            continue
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    service.flush_email_digest()
    service.reset()
    logger.info("Herald API shutdown complete")


def create_app(service: AdminNotificationService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Herald API",
        version="0.3.0",
        description="Admin notification pipeline for platform moderation events.",
        lifespan=lifespan,
    )
    app.state.notification_service = service or AdminNotificationService.from_settings(settings)
    app.state.cleanup_task = None
    app.state.digest_task = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from herald.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from herald.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from herald.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
