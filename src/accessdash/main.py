"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from accessdash import __version__
from accessdash.config import settings
from accessdash.logging_config import configure_logging
from accessdash.services.report_relay import ReportRelay
from accessdash.upstream.client import ReportAPIClient

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=settings.json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared upstream client on startup and close it on shutdown."""
    client = ReportAPIClient(settings)
    app.state.relay = ReportRelay(client, settings)
    logger.info(
        "accessdash relay started (cloud=%s, asset_page_size=%d, filter_old_reports=%s)",
        settings.cloud_name or "<unset>",
        settings.asset_page_size,
        settings.filter_old_reports,
    )
    yield

    await client.aclose()
    logger.info("accessdash relay shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="accessdash",
        version=__version__,
        description="Relay between the asset-access dashboard and the media API's last-access reports.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    from accessdash.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from accessdash.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    Instrumentator(
        should_group_status_codes=True,
        should_respect_env_var=False,
        excluded_handlers=["/health", "/metrics"],
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    from accessdash.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
