"""FastAPI exception handlers producing the relay's JSON error envelopes."""

import json
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from accessdash.errors.exceptions import AccessDashError, UpstreamError

logger = logging.getLogger(__name__)


def _internal_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc) or "Unknown error occurred"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(AccessDashError)
    async def relay_error_handler(request: Request, exc: AccessDashError):
        trace_id = getattr(request.state, "trace_id", "unknown")
        if isinstance(exc, UpstreamError):
            logger.warning(
                "upstream_rejected",
                extra={
                    "path": request.url.path,
                    "status_code": exc.status_code,
                    "error": exc.error,
                    "trace_id": trace_id,
                },
            )
        else:
            logger.info(
                "relay_refused",
                extra={"path": request.url.path, "error": exc.error, "trace_id": trace_id},
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid request", "details": json.loads(json.dumps(exc.errors(), default=str))},
        )

    @app.exception_handler(httpx.HTTPError)
    async def transport_error_handler(request: Request, exc: httpx.HTTPError):
        logger.error("Upstream transport failure on %s: %s", request.url.path, exc, exc_info=exc)
        return _internal_error(exc)

    @app.exception_handler(ValueError)
    async def decode_error_handler(request: Request, exc: ValueError):
        logger.error("Malformed upstream reply on %s: %s", request.url.path, exc)
        return _internal_error(exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return _internal_error(exc)
