"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from accessdash.services.report_relay import ReportRelay


def get_relay(request: Request) -> ReportRelay:
    """Return the process-wide report relay from app state."""
    return request.app.state.relay


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


# Type aliases for dependency injection
Relay = Annotated[ReportRelay, Depends(get_relay)]
TraceId = Annotated[str, Depends(get_trace_id)]
