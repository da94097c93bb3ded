"""Log setup for the relay.

Records from ``logging.getLogger`` and ``structlog.get_logger`` both end up on
one root handler rendered by structlog, so upstream warnings, error-handler
output and uvicorn logs share a format and carry the request's trace id (and
report id on the assets route).
"""

import logging
import sys
from typing import TextIO

import structlog

# Per-request chatter that would drown the relay's own lines.
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(json_output: bool, stream: TextIO):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    log_level: str = "info",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Route all logging through a single structlog-formatted root handler.

    ``extra=`` fields passed to stdlib loggers are lifted into the rendered
    event. Returns the installed handler.
    """
    stream = stream or sys.stdout
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*pre_chain, structlog.stdlib.ExtraAdder()],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output, stream),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


def bind_request_context(trace_id: str, report_id: str | None = None) -> None:
    """Attach the trace id, and the report id when known, to later log lines."""
    fields = {"trace_id": trace_id}
    if report_id:
        fields["report_id"] = report_id
    structlog.contextvars.bind_contextvars(**fields)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
