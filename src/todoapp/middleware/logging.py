"""
Logging Middleware

Request/response logging with structured logging and request tracing.
"""

from __future__ import annotations

import logging
import sys
import time
import uuid
from collections.abc import Callable

import structlog
from fastapi import Request, Response

logger = structlog.get_logger()


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog for the application.

    Args:
        level: Minimum log level name
        json_logs: Render JSON lines instead of human-readable console output
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=False,
    )


async def logging_middleware(request: Request, call_next: Callable) -> Response:
    """
    Add structured logging and request tracing.

    Generates trace ID for request correlation and logs request/response details.
    """
    # Generate trace ID for request correlation
    trace_id = uuid.uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        trace_id=trace_id,
        method=request.method,
        path=request.url.path,
        client_host=request.client.host if request.client else None,
    )

    start_time = time.perf_counter()

    try:
        response = await call_next(request)

        duration = time.perf_counter() - start_time

        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration=duration,
        )

        response.headers["X-Trace-ID"] = trace_id

        return response

    except Exception as exc:
        duration = time.perf_counter() - start_time

        logger.error(
            "Request failed",
            error=str(exc),
            error_type=type(exc).__name__,
            duration=duration,
            exc_info=True,
        )
        raise
