"""
Problem Responses

Builds RFC 9457 problem responses and maps framework errors onto them.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todoapp.docs.encoder import encode
from todoapp.docs.enrichment import PROBLEM_MEDIA_TYPE
from todoapp.models.problem import ProblemDetails

logger = structlog.get_logger()

# Reference sections of RFC 9110 for each status code
PROBLEM_TYPES: dict[int, str] = {
    400: "https://tools.ietf.org/html/rfc9110#section-15.5.1",
    401: "https://tools.ietf.org/html/rfc9110#section-15.5.2",
    403: "https://tools.ietf.org/html/rfc9110#section-15.5.4",
    404: "https://tools.ietf.org/html/rfc9110#section-15.5.5",
    405: "https://tools.ietf.org/html/rfc9110#section-15.5.6",
    406: "https://tools.ietf.org/html/rfc9110#section-15.5.7",
    408: "https://tools.ietf.org/html/rfc9110#section-15.5.9",
    409: "https://tools.ietf.org/html/rfc9110#section-15.5.10",
    412: "https://tools.ietf.org/html/rfc9110#section-15.5.13",
    415: "https://tools.ietf.org/html/rfc9110#section-15.5.16",
    422: "https://tools.ietf.org/html/rfc9110#section-15.5.21",
    426: "https://tools.ietf.org/html/rfc9110#section-15.5.22",
    500: "https://tools.ietf.org/html/rfc9110#section-15.6.1",
}


class ProblemResponse(JSONResponse):
    media_type = PROBLEM_MEDIA_TYPE


def problem_details(status_code: int, detail: str | None = None) -> ProblemDetails:
    """Create the problem details for a status code."""
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = None

    return ProblemDetails(
        type=PROBLEM_TYPES.get(status_code),
        title=title,
        status=status_code,
        detail=detail,
    )


def problem_response(
    status_code: int,
    detail: str | None = None,
    headers: dict[str, str] | None = None,
) -> ProblemResponse:
    """
    Create a problem response.

    The payload is serialized like every other API response and carries the
    request's trace ID as an extension member.
    """
    content: dict[str, Any] = encode(problem_details(status_code, detail), ProblemDetails)

    trace_id = structlog.contextvars.get_contextvars().get("trace_id")
    if trace_id:
        content["traceId"] = trace_id

    return ProblemResponse(content=content, status_code=status_code, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> ProblemResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    return problem_response(exc.status_code, detail, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ProblemResponse:
    logger.info("Request validation failed", errors=exc.errors())
    return problem_response(400, "The request is invalid.")


def setup_problem_handlers(app: FastAPI) -> None:
    """Return problem details for HTTP and validation errors."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
