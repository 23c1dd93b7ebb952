"""
Tests for the logging middleware and problem handlers.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.testclient import TestClient

from todoapp.middleware.logging import configure_logging, logging_middleware
from todoapp.routes.errors import problem_details, setup_problem_handlers


@pytest.fixture
def app_with_middleware():
    """Create test app with middleware."""
    app = FastAPI()

    @app.middleware("http")
    async def add_logging(request: Request, call_next):
        return await logging_middleware(request, call_next)

    setup_problem_handlers(app)

    @app.get("/test")
    async def test_endpoint():
        return {"trace_id": structlog.contextvars.get_contextvars().get("trace_id")}

    @app.get("/conflict")
    async def conflict_endpoint():
        raise HTTPException(status_code=409, detail="Already exists.")

    @app.get("/error")
    async def error_endpoint():
        raise ValueError("Test error")

    return app


def test_logging_middleware_adds_trace_id(app_with_middleware):
    """Test logging middleware binds and returns the trace ID."""
    client = TestClient(app_with_middleware)
    response = client.get("/test")

    assert response.status_code == 200
    assert response.json()["trace_id"] == response.headers["X-Trace-ID"]


def test_logging_middleware_handles_errors(app_with_middleware):
    """Test logging middleware re-raises unhandled errors."""
    client = TestClient(app_with_middleware)

    with pytest.raises(ValueError):
        client.get("/error")


def test_http_exceptions_are_problems(app_with_middleware):
    """Test that HTTP errors are returned as problem details."""
    client = TestClient(app_with_middleware)
    response = client.get("/conflict")

    assert response.status_code == 409
    assert response.headers["content-type"] == "application/problem+json"
    assert response.json() == {
        "type": "https://tools.ietf.org/html/rfc9110#section-15.5.10",
        "title": "Conflict",
        "status": 409,
        "detail": "Already exists.",
        "traceId": response.headers["X-Trace-ID"],
    }


def test_unknown_route_is_problem(app_with_middleware):
    client = TestClient(app_with_middleware)
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["title"] == "Not Found"


def test_problem_details_for_unknown_status():
    """Test that statuses without a reference section have no type."""
    problem = problem_details(499, "Closed.")

    assert problem.type is None
    assert problem.title is None
    assert problem.status == 499


@pytest.mark.parametrize("level", ["DEBUG", "info", "nonsense"])
def test_configure_logging(level):
    """Test that logging can be configured with any level name."""
    configure_logging(level, json_logs=False)
    structlog.get_logger().info("Logging configured", level=level)
