"""
Middleware Package

Request logging and tracing for the Todo API.
"""

from todoapp.middleware.logging import configure_logging, logging_middleware

__all__ = ["configure_logging", "logging_middleware"]
