"""
OpenAPI metadata shared by every generated API document.

Provides the title, contact, license, security scheme and tags, so each
document generator decorates its document identically.
"""

from __future__ import annotations

from typing import Any

from todoapp.config import settings

# Root of every document title, suffixed with the generator name
OPENAPI_TITLE = "Todo API"

OPENAPI_DESCRIPTION = "An API for managing Todo items."

OPENAPI_VERSION = settings.OPENAPI_VERSION

# Version of the OpenAPI specification every document conforms to
OPENAPI_SPEC_VERSION = "3.1.0"

# OpenAPI license and contact information
OPENAPI_LICENSE = {
    "name": "Apache 2.0",
    "url": "https://www.apache.org/licenses/LICENSE-2.0",
}

OPENAPI_CONTACT = {
    "name": "Martin Costello",
    "url": "https://www.martincostello.com/",
}

# Document-level tags
OPENAPI_TAG = "TodoApp"

OPENAPI_TAGS = [
    {"name": OPENAPI_TAG},
]

# Security scheme for JWT bearer authentication
SECURITY_SCHEME_NAME = "Bearer"

SECURITY_SCHEMES = {
    SECURITY_SCHEME_NAME: {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JSON Web Token",
        "description": "Bearer authentication using a JWT.",
    },
}

SECURITY_REQUIREMENTS = [
    {SECURITY_SCHEME_NAME: []},
]


def document_title(generator: str) -> str:
    """Title of the document produced by a generator."""
    return f"{OPENAPI_TITLE} ({generator})"


def document_info(generator: str) -> dict[str, Any]:
    """The ``info`` object of the document produced by a generator."""
    return {
        "title": document_title(generator),
        "description": OPENAPI_DESCRIPTION,
        "version": OPENAPI_VERSION,
        "contact": dict(OPENAPI_CONTACT),
        "license": dict(OPENAPI_LICENSE),
    }


def document_servers(base_url: str | None) -> list[dict[str, str]] | None:
    """
    Servers to declare in a document.

    The address the request was served from is only advertised while
    developing locally.
    """
    if not settings.is_development or not base_url:
        return None
    return [{"url": base_url.rstrip("/")}]
