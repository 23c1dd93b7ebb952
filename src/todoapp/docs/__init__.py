"""
OpenAPI documentation for the Todo API.

Provides example providers, description lookups and the enrichment applied
to every generated OpenAPI document.
"""

from __future__ import annotations

__all__ = ["descriptions", "encoder", "enrichment", "examples", "resolver"]
