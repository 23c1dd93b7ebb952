"""
Todo API

Demonstration service exposing CRUD operations over todo items, documented by
three independent OpenAPI generators that are enriched to describe the API
identically.
"""

__version__ = "0.1.0"
