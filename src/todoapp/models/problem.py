"""
Problem Details Model

RFC 9457 problem details returned by every failed API request.
"""

from __future__ import annotations

from pydantic import BaseModel

from todoapp.docs.examples import ExampleProvider, example_registry


class ProblemDetails(BaseModel):
    """A machine-readable format for specifying errors in HTTP API responses."""

    type: str | None = None
    """A URI reference that identifies the problem type."""

    title: str | None = None
    """A short, human-readable summary of the problem type."""

    status: int | None = None
    """The HTTP status code generated by the origin server for this occurrence of the problem."""

    detail: str | None = None
    """A human-readable explanation specific to this occurrence of the problem."""

    instance: str | None = None
    """A URI reference that identifies the specific occurrence of the problem."""


class ProblemDetailsExample(ExampleProvider[ProblemDetails]):
    """Canonical example of a failed request."""

    schema_type = ProblemDetails

    def generate(self) -> ProblemDetails:
        return ProblemDetails(
            type="https://tools.ietf.org/html/rfc9110#section-15.5.1",
            title="Bad Request",
            status=400,
            detail="The specified value is invalid.",
        )


example_registry.register_type(ProblemDetails, ProblemDetailsExample())
