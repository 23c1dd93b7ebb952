"""
Route Discovery

Describes the application's API routes independently of any document
generator: operation identity, parameters, request body and responses with
the Python types declared for each.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, get_args, get_origin

from fastapi.routing import APIRoute
from pydantic import BaseModel, TypeAdapter

REF_TEMPLATE = "#/components/schemas/{model}"

# Successful responses a route declares when it sets no status code
DEFAULT_STATUS_CODE = 200


@dataclass
class RouteParameter:
    name: str
    location: str
    declared_type: Any
    required: bool = True


@dataclass
class RouteResponse:
    status_code: int
    description: str
    response_type: Any = None


@dataclass
class RouteMetadata:
    """One HTTP method of one API route."""

    path: str
    method: str
    endpoint: Callable[..., Any]
    operation_id: str
    summary: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    parameters: list[RouteParameter] = field(default_factory=list)
    body_type: Any = None
    body_required: bool = False
    responses: list[RouteResponse] = field(default_factory=list)

    def response_type(self, status_code: int | str) -> Any:
        for response in self.responses:
            if str(response.status_code) == str(status_code):
                return response.response_type
        return None


def api_routes(routes: Iterable[Any]) -> list[APIRoute]:
    """API routes that are part of the documented surface."""
    return [route for route in routes if isinstance(route, APIRoute) and route.include_in_schema]


def describe_routes(routes: Iterable[Any]) -> list[RouteMetadata]:
    """Describe every documented route, one entry per HTTP method."""
    return [
        metadata
        for route in api_routes(routes)
        for metadata in describe_route(route)
    ]


PARAMETER_LOCATIONS = (
    ("path", "path_params"),
    ("query", "query_params"),
    ("header", "header_params"),
    ("cookie", "cookie_params"),
)


def request_parameters(dependant: Any) -> list[RouteParameter]:
    """
    Parameters of an endpoint and of every dependency it uses.

    Sub-dependencies are walked depth first; a parameter declared more than
    once in the same location is reported the first time only.
    """
    found: dict[tuple[str, str], RouteParameter] = {}

    def visit(current: Any) -> None:
        for location, attribute in PARAMETER_LOCATIONS:
            for param in getattr(current, attribute, ()):
                found.setdefault(
                    (location, param.alias),
                    RouteParameter(
                        name=param.alias,
                        location=location,
                        declared_type=param.field_info.annotation,
                        required=param.field_info.is_required(),
                    ),
                )
        for dependency in getattr(current, "dependencies", ()):
            visit(dependency)

    visit(dependant)

    # Grouped by location like FastAPI orders them
    return [
        parameter
        for location, _ in PARAMETER_LOCATIONS
        for parameter in found.values()
        if parameter.location == location
    ]


def describe_route(route: APIRoute) -> list[RouteMetadata]:
    parameters = request_parameters(route.dependant)

    body_type = None
    body_required = False
    if route.body_field is not None:
        body_type = route.body_field.field_info.annotation
        body_required = route.body_field.field_info.is_required()

    responses = [
        RouteResponse(
            status_code=route.status_code or DEFAULT_STATUS_CODE,
            description=route.response_description,
            response_type=route.response_model,
        )
    ]
    for status_code, response in route.responses.items():
        responses.append(
            RouteResponse(
                status_code=int(status_code),
                description=response.get("description", ""),
                response_type=response.get("model"),
            )
        )

    return [
        RouteMetadata(
            path=route.path_format,
            method=method.lower(),
            endpoint=route.endpoint,
            operation_id=route.operation_id or route.unique_id,
            summary=route.summary,
            description=route.description or None,
            tags=[str(tag) for tag in route.tags],
            parameters=parameters,
            body_type=body_type,
            body_required=body_required,
            responses=responses,
        )
        for method in sorted(route.methods)
    ]


def model_types(declared_type: Any) -> list[type[BaseModel]]:
    """Models referenced by a declared type, including nested field types."""
    found: dict[str, type[BaseModel]] = {}
    _collect_models(declared_type, found)
    return list(found.values())


def schema_types(metadata: Iterable[RouteMetadata]) -> dict[str, type[BaseModel]]:
    """
    Component schema types of a set of routes, keyed by schema name.

    Schema names are the model class names, matching the names pydantic
    gives its definitions.
    """
    found: dict[str, type[BaseModel]] = {}
    for route in metadata:
        declared_types = [route.body_type, *(response.response_type for response in route.responses)]
        for declared_type in declared_types:
            for model in model_types(declared_type):
                found.setdefault(model.__name__, model)
    return found


def _collect_models(declared_type: Any, found: dict[str, type[BaseModel]]) -> None:
    if declared_type is None:
        return

    if isinstance(declared_type, type) and issubclass(declared_type, BaseModel):
        if found.get(declared_type.__name__) is declared_type:
            return
        found[declared_type.__name__] = declared_type
        for model_field in declared_type.model_fields.values():
            _collect_models(model_field.annotation, found)
        return

    if get_origin(declared_type) is not None:
        for argument in get_args(declared_type):
            _collect_models(argument, found)


def parameter_schema(declared_type: Any) -> dict[str, Any]:
    """JSON schema of a path, query or header parameter, without a title."""
    schema = TypeAdapter(declared_type).json_schema(ref_template=REF_TEMPLATE)
    schema.pop("title", None)
    return schema
