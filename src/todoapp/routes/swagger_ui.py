"""
Swagger UI

Interactive explorer for the API documents.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, RedirectResponse

from todoapp.docs.openapi_metadata import OPENAPI_TITLE, OPENAPI_VERSION

SWAGGER_UI_PATH = "/swagger-ui"

router = APIRouter(include_in_schema=False)


@router.get("/api")
async def redirect_to_documentation() -> RedirectResponse:
    return RedirectResponse(SWAGGER_UI_PATH)


@router.get(SWAGGER_UI_PATH)
async def swagger_ui() -> HTMLResponse:
    return get_swagger_ui_html(
        openapi_url=f"/openapi/{OPENAPI_VERSION}.json",
        title=OPENAPI_TITLE,
    )
