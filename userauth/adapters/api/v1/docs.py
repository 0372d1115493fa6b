"""
API Documentation Endpoints

Serves Swagger UI, ReDoc and the raw OpenAPI schema. Outside development
the three endpoints sit behind HTTP basic auth with ``DOCS_USERNAME`` and
``DOCS_PASSWORD``; without configured credentials they are unavailable.

Endpoints:
    - /docs: Swagger UI
    - /redoc: ReDoc
    - /openapi.json: The OpenAPI schema
"""

import secrets
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from userauth.core.config.settings import settings
from userauth.core.exceptions import AuthenticationError

router = APIRouter(include_in_schema=False)

basic_auth = HTTPBasic(auto_error=False)


def require_docs_access(
    credentials: Annotated[Optional[HTTPBasicCredentials], Depends(basic_auth)],
) -> None:
    """Lets everyone in during development, otherwise checks basic auth."""
    if settings.is_development:
        return

    username = settings.DOCS_USERNAME
    password = settings.DOCS_PASSWORD
    if not credentials or not username or not password:
        raise AuthenticationError("Documentation requires authentication", code="docs_auth_required")

    valid_username = secrets.compare_digest(credentials.username.encode(), username.encode())
    valid_password = secrets.compare_digest(credentials.password.encode(), password.encode())
    if not (valid_username and valid_password):
        raise AuthenticationError("Invalid documentation credentials", code="docs_auth_invalid")


@router.get("/docs", dependencies=[Depends(require_docs_access)])
async def get_documentation():
    return get_swagger_ui_html(openapi_url="/openapi.json", title=f"{settings.PROJECT_NAME} - Docs")


@router.get("/redoc", dependencies=[Depends(require_docs_access)])
async def get_redoc_documentation():
    return get_redoc_html(openapi_url="/openapi.json", title=f"{settings.PROJECT_NAME} - ReDoc")


@router.get("/openapi.json", dependencies=[Depends(require_docs_access)])
async def get_openapi_json(request: Request):
    return request.app.openapi()
