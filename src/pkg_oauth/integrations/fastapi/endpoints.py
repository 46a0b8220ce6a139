from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials

from ..common.core_factory import TokenCore
from .security import BASIC_REALM, bearer_scheme, extract_bearer_token, extract_client_credentials

INTROSPECTION_PATH = "/introspect"
USERINFO_PATH = "/userinfo"

_NO_STORE = {"Cache-Control": "no-store", "Pragma": "no-cache"}


def _json(status_code: int, body: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers={**_NO_STORE, **(headers or {})})


def create_token_router(core: TokenCore) -> APIRouter:
    """
    Router exposing the token core over HTTP:

      POST /introspect         RFC 7662 token introspection
      GET|POST /userinfo       OIDC user-info

    Handlers only decode the request and serialise the result; every
    decision is made by the core.
    """
    router = APIRouter()

    @router.post(INTROSPECTION_PATH)
    async def introspect(
            request: Request,
            token: Optional[str] = Form(default=None),
            client_id: Optional[str] = Form(default=None),
            client_secret: Optional[str] = Form(default=None),
    ) -> JSONResponse:
        credentials = extract_client_credentials(request, client_id, client_secret)
        status_code, result = core.introspect(credentials, token)

        headers = None
        if result.error is not None:
            headers = {"WWW-Authenticate": f'Basic realm="{BASIC_REALM}"'}
        return _json(status_code, result.to_dict(), headers)

    async def userinfo(
            request: Request,
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> JSONResponse:
        access_token = extract_bearer_token(request, credentials)
        status_code, result = core.userinfo(access_token)

        headers = None
        if result.is_error:
            headers = {
                "WWW-Authenticate": (
                    f'Bearer error="{result.error}", '
                    f'error_description="{result.error_description}"'
                )
            }
        return _json(status_code, result.to_dict(), headers)

    router.add_api_route(USERINFO_PATH, userinfo, methods=["GET", "POST"])

    return router


def create_fastapi_app(core: TokenCore, *, title: str = "pkg_oauth token core") -> FastAPI:
    app = FastAPI(title=title)
    app.include_router(create_token_router(core))
    return app
