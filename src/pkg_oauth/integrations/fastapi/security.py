from __future__ import annotations

import base64
import binascii
from typing import Optional
from urllib.parse import unquote_plus

from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import Request

from ...domain.value_objects import ClientCredentials

# Shared by the user-info route; documents the bearer scheme in OpenAPI.
bearer_scheme = HTTPBearer(auto_error=False)

BASIC_REALM = "pkg_oauth"


def parse_basic_credentials(authorization: Optional[str]) -> Optional[ClientCredentials]:
    """
    Decode an `Authorization: Basic ...` header into client credentials.

    Client id and secret are form-url-decoded after the base64 step
    (RFC 6749 section 2.3.1). Returns None for anything that is not a
    well-formed Basic header.
    """
    if not authorization:
        return None

    scheme, _, param = authorization.strip().partition(" ")
    if scheme.lower() != "basic" or not param.strip():
        return None

    try:
        decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    client_id, sep, client_secret = decoded.partition(":")
    if not sep:
        return None

    return ClientCredentials(
        client_id=unquote_plus(client_id),
        client_secret=unquote_plus(client_secret),
    )


def extract_client_credentials(
    request: Request,
    form_client_id: Optional[str] = None,
    form_client_secret: Optional[str] = None,
) -> Optional[ClientCredentials]:
    """
    Extract client credentials from either:

      1. HTTP Basic auth header (preferred; a malformed header is final)
      2. `client_id` / `client_secret` form parameters
    """
    auth_header = request.headers.get("Authorization")
    if auth_header:
        return parse_basic_credentials(auth_header)

    if form_client_id and form_client_secret is not None:
        return ClientCredentials(client_id=form_client_id, client_secret=form_client_secret)

    return None


def extract_bearer_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """
    Extract a bearer access token, or None when none is presented.

      1. HTTPBearer credentials if the dependency resolved them
      2. Raw `Authorization: Bearer <token>` header
    """
    if credentials is not None:
        token = (credentials.credentials or "").strip()
        if token:
            return token

    # header parsed by hand when the route does not depend on bearer_scheme
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header[:7].lower() == "bearer ":
        token = auth_header[7:].strip()
        if token:
            return token

    return None
