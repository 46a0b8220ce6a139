from __future__ import annotations

from .endpoints import INTROSPECTION_PATH, USERINFO_PATH, create_fastapi_app, create_token_router
from .security import bearer_scheme, extract_bearer_token, parse_basic_credentials

__all__ = [
    "INTROSPECTION_PATH",
    "USERINFO_PATH",
    "bearer_scheme",
    "create_fastapi_app",
    "create_token_router",
    "extract_bearer_token",
    "parse_basic_credentials",
]
