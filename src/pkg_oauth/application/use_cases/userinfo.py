from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from ...domain.entities import UserInfoResult
from ...domain.exceptions import MissingTokenError
from ...domain.ports import UserDirectory
from ..token_service import TokenService
from .introspect import HTTP_OK, HTTP_UNAUTHORIZED

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_REQUIRED = "Access Token is required"
ACCESS_TOKEN_INVALID = "Access Token is invalid or expired"
ACCESS_TOKEN_ANONYMOUS = "Access Token is not bound to an end user"


@dataclass(slots=True)
class UserInfoProtocolHandler:
    """
    OIDC user-info endpoint core.

    Validates the presented access token through the token service and
    projects the end user's directory entry into claims. Tokens without an
    end user (anonymous subject) are refused like invalid ones.
    """

    token_service: TokenService
    user_directory: UserDirectory

    def handle(self, presented_access_token: Optional[str]) -> Tuple[int, UserInfoResult]:
        try:
            access_token = _require_token(presented_access_token)
        except MissingTokenError as exc:
            return HTTP_UNAUTHORIZED, UserInfoResult.invalid_token(str(exc))

        token = self.token_service.resolve(access_token)
        if token is None:
            return HTTP_UNAUTHORIZED, UserInfoResult.invalid_token(ACCESS_TOKEN_INVALID)

        if token.subject.is_anonymous:
            logger.info("userinfo_refused_anonymous", client_id=token.client_id)
            return HTTP_UNAUTHORIZED, UserInfoResult.invalid_token(ACCESS_TOKEN_ANONYMOUS)

        user = self.user_directory.find_by_identifier(str(token.subject))
        if user is None:
            # token outlived its user
            logger.warning("userinfo_subject_unknown", client_id=token.client_id)
            return HTTP_UNAUTHORIZED, UserInfoResult.invalid_token(ACCESS_TOKEN_INVALID)

        return HTTP_OK, UserInfoResult.from_user(user)


def _require_token(value: Optional[str]) -> str:
    token = (value or "").strip()
    if not token:
        raise MissingTokenError(ACCESS_TOKEN_REQUIRED)
    return token
