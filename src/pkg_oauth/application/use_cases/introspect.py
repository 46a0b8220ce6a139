from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from ...domain.exceptions import InvalidClientError
from ...domain.entities import IntrospectionResult
from ...domain.value_objects import ClientCredentials
from ..token_service import TokenService
from .authenticate_client import ClientAuthenticator

logger = structlog.get_logger(__name__)

HTTP_OK = 200
HTTP_UNAUTHORIZED = 401


@dataclass(slots=True)
class IntrospectionProtocolHandler:
    """
    RFC 7662 token introspection.

    Two possible answers:
      - 401 + `{"error": "invalid_client"}` when the caller cannot be
        authenticated (no `active` member at all)
      - 200 + the introspection result otherwise, whatever the token state;
        an absent token is just another inactive token
    """

    token_service: TokenService
    client_authenticator: ClientAuthenticator

    def handle(
            self,
            client_credentials: Optional[ClientCredentials],
            token_value: Optional[str],
    ) -> Tuple[int, IntrospectionResult]:
        try:
            client = self.client_authenticator.authenticate(client_credentials)
        except InvalidClientError:
            return HTTP_UNAUTHORIZED, IntrospectionResult.invalid_client()

        result = self.token_service.introspect(token_value)
        logger.info(
            "token_introspected",
            requesting_client=client.client_id,
            active=result.active,
        )
        return HTTP_OK, result
