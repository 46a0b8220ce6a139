from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

import structlog

from ...domain.entities import Client
from ...domain.exceptions import InvalidClientError
from ...domain.ports import ClientRegistry
from ...domain.value_objects import ClientCredentials

logger = structlog.get_logger(__name__)

# Compared against when the client id is unknown, so that both failure
# paths run the same constant-time comparison.
_DUMMY_SECRET = b"\x00" * 32


def secrets_match(presented: str, expected: str) -> bool:
    """Constant-time secret comparison over UTF-8 bytes."""
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


@dataclass(slots=True)
class ClientAuthenticator:
    """
    Application use case:
    - Look up the presented client id in the registry
    - Compare the presented secret in constant time

    Unknown id, missing credentials, public client and wrong secret all end
    in the same `InvalidClientError`.
    """

    client_registry: ClientRegistry

    def authenticate(self, credentials: Optional[ClientCredentials]) -> Client:
        """
        Raises:
            InvalidClientError
        """
        if credentials is None or not credentials.client_id:
            logger.info("client_authentication_failed", reason="no_credentials")
            raise InvalidClientError()

        client = self.client_registry.find_by_client_id(credentials.client_id)

        if client is None or not client.secret:
            hmac.compare_digest(credentials.client_secret.encode("utf-8"), _DUMMY_SECRET)
            matched = False
        else:
            matched = secrets_match(credentials.client_secret, client.secret)

        if not matched or client is None or not client.is_confidential:
            # `client_id` is caller-supplied; the reason is deliberately not logged
            logger.info("client_authentication_failed", client_id=credentials.client_id)
            raise InvalidClientError()

        return client
