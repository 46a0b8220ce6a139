from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from ...adapters.clock import SystemClock
from ...adapters.jwt.signer import JWTTokenSigner
from ...adapters.memory.registries import InMemoryClientRegistry, InMemoryUserDirectory
from ...adapters.memory.token_store import InMemoryTokenStore
from ...application.token_service import TokenService
from ...application.use_cases.authenticate_client import ClientAuthenticator
from ...application.use_cases.introspect import IntrospectionProtocolHandler
from ...application.use_cases.userinfo import UserInfoProtocolHandler
from ...config.settings import TokenCoreSettings
from ...domain.entities import Client, IntrospectionResult, User, UserInfoResult
from ...domain.ports import Clock, ClientRegistry, TokenStore, UserDirectory
from ...domain.value_objects import ClientCredentials


@dataclass(slots=True)
class TokenCore:
    """
    Framework-agnostic token core facade.

    Integrations (FastAPI, CLI, ...) adapt this to their own request
    handling; the facade itself knows nothing about HTTP framing.
    """

    token_service: TokenService
    introspection_handler: IntrospectionProtocolHandler
    userinfo_handler: UserInfoProtocolHandler

    # --- Protocol operations ---------------------------------------------

    def introspect(
            self,
            credentials: Optional[ClientCredentials],
            token: Optional[str],
    ) -> Tuple[int, IntrospectionResult]:
        return self.introspection_handler.handle(credentials, token)

    def userinfo(self, access_token: Optional[str]) -> Tuple[int, UserInfoResult]:
        return self.userinfo_handler.handle(access_token)


def create_token_core(
        settings: TokenCoreSettings,
        *,
        clients: Iterable[Client] = (),
        users: Iterable[User] = (),
        client_registry: ClientRegistry | None = None,
        user_directory: UserDirectory | None = None,
        token_store: TokenStore | None = None,
        clock: Clock | None = None,
        client_keys: Mapping[str, str] | None = None,
) -> TokenCore:
    """
    High-level factory: settings -> TokenCore.

    - builds a JWTTokenSigner from the configured key material
    - falls back to in-memory registries/store for anything not injected
    - wires TokenService, ClientAuthenticator and both protocol handlers
    """
    clock = clock or SystemClock()

    signer = JWTTokenSigner(
        settings.signing_key,
        issuer=settings.issuer,
        algorithm=settings.signing_algorithm,
        verification_key=settings.verification_key,
        client_keys=client_keys,
    )

    registry = client_registry or InMemoryClientRegistry(clients)
    directory = user_directory or InMemoryUserDirectory(users)
    store = token_store or InMemoryTokenStore(clock)

    token_service = TokenService(
        signer=signer,
        store=store,
        clock=clock,
        default_ttl=settings.access_token_ttl,
        opaque_token_bytes=settings.opaque_token_bytes,
    )
    authenticator = ClientAuthenticator(client_registry=registry)

    return TokenCore(
        token_service=token_service,
        introspection_handler=IntrospectionProtocolHandler(
            token_service=token_service,
            client_authenticator=authenticator,
        ),
        userinfo_handler=UserInfoProtocolHandler(
            token_service=token_service,
            user_directory=directory,
        ),
    )
