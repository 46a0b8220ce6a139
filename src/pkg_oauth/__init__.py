"""
pkg_oauth

Token core of an OAuth2/OIDC authorization server: mints self-contained
(JWT) and opaque access tokens, answers RFC 7662 introspection and OIDC
user-info requests. Framework integrations live under `integrations`.
"""

__version__ = "0.1.0"

from .domain.constants import (
    ANONYMOUS_SUBJECT,
    ClientConfidentiality,
    TokenRepresentation,
)
from .domain.entities import (
    Client,
    IntrospectionResult,
    OpaqueTokenRecord,
    Token,
    User,
    UserInfoResult,
)
from .domain.exceptions import (
    OAuthError,
    InvalidClientError,
    InvalidTokenError,
    MalformedTokenError,
    InvalidSignatureError,
    MissingTokenError,
)
from .domain.value_objects import ClientCredentials, Subject
from .domain.ports import Clock, ClientRegistry, TokenSigner, TokenStore, UserDirectory

from .application.token_service import TokenService
from .application.use_cases.authenticate_client import ClientAuthenticator
from .application.use_cases.introspect import IntrospectionProtocolHandler
from .application.use_cases.userinfo import UserInfoProtocolHandler

from .adapters.clock import ManualClock, SystemClock
from .adapters.jwt.signer import JWTTokenSigner
from .adapters.memory.registries import InMemoryClientRegistry, InMemoryUserDirectory
from .adapters.memory.token_store import InMemoryTokenStore

from .config import TokenCoreSettings, settings_from_env
from .integrations.common.core_factory import TokenCore, create_token_core

__all__ = [
    "__version__",
    # domain core
    "ANONYMOUS_SUBJECT",
    "ClientConfidentiality",
    "TokenRepresentation",
    "Client",
    "IntrospectionResult",
    "OpaqueTokenRecord",
    "Token",
    "User",
    "UserInfoResult",
    "ClientCredentials",
    "Subject",
    "Clock",
    "ClientRegistry",
    "TokenSigner",
    "TokenStore",
    "UserDirectory",
    # exceptions
    "OAuthError",
    "InvalidClientError",
    "InvalidTokenError",
    "MalformedTokenError",
    "InvalidSignatureError",
    "MissingTokenError",
    # application
    "TokenService",
    "ClientAuthenticator",
    "IntrospectionProtocolHandler",
    "UserInfoProtocolHandler",
    # adapters
    "ManualClock",
    "SystemClock",
    "JWTTokenSigner",
    "InMemoryClientRegistry",
    "InMemoryUserDirectory",
    "InMemoryTokenStore",
    # wiring
    "TokenCoreSettings",
    "settings_from_env",
    "TokenCore",
    "create_token_core",
]
