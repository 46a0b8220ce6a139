# tests/conftest.py
import base64
from datetime import datetime, timezone

import pytest

from pkg_oauth.adapters.clock import ManualClock
from pkg_oauth.adapters.jwt.signer import JWTTokenSigner
from pkg_oauth.adapters.memory.registries import InMemoryClientRegistry, InMemoryUserDirectory
from pkg_oauth.adapters.memory.token_store import InMemoryTokenStore
from pkg_oauth.application.token_service import TokenService
from pkg_oauth.config.settings import TokenCoreSettings
from pkg_oauth.domain.constants import ClientConfidentiality, TokenRepresentation
from pkg_oauth.domain.entities import Client, User
from pkg_oauth.integrations.common.core_factory import create_token_core

ISSUER = "https://auth.example.com"
SIGNING_KEY = "test-signing-key-0123456789abcdef0123456789abcdef"
START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)



@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def bwayne():
    return User(
        identifier="4d6a1b9e-2f0c-4c59-9a8e-1f3b6f2b7c11",
        username="bwayne",
        first_name="Bruce",
        last_name="Wayne",
        email="bruce.wayne@example.com",
        email_verified=True,
    )


@pytest.fixture
def clients():
    return [
        Client(
            client_id="confidential-jwt",
            secret="demo",
            access_token_format=TokenRepresentation.SELF_CONTAINED,
        ),
        Client(
            client_id="confidential-opaque",
            secret="demo",
            access_token_format=TokenRepresentation.OPAQUE,
            scopes=("openid", "profile"),
        ),
        Client(
            client_id="public-spa",
            secret="",
            confidentiality=ClientConfidentiality.PUBLIC,
        ),
    ]


@pytest.fixture
def client_registry(clients):
    return InMemoryClientRegistry(clients)


@pytest.fixture
def user_directory(bwayne):
    return InMemoryUserDirectory([bwayne])


@pytest.fixture
def signer():
    return JWTTokenSigner(SIGNING_KEY, issuer=ISSUER)


@pytest.fixture
def store(clock):
    return InMemoryTokenStore(clock)


@pytest.fixture
def token_service(signer, store, clock):
    return TokenService(signer=signer, store=store, clock=clock)


@pytest.fixture
def settings():
    return TokenCoreSettings(issuer=ISSUER, signing_key=SIGNING_KEY)


@pytest.fixture
def core(settings, clients, bwayne, clock):
    return create_token_core(settings, clients=clients, users=[bwayne], clock=clock)


@pytest.fixture
def basic_auth():
    def _encode(client_id: str, secret: str) -> str:
        raw = f"{client_id}:{secret}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    return _encode
