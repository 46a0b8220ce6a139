# tests/test_token_service.py
import threading
from datetime import timedelta

import pytest

from pkg_oauth.adapters.jwt.signer import JWTTokenSigner
from pkg_oauth.domain.constants import ANONYMOUS_SUBJECT, TokenRepresentation
from pkg_oauth.domain.value_objects import Subject

SELF_CONTAINED = TokenRepresentation.SELF_CONTAINED
OPAQUE = TokenRepresentation.OPAQUE
FIVE_MINUTES = timedelta(minutes=5)


@pytest.mark.parametrize("representation", [SELF_CONTAINED, OPAQUE])
def test_personalized_token_lifecycle(token_service, clock, bwayne, representation):
    token = token_service.create_personalized_token(
        bwayne, "confidential-jwt", FIVE_MINUTES, representation
    )
    assert token.representation is representation
    assert token.subject == Subject.identified(bwayne.identifier)
    assert token.expires_at - token.issued_at == FIVE_MINUTES

    result = token_service.introspect(token.value)
    assert result.active
    assert result.sub == bwayne.identifier
    assert result.client_id == "confidential-jwt"

    clock.advance(FIVE_MINUTES)
    result = token_service.introspect(token.value)
    assert not result.active
    assert result.sub is None
    assert result.to_dict() == {"active": False}


@pytest.mark.parametrize("representation", [SELF_CONTAINED, OPAQUE])
def test_anonymous_token_uses_sentinel(token_service, bwayne, representation):
    token = token_service.create_anonymous_token("confidential-opaque", FIVE_MINUTES, representation)
    assert token.subject.is_anonymous

    result = token_service.introspect(token.value)
    assert result.active
    assert result.sub == ANONYMOUS_SUBJECT
    assert result.sub != bwayne.identifier


def test_self_contained_tokens_never_touch_the_store(token_service, store, bwayne):
    token = token_service.create_personalized_token(
        bwayne, "confidential-jwt", FIVE_MINUTES, SELF_CONTAINED, nonce="n-1", scope="openid"
    )
    assert len(store) == 0
    assert token.nonce == "n-1"
    assert token.scope == ("openid",)
    assert token.issuer == "https://auth.example.com"
    assert token.value.count(".") == 2

    result = token_service.introspect(token.value)
    assert result.jti == token.token_id
    assert result.iss == "https://auth.example.com"
    assert result.scope == "openid"


def test_opaque_record_round_trip(token_service, store, bwayne):
    token = token_service.create_personalized_token(
        bwayne, "confidential-opaque", FIVE_MINUTES, OPAQUE, scope=["openid", "profile"]
    )
    record = store.get(token.value)
    assert record.subject == Subject.identified(bwayne.identifier)
    assert record.client_id == "confidential-opaque"
    assert record.expires_at == token.expires_at
    assert record.scope == ("openid", "profile")
    assert "." not in token.value


def test_expired_opaque_token_with_tiny_ttl(token_service, clock, bwayne):
    token = token_service.create_personalized_token(
        bwayne, "confidential-opaque", timedelta(milliseconds=1), OPAQUE
    )
    clock.advance(timedelta(milliseconds=5))

    result = token_service.introspect(token.value)
    assert not result.active
    assert result.sub is None


@pytest.mark.parametrize(
    "value",
    [None, "", "1234", "test", "a.b.c", "eyJhbGciOiJIUzI1NiJ9.e30.", "x" * 4096],
)
def test_unknown_and_malformed_values_are_inactive(token_service, value):
    result = token_service.introspect(value)
    assert not result.active
    assert result.sub is None
    assert result.error is None


def test_forged_self_contained_token_is_inactive(token_service, clock, bwayne):
    forger = JWTTokenSigner(
        "attacker-key-0123456789abcdef0123456789abcdef", issuer="https://auth.example.com"
    )
    forged_service = type(token_service)(signer=forger, store=token_service.store, clock=clock)
    forged = forged_service.create_personalized_token(
        bwayne, "confidential-jwt", FIVE_MINUTES, SELF_CONTAINED
    )

    assert forged_service.introspect(forged.value).active
    assert not token_service.introspect(forged.value).active


def test_values_are_never_reused(token_service, bwayne):
    values = set()
    for representation in (SELF_CONTAINED, OPAQUE):
        for _ in range(50):
            values.add(
                token_service.create_personalized_token(
                    bwayne, "confidential-jwt", FIVE_MINUTES, representation
                ).value
            )
    assert len(values) == 100


def test_introspection_is_idempotent(token_service, bwayne):
    token = token_service.create_personalized_token(
        bwayne, "confidential-opaque", FIVE_MINUTES, OPAQUE
    )
    first = token_service.introspect(token.value)
    for _ in range(5):
        assert token_service.introspect(token.value) == first


def test_create_access_token_follows_client_configuration(token_service, clients, bwayne):
    jwt_client, opaque_client = clients[0], clients[1]

    token = token_service.create_access_token(jwt_client, bwayne)
    assert token.representation is SELF_CONTAINED
    assert token.expires_at - token.issued_at == token_service.default_ttl

    token = token_service.create_access_token(opaque_client)
    assert token.representation is OPAQUE
    assert token.subject.is_anonymous
    assert token.scope == ("openid", "profile")

    token = token_service.create_access_token(opaque_client, bwayne, scope="email", ttl=timedelta(seconds=30))
    assert token.scope == ("email",)
    assert token.expires_at - token.issued_at == timedelta(seconds=30)


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-1)])
def test_non_positive_ttl_is_rejected(token_service, clients, bwayne, ttl):
    with pytest.raises(ValueError):
        token_service.create_anonymous_token("confidential-jwt", ttl, OPAQUE)

    # an explicit zero must not fall back to the client or service default
    for client in clients[:2]:
        with pytest.raises(ValueError):
            token_service.create_access_token(client, ttl=ttl)
        with pytest.raises(ValueError):
            token_service.create_access_token(client, bwayne, ttl=ttl)


@pytest.mark.parametrize(
    "ttl",
    [
        timedelta(milliseconds=1),
        timedelta(milliseconds=500),
        timedelta(milliseconds=999),
        timedelta(seconds=1, milliseconds=500),
    ],
)
def test_sub_second_self_contained_lifetimes(token_service, clock, bwayne, ttl):
    token = token_service.create_personalized_token(
        bwayne, "confidential-jwt", ttl, SELF_CONTAINED
    )
    assert token.expires_at - token.issued_at == ttl

    result = token_service.introspect(token.value)
    assert result.active
    assert result.sub == bwayne.identifier

    clock.advance(ttl - timedelta(microseconds=100))
    assert token_service.introspect(token.value).active

    clock.advance(timedelta(microseconds=100))
    assert not token_service.introspect(token.value).active


def test_empty_client_id_is_rejected(token_service):
    with pytest.raises(ValueError):
        token_service.create_anonymous_token("", FIVE_MINUTES, SELF_CONTAINED)


def test_concurrent_issuance_and_introspection(token_service, bwayne):
    errors = []

    def worker():
        for _ in range(50):
            token = token_service.create_personalized_token(
                bwayne, "confidential-opaque", FIVE_MINUTES, OPAQUE
            )
            result = token_service.introspect(token.value)
            if not result.active or result.sub != bwayne.identifier:
                errors.append(token.value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(token_service.store) == 8 * 50
