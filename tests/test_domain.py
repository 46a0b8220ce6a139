# tests/test_domain.py
from datetime import datetime, timedelta, timezone

import pytest

from pkg_oauth.domain.constants import ANONYMOUS_SUBJECT, TokenRepresentation
from pkg_oauth.domain.entities import (
    Client,
    IntrospectionResult,
    OpaqueTokenRecord,
    Token,
    User,
    UserInfoResult,
)
from pkg_oauth.domain.value_objects import ClientCredentials, Subject, normalize_scope

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_subject_value_object():
    sub = Subject.identified("user-1")
    assert str(sub) == "user-1"
    assert not sub.is_anonymous

    anon = Subject.anonymous()
    assert str(anon) == ANONYMOUS_SUBJECT
    assert anon.is_anonymous
    assert anon != sub

    # --- parse is the inverse of str ---
    assert Subject.parse(str(sub)) == sub
    assert Subject.parse(ANONYMOUS_SUBJECT) == anon

    with pytest.raises(ValueError):
        Subject.identified("")
    with pytest.raises(ValueError):
        Subject.identified(ANONYMOUS_SUBJECT)


def test_client_credentials_hide_secret():
    creds = ClientCredentials("confidential-jwt", "demo")
    assert "demo" not in repr(creds)
    assert "confidential-jwt" in repr(creds)


def test_normalize_scope():
    assert normalize_scope(None) == ()
    assert normalize_scope("openid  profile openid") == ("openid", "profile")
    assert normalize_scope(["email", "", "email", "phone"]) == ("email", "phone")


def test_token_activity_boundaries():
    token = Token(
        value="v",
        representation=TokenRepresentation.OPAQUE,
        subject=Subject.anonymous(),
        client_id="c",
        issued_at=START,
        expires_at=START + timedelta(minutes=5),
    )
    assert token.is_active(START)
    assert token.is_active(START + timedelta(minutes=5) - timedelta(microseconds=1))
    # expiry instant itself is no longer valid
    assert not token.is_active(START + timedelta(minutes=5))

    record = OpaqueTokenRecord(Subject.anonymous(), "c", START, START + timedelta(seconds=1))
    assert record.is_active(START)
    assert not record.is_active(START + timedelta(seconds=1))


def test_introspection_result_shapes():
    assert IntrospectionResult.inactive().to_dict() == {"active": False}
    assert IntrospectionResult.invalid_client().to_dict() == {"error": "invalid_client"}

    token = Token(
        value="v",
        representation=TokenRepresentation.OPAQUE,
        subject=Subject.identified("user-1"),
        client_id="confidential-opaque",
        issued_at=START,
        expires_at=START + timedelta(minutes=5),
        scope=("openid", "profile"),
    )
    body = IntrospectionResult.from_token(token).to_dict()
    assert body == {
        "active": True,
        "sub": "user-1",
        "client_id": "confidential-opaque",
        "token_type": "Bearer",
        "scope": "openid profile",
        "iat": int(START.timestamp()),
        "exp": int(START.timestamp()) + 300,
    }


def test_userinfo_projection():
    user = User(
        identifier="id-1",
        username="bwayne",
        first_name="Bruce",
        last_name="Wayne",
        email="bruce.wayne@example.com",
        email_verified=True,
    )
    result = UserInfoResult.from_user(user)
    assert not result.is_error
    assert result.to_dict() == {
        "sub": "id-1",
        "preferred_username": "bwayne",
        "name": "Bruce Wayne",
        "given_name": "Bruce",
        "family_name": "Wayne",
        "email": "bruce.wayne@example.com",
        "email_verified": True,
    }

    minimal = UserInfoResult.from_user(User(identifier="id-2", username="alfred"))
    assert minimal.to_dict() == {"sub": "id-2", "preferred_username": "alfred"}

    error = UserInfoResult.invalid_token("Access Token is required")
    assert error.is_error
    assert error.to_dict() == {
        "error": "invalid_token",
        "error_description": "Access Token is required",
    }


def test_client_repr_hides_secret():
    client = Client("confidential-jwt", "s3cr3t")
    assert client.is_confidential
    assert "s3cr3t" not in repr(client)
