from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from .constants import (
    BEARER_TOKEN_TYPE,
    ClientConfidentiality,
    OAuthErrorCode,
    TokenRepresentation,
)
from .value_objects import Subject


@dataclass(frozen=True, slots=True)
class User:
    """
    End-user principal as known to the user directory.

    Owned by the directory; the token core only reads it.
    """
    identifier: str
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: bool = False

    @property
    def full_name(self) -> Optional[str]:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else None


@dataclass(frozen=True, slots=True)
class Client:
    """
    Registered OAuth client, owned by the client registry.
    """
    client_id: str
    secret: str
    confidentiality: ClientConfidentiality = ClientConfidentiality.CONFIDENTIAL
    access_token_format: TokenRepresentation = TokenRepresentation.SELF_CONTAINED
    access_token_ttl: Optional[timedelta] = None
    scopes: Tuple[str, ...] = ()

    @property
    def is_confidential(self) -> bool:
        return self.confidentiality is ClientConfidentiality.CONFIDENTIAL

    def __repr__(self) -> str:
        return (
            f"Client(client_id={self.client_id!r}, "
            f"confidentiality={self.confidentiality.value!r}, "
            f"access_token_format={self.access_token_format.value!r})"
        )


@dataclass(frozen=True, slots=True)
class Token:
    """
    An issued access token.

    `representation` is the variant tag: self-contained tokens carry their
    claims in the signed `value`, opaque tokens are a random reference into
    the token store.
    """
    value: str
    representation: TokenRepresentation
    subject: Subject
    client_id: str
    issued_at: datetime
    expires_at: datetime
    scope: Tuple[str, ...] = ()
    nonce: Optional[str] = None
    token_id: Optional[str] = None  # `jti` of self-contained tokens
    issuer: Optional[str] = None

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at

    def __repr__(self) -> str:
        return (
            f"Token(representation={self.representation.value!r}, "
            f"subject={str(self.subject)!r}, client_id={self.client_id!r}, "
            f"expires_at={self.expires_at.isoformat()!r})"
        )


@dataclass(frozen=True, slots=True)
class OpaqueTokenRecord:
    """
    Server-side state of an opaque token, keyed by the token value.
    Immutable, so concurrent readers can never see a partial record.
    """
    subject: Subject
    client_id: str
    issued_at: datetime
    expires_at: datetime
    scope: Tuple[str, ...] = ()

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(slots=True)
class IntrospectionResult:
    """
    RFC 7662 introspection response.

    Only `active` and `sub` are guaranteed; the remaining members are filled
    in for active tokens only, and `error` only for client-auth failures.
    """
    active: bool = False
    sub: Optional[str] = None
    error: Optional[str] = None
    error_description: Optional[str] = None

    client_id: Optional[str] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    iat: Optional[int] = None
    exp: Optional[int] = None
    iss: Optional[str] = None
    jti: Optional[str] = None

    @classmethod
    def inactive(cls) -> "IntrospectionResult":
        return cls(active=False)

    @classmethod
    def invalid_client(cls) -> "IntrospectionResult":
        return cls(active=False, error=OAuthErrorCode.INVALID_CLIENT.value)

    @classmethod
    def from_token(cls, token: Token) -> "IntrospectionResult":
        return cls(
            active=True,
            sub=str(token.subject),
            client_id=token.client_id,
            token_type=BEARER_TOKEN_TYPE,
            scope=" ".join(token.scope) or None,
            iat=int(token.issued_at.timestamp()),
            exp=int(token.expires_at.timestamp()),
            iss=token.issuer,
            jti=token.token_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        # client-auth failures carry no `active` member at all
        if self.error is not None:
            body: Dict[str, Any] = {"error": self.error}
            if self.error_description:
                body["error_description"] = self.error_description
            return body

        if not self.active:
            return {"active": False}

        body = {"active": True, "sub": self.sub}
        for name in ("client_id", "token_type", "scope", "iat", "exp", "iss", "jti"):
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        return body


@dataclass(slots=True)
class UserInfoResult:
    """
    OIDC user-info response: either an error or the end user's claims.
    """
    error: Optional[str] = None
    error_description: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def invalid_token(cls, description: str) -> "UserInfoResult":
        return cls(
            error=OAuthErrorCode.INVALID_TOKEN.value,
            error_description=description,
        )

    @classmethod
    def from_user(cls, user: User) -> "UserInfoResult":
        claims: Dict[str, Any] = {
            "sub": user.identifier,
            "preferred_username": user.username,
        }
        optional = {
            "name": user.full_name,
            "given_name": user.first_name,
            "family_name": user.last_name,
            "email": user.email,
        }
        claims.update({k: v for k, v in optional.items() if v is not None})
        if user.email is not None:
            claims["email_verified"] = user.email_verified
        return cls(claims=claims)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error, "error_description": self.error_description}
        return dict(self.claims)
