from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

import structlog

from ..domain.constants import TokenRepresentation
from ..domain.entities import Client, IntrospectionResult, OpaqueTokenRecord, Token, User
from ..domain.exceptions import InvalidSignatureError, MalformedTokenError
from ..domain.ports import Clock, TokenSigner, TokenStore
from ..domain.value_objects import Subject, normalize_scope

logger = structlog.get_logger(__name__)

DEFAULT_ACCESS_TOKEN_TTL = timedelta(minutes=5)

# Attempts to find an unused opaque value before giving up; a collision of
# 256-bit random values means the RNG is broken.
_MAX_OPAQUE_ATTEMPTS = 3


@dataclass(slots=True)
class TokenService:
    """
    Central token authority.

    Mints personalized and anonymous access tokens in either representation
    and resolves presented token values back into live tokens.

    `introspect` and `resolve` never raise for token problems: expired,
    forged, malformed and never-issued values all come back inactive, so
    callers cannot tell them apart.
    """

    signer: TokenSigner
    store: TokenStore
    clock: Clock
    default_ttl: timedelta = DEFAULT_ACCESS_TOKEN_TTL
    opaque_token_bytes: int = 32

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def create_personalized_token(
            self,
            subject_user: User,
            client_id: str,
            ttl: timedelta,
            representation: TokenRepresentation,
            *,
            nonce: Optional[str] = None,
            scope: Iterable[str] | str | None = None,
    ) -> Token:
        """Mint a token bound to `Subject.identified(subject_user.identifier)`."""
        return self._create(
            Subject.identified(subject_user.identifier),
            client_id,
            ttl,
            representation,
            nonce=nonce,
            scope=normalize_scope(scope),
        )

    def create_anonymous_token(
            self,
            client_id: str,
            ttl: timedelta,
            representation: TokenRepresentation,
            *,
            scope: Iterable[str] | str | None = None,
    ) -> Token:
        """Mint a token with no end user (client-credential grants)."""
        return self._create(
            Subject.anonymous(),
            client_id,
            ttl,
            representation,
            nonce=None,
            scope=normalize_scope(scope),
        )

    def create_access_token(
            self,
            client: Client,
            user: Optional[User] = None,
            *,
            ttl: Optional[timedelta] = None,
            nonce: Optional[str] = None,
            scope: Iterable[str] | str | None = None,
    ) -> Token:
        """
        Mint a token using the client's configured format and lifetime.

        Falls back to the service default TTL and to the client's registered
        scopes when none are given.
        """
        if ttl is None:
            ttl = client.access_token_ttl or self.default_ttl
        scope = client.scopes if scope is None else scope

        if user is None:
            return self.create_anonymous_token(
                client.client_id, ttl, client.access_token_format, scope=scope
            )
        return self.create_personalized_token(
            user, client.client_id, ttl, client.access_token_format,
            nonce=nonce, scope=scope,
        )

    def _create(
            self,
            subject: Subject,
            client_id: str,
            ttl: timedelta,
            representation: TokenRepresentation,
            *,
            nonce: Optional[str],
            scope: tuple[str, ...],
    ) -> Token:
        if ttl <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        if not client_id:
            raise ValueError("Token must be issued to a client")

        if representation is TokenRepresentation.SELF_CONTAINED:
            token = self._create_self_contained(subject, client_id, ttl, nonce, scope)
        else:
            token = self._create_opaque(subject, client_id, ttl, scope)

        logger.info(
            "access_token_issued",
            client_id=client_id,
            representation=representation.value,
            anonymous=subject.is_anonymous,
            expires_at=token.expires_at.isoformat(),
        )
        return token

    def _create_self_contained(
            self,
            subject: Subject,
            client_id: str,
            ttl: timedelta,
            nonce: Optional[str],
            scope: tuple[str, ...],
    ) -> Token:
        now = self.clock.now()
        expires_at = now + ttl
        # NumericDate may be fractional; whole seconds would kill sub-second TTLs
        iat = now.timestamp()
        exp = expires_at.timestamp()
        jti = secrets.token_urlsafe(16)

        claims: dict[str, Any] = {
            "sub": str(subject),
            "client_id": client_id,
            "iat": iat,
            "exp": exp,
            "jti": jti,
        }
        if nonce:
            claims["nonce"] = nonce
        if scope:
            claims["scope"] = " ".join(scope)

        value = self.signer.sign(claims)
        return Token(
            value=value,
            representation=TokenRepresentation.SELF_CONTAINED,
            subject=subject,
            client_id=client_id,
            issued_at=now,
            expires_at=expires_at,
            scope=scope,
            nonce=nonce or None,
            token_id=jti,
            issuer=self.signer.issuer,
        )

    def _create_opaque(
            self,
            subject: Subject,
            client_id: str,
            ttl: timedelta,
            scope: tuple[str, ...],
    ) -> Token:
        now = self.clock.now()
        record = OpaqueTokenRecord(
            subject=subject,
            client_id=client_id,
            issued_at=now,
            expires_at=now + ttl,
            scope=scope,
        )

        for _ in range(_MAX_OPAQUE_ATTEMPTS):
            value = secrets.token_urlsafe(self.opaque_token_bytes)
            if self.store.put_if_absent(value, record):
                return self._token_from_record(value, record)

        raise RuntimeError("Could not allocate a unique opaque token value")

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def resolve(self, presented_value: Optional[str]) -> Optional[Token]:
        """
        Resolve a presented value into a live token, or None.

        1. Try it as a self-contained token. A bad signature on a recognised
           structure ends here as inactive; a malformed structure or an
           expired token falls through.
        2. Look it up in the opaque token store.
        """
        if not presented_value:
            return None

        now = self.clock.now()

        try:
            claims = self.signer.verify(presented_value)
        except InvalidSignatureError:
            logger.info("self_contained_token_rejected")
            return None
        except MalformedTokenError:
            pass
        else:
            token = self._token_from_claims(presented_value, claims)
            if token is not None and token.is_active(now):
                return token

        record = self.store.get(presented_value)
        if record is None or not record.is_active(now):
            return None
        return self._token_from_record(presented_value, record)

    def introspect(self, presented_value: Optional[str]) -> IntrospectionResult:
        token = self.resolve(presented_value)
        if token is None:
            return IntrospectionResult.inactive()
        return IntrospectionResult.from_token(token)

    # ------------------------------------------------------------------ #
    # Internal: claims / records -> Token
    # ------------------------------------------------------------------ #

    @staticmethod
    def _token_from_claims(value: str, claims: Mapping[str, Any]) -> Optional[Token]:
        try:
            return Token(
                value=value,
                representation=TokenRepresentation.SELF_CONTAINED,
                subject=Subject.parse(str(claims["sub"])),
                client_id=str(claims["client_id"]),
                issued_at=_from_numeric_date(claims["iat"]),
                expires_at=_from_numeric_date(claims["exp"]),
                scope=normalize_scope(claims.get("scope")),
                nonce=claims.get("nonce"),
                token_id=claims.get("jti"),
                issuer=claims.get("iss"),
            )
        except (KeyError, TypeError, ValueError, OverflowError, OSError):
            # signed by us but unusable; never trust it
            return None

    @staticmethod
    def _token_from_record(value: str, record: OpaqueTokenRecord) -> Token:
        return Token(
            value=value,
            representation=TokenRepresentation.OPAQUE,
            subject=record.subject,
            client_id=record.client_id,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
            scope=record.scope,
        )


def _from_numeric_date(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError("NumericDate must be a number")
    return datetime.fromtimestamp(value, tz=timezone.utc)
