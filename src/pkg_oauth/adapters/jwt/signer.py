from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import jwt
from jwt.exceptions import (
    DecodeError,
    InvalidSignatureError as JWTInvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
)

from ...domain.exceptions import InvalidSignatureError, MalformedTokenError
from ...domain.ports import TokenSigner

SERVER_KEY_ID = "server"

REQUIRED_CLAIMS = ["sub", "client_id", "iat", "exp", "jti"]


class JWTTokenSigner(TokenSigner):
    """
    Adapter implementing the TokenSigner port using PyJWT (JWS compact form).

    Infrastructure layer:
    - Knows about JWT structure, algorithms and key material.
    - Knows nothing about expiry; `verify` leaves the time check to the
      token service so there is a single source of time-based truth.

    Key material:
    - `signing_key` / `verification_key`: server keys. For HMAC algorithms
      the verification key defaults to the signing key; for RSA/EC pass the
      PEM private key to sign and the PEM public key to verify.
    - `client_keys`: optional per-client HMAC secrets. Tokens issued to such
      a client are signed with its key and carry its id as `kid`.
    """

    def __init__(
        self,
        signing_key: str | bytes,
        *,
        issuer: str,
        algorithm: str = "HS256",
        verification_key: str | bytes | None = None,
        client_keys: Optional[Mapping[str, str | bytes]] = None,
    ) -> None:
        if not signing_key:
            raise ValueError("JWTTokenSigner requires signing key material")
        if algorithm.lower() == "none":
            raise ValueError("Unsigned tokens are not supported")

        self._algorithm = algorithm
        self._issuer = issuer
        self._signing_key = signing_key
        self._verification_key = verification_key or signing_key
        self._client_keys: Dict[str, str | bytes] = dict(client_keys or {})

        if self._client_keys and not algorithm.startswith("HS"):
            raise ValueError("Per-client keys are only supported for HMAC algorithms")

    @property
    def issuer(self) -> str:
        return self._issuer

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def sign(self, claims: Mapping[str, Any]) -> str:
        payload = dict(claims)
        payload.setdefault("iss", self._issuer)

        client_id = payload.get("client_id")
        if client_id in self._client_keys:
            kid, key = client_id, self._client_keys[client_id]
        else:
            kid, key = SERVER_KEY_ID, self._signing_key

        return jwt.encode(
            payload,
            key,
            algorithm=self._algorithm,
            headers={"kid": kid},
        )

    def verify(self, value: str) -> Mapping[str, Any]:
        """
        Verify signature, algorithm, issuer and required claims.

        Returns:
            Mapping of token claims.

        Raises:
            MalformedTokenError: not a JWS compact structure
            InvalidSignatureError: recognised as a JWT but not trustworthy
        """
        try:
            headers = jwt.get_unverified_header(value)
        except DecodeError as exc:
            raise MalformedTokenError("Not a signed token") from exc
        except JWTInvalidTokenError as exc:
            raise InvalidSignatureError(f"Untrusted token header: {exc}") from exc

        if headers.get("alg") != self._algorithm:
            raise InvalidSignatureError("Unexpected signing algorithm")

        key = self._verification_key_for(headers.get("kid"))
        if key is None:
            raise InvalidSignatureError("Unknown signing key")

        try:
            return jwt.decode(
                value,
                key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_aud": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
        except JWTInvalidSignatureError as exc:
            raise InvalidSignatureError("Signature verification failed") from exc
        except DecodeError as exc:
            raise MalformedTokenError("Token payload cannot be decoded") from exc
        except JWTInvalidTokenError as exc:
            # wrong issuer, missing claims, ...
            raise InvalidSignatureError(f"Untrusted token: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _verification_key_for(self, kid: Any) -> str | bytes | None:
        if kid is None or kid == SERVER_KEY_ID:
            return self._verification_key
        if isinstance(kid, str):
            return self._client_keys.get(kid)
        return None
