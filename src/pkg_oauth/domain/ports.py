from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol

from .entities import Client, OpaqueTokenRecord, User


class Clock(Protocol):
    """
    Single source of "now" for every expiry decision.
    Must return timezone-aware UTC datetimes.
    """

    def now(self) -> datetime:
        ...


class TokenSigner(Protocol):
    """
    Port for producing and checking self-contained (signed) token values.

    Implementations live in the adapters layer (e.g. PyJWT signer).
    """

    @property
    def issuer(self) -> str:
        """Value of the `iss` claim stamped on every signed token."""
        ...

    def sign(self, claims: Mapping[str, Any]) -> str:
        ...

    def verify(self, value: str) -> Mapping[str, Any]:
        """
        Verify the structure and signature of `value` and return its claims.

        Must NOT check expiry.
        Raises:
          - MalformedTokenError: `value` is not a signed token structure
          - InvalidSignatureError: structure is recognised but untrusted
        """
        ...


class TokenStore(Protocol):
    """
    Keyed store for opaque token records.

    A `put` must be visible to every later `get` from any thread. Expired
    records may still be returned by `get`; liveness is decided by the caller.
    """

    def put(self, value: str, record: OpaqueTokenRecord) -> None:
        ...

    def put_if_absent(self, value: str, record: OpaqueTokenRecord) -> bool:
        ...

    def get(self, value: str) -> Optional[OpaqueTokenRecord]:
        ...

    def remove(self, value: str) -> None:
        ...


class ClientRegistry(Protocol):
    """Read-only lookup of registered clients."""

    def find_by_client_id(self, client_id: str) -> Optional[Client]:
        ...


class UserDirectory(Protocol):
    """Read-only lookup of end users by their stable identifier."""

    def find_by_identifier(self, identifier: str) -> Optional[User]:
        ...
