# src/pkg_oauth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .constants import ANONYMOUS_SUBJECT


# --- Subject --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Subject:
    """
    The principal a token was issued for.

    Either identified (a stable user identifier) or anonymous (a token minted
    for a client without any end user). Build instances through
    `Subject.identified()` / `Subject.anonymous()` rather than the constructor.
    """
    user_id: str | None = None

    def __post_init__(self) -> None:
        if self.user_id is not None:
            if not self.user_id:
                raise ValueError("Identified subject requires a non-empty user id")
            if self.user_id == ANONYMOUS_SUBJECT:
                raise ValueError(
                    f"{ANONYMOUS_SUBJECT!r} is reserved for anonymous subjects"
                )

    @classmethod
    def identified(cls, user_id: str) -> "Subject":
        return cls(user_id=str(user_id))

    @classmethod
    def anonymous(cls) -> "Subject":
        return cls(user_id=None)

    @classmethod
    def parse(cls, value: str) -> "Subject":
        """Inverse of `str()`: the anonymous sentinel maps back to anonymous."""
        if value == ANONYMOUS_SUBJECT:
            return cls.anonymous()
        return cls.identified(value)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def __str__(self) -> str:
        return ANONYMOUS_SUBJECT if self.user_id is None else self.user_id


# --- Client credentials ---------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClientCredentials:
    """
    Client identifier and secret as presented by a caller.

    Decoding (HTTP Basic, form post) happens at the integration boundary.
    """
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"ClientCredentials(client_id={self.client_id!r}, client_secret='***')"


def normalize_scope(values: Iterable[str] | str | None) -> Tuple[str, ...]:
    """
    Normalize a scope into a tuple of unique names, keeping first-seen order.
    A plain string is treated as a space-delimited scope parameter.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        values = values.split()
    seen: dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return tuple(seen)
