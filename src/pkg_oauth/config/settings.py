from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(slots=True)
class TokenCoreSettings:
    """
    Token core configuration.

    Host code decides how to construct this (env, config file, etc.);
    `settings_from_env()` covers the common case.
    """
    issuer: str
    signing_key: str
    signing_algorithm: str = "HS256"
    # PEM public key for RS*/ES* algorithms; HMAC reuses `signing_key`
    verification_key: Optional[str] = None

    access_token_ttl_seconds: int = 300
    opaque_token_bytes: int = 32

    log_level: str = "info"
    json_logs: bool = True

    def __post_init__(self) -> None:
        if self.access_token_ttl_seconds <= 0:
            raise ValueError("access_token_ttl_seconds must be positive")
        if self.opaque_token_bytes < 16:
            raise ValueError("opaque_token_bytes must be at least 16")

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(seconds=self.access_token_ttl_seconds)
