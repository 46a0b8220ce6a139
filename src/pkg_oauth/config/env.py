from __future__ import annotations

import os

from .settings import TokenCoreSettings

ENV_PREFIX = "TOKEN_CORE_"


def _env(key: str) -> str | None:
    return os.getenv(ENV_PREFIX + key)


def settings_from_env() -> TokenCoreSettings:
    def _bool(key: str, default: bool) -> bool:
        raw = _env(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _int(key: str, default: int) -> int:
        raw = _env(key)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise RuntimeError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from exc

    issuer = _env("ISSUER")
    signing_key = _env("SIGNING_KEY")
    if not all([issuer, signing_key]):
        missing = [
            ENV_PREFIX + n
            for n, v in [("ISSUER", issuer), ("SIGNING_KEY", signing_key)]
            if not v
        ]
        raise RuntimeError(f"Missing token core settings: {', '.join(missing)}")

    return TokenCoreSettings(
        issuer=issuer,
        signing_key=signing_key,
        signing_algorithm=_env("SIGNING_ALGORITHM") or "HS256",
        verification_key=_env("VERIFICATION_KEY") or None,
        access_token_ttl_seconds=_int("ACCESS_TOKEN_TTL_SECONDS", 300),
        opaque_token_bytes=_int("OPAQUE_TOKEN_BYTES", 32),
        log_level=_env("LOG_LEVEL") or "info",
        json_logs=_bool("JSON_LOGS", True),
    )
