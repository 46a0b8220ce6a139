# src/pkg_oauth/cli.py

from __future__ import annotations

import argparse
import json
import sys
from datetime import timedelta
from typing import Any, Sequence

from .config.env import settings_from_env
from .domain.constants import TokenRepresentation
from .domain.entities import User
from .integrations.common.core_factory import create_token_core
from .log import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-oauth",
        description="Mint and inspect self-contained access tokens "
                    "using the TOKEN_CORE_* environment settings",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    mint = sub.add_parser("mint", help="Issue a signed access token")
    mint.add_argument("--client-id", required=True, help="Client the token is issued to")
    mint.add_argument(
        "--subject",
        help="End-user identifier; omit for an anonymous (client-only) token",
    )
    mint.add_argument(
        "--ttl",
        type=int,
        help="Lifetime in seconds (default: TOKEN_CORE_ACCESS_TOKEN_TTL_SECONDS)",
    )
    mint.add_argument("--scope", nargs="*", default=[], help="Scope values to embed")

    decode = sub.add_parser("decode", help="Introspect a signed access token")
    decode.add_argument("token", help="Token value")

    return parser.parse_args(args=argv)


def _run(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    configure_logging(settings.log_level, settings.json_logs)
    # Opaque tokens would die with this process, so the CLI only
    # deals in self-contained ones.
    core = create_token_core(settings)
    service = core.token_service

    if args.command == "mint":
        ttl = timedelta(seconds=args.ttl) if args.ttl else settings.access_token_ttl
        if args.subject:
            token = service.create_personalized_token(
                User(identifier=args.subject, username=args.subject),
                args.client_id,
                ttl,
                TokenRepresentation.SELF_CONTAINED,
                scope=args.scope,
            )
        else:
            token = service.create_anonymous_token(
                args.client_id,
                ttl,
                TokenRepresentation.SELF_CONTAINED,
                scope=args.scope,
            )
        return {
            "access_token": token.value,
            "token_type": "Bearer",
            "expires_in": int((token.expires_at - token.issued_at).total_seconds()),
        }

    return service.introspect(args.token).to_dict()


def _emit(document: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(document, indent=2) + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point of the `pkg-oauth` script; failures are reported, then re-raised."""
    args = _parse_args(argv)
    try:
        result = _run(args)
    except Exception as exc:  # noqa: BLE001
        _emit({"ok": False, "error": str(exc)})
        raise
    _emit({"ok": True, **result})


if __name__ == "__main__":
    main()
