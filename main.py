#!/usr/bin/env python3
"""
TokenAuth -- username/password login with signed access and refresh tokens.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py issue alice
  python main.py issue alice --json
  python main.py inspect eyJhbGciOi...

Environment variables (also read from .env):
  SECRET_KEY                    Signing secret, at least 32 characters. Required unless DEBUG=true.
  DEBUG                         true = generate a throwaway SECRET_KEY if none is set.
  ACCESS_TOKEN_EXPIRE_SECONDS   Access token lifetime (default 900).
  REFRESH_TOKEN_EXPIRE_SECONDS  Refresh token lifetime (default 604800).
  ENFORCE_TOKEN_TYPE            false = accept access and refresh tokens interchangeably.

issue and inspect use the same SECRET_KEY as the server, so with SECRET_KEY
set a token issued here is accepted by a running server and vice versa.
With DEBUG=true and no SECRET_KEY every process generates its own throwaway
key, so tokens do not carry over between the CLI and a server.
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone

from auth.errors import TokenError
from auth.tokens import TokenService
from core.config import get_settings
from core.log import configure_logging

logger = logging.getLogger("tokenauth.cli")


def _format_ts(ts: int) -> str:
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (OverflowError, ValueError, OSError):
        # Outside the platform's datetime range; show the raw claim instead.
        return str(ts)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    logger.info("Serving TokenAuth API on %s:%d", args.host, args.port)
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_issue(args: argparse.Namespace) -> int:
    tokens = TokenService.from_settings(get_settings())
    pair = tokens.issue_pair(args.subject)
    if args.json:
        print(
            json.dumps(
                {"access_token": pair.access_token, "refresh_token": pair.refresh_token},
                indent=2,
            )
        )
        return 0
    print(f"\n  Subject:        {args.subject}")
    print(f"  Access token:   expires {_format_ts(pair.access_claims.expires_at)}")
    print(f"    {pair.access_token}")
    print(f"  Refresh token:  expires {_format_ts(pair.refresh_claims.expires_at)}")
    print(f"    {pair.refresh_token}\n")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    tokens = TokenService.from_settings(get_settings())
    try:
        claims = tokens.validate_claims(args.token, expected_type=None)
    except TokenError as exc:
        print(f"  [!] Token rejected: {exc.kind}")
        return 1
    kind = claims.token_type.value if claims.token_type else "untyped"
    print(f"\n  Valid {kind} token")
    print(f"  Subject:  {claims.subject}")
    print(f"  Issued:   {_format_ts(claims.issued_at)}")
    print(f"  Expires:  {_format_ts(claims.expires_at)}\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TokenAuth -- register, log in, and refresh signed bearer tokens.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --reload
  python main.py issue alice --json
  python main.py inspect "$ACCESS_TOKEN"
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    serve.set_defaults(func=cmd_serve)

    issue = sub.add_parser("issue", help="Print a fresh access/refresh pair for a subject")
    issue.add_argument("subject", metavar="USERNAME", help="Subject to embed in the tokens")
    issue.add_argument("--json", action="store_true", help="Output the pair as JSON")
    issue.set_defaults(func=cmd_issue)

    inspect = sub.add_parser("inspect", help="Validate a token and show its claims")
    inspect.add_argument("token", metavar="TOKEN", help="Encoded token to check")
    inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ValueError as exc:
        print(f"  [!] Configuration error: {exc}")
        return 2
    configure_logging(settings.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
