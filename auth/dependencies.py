"""
auth/dependencies.py -- FastAPI Depends() helpers for bearer authentication.

Each protected request walks the same short chain; the first failed check
rejects the request and the route handler never runs:

  header present?  -> no:  AuthError     ("unauthorized")
  "Bearer " scheme? -> no: AuthError     ("unauthorized")
  token valid?      -> no: TokenError    ("invalid token")
  yes: subject stored on request.state.user and returned to the handler

The scheme prefix is matched literally: "Bearer" with a capital B and exactly
one space. "bearer x", "Bearer  x" and "Token x" are all rejected.

Only the Authorization header is consulted. There is no cookie or API-key
fallback.

Layer rule: may import from fastapi (for Request) because this module is part
of the FastAPI dependency injection system. No imports from api/.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.errors import AuthError, TokenError
from auth.models import TokenType
from auth.tokens import TokenService

logger = logging.getLogger("tokenauth.auth")

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: str | None) -> str:
    """Return the token part of an Authorization header value.

    Raises AuthError if the header is missing, uses another scheme, or has
    nothing after the prefix.
    """
    if not header:
        raise AuthError("missing Authorization header")
    if not header.startswith(BEARER_PREFIX):
        raise AuthError("Authorization scheme is not Bearer")
    token = header[len(BEARER_PREFIX) :]
    if not token:
        raise AuthError("empty bearer token")
    return token


def authenticate(header: str | None, tokens: TokenService) -> str:
    """Run the full header -> subject chain outside of any request object."""
    token = extract_bearer_token(header)
    try:
        return tokens.validate(token, expected_type=TokenType.access)
    except TokenError as exc:
        logger.warning("Rejected bearer token (%s)", exc.kind)
        raise


def get_current_user(request: Request) -> str:
    """Require a valid access token. Returns the authenticated username.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: str = Depends(get_current_user)): ...
    """
    tokens: TokenService = request.app.state.tokens
    subject = authenticate(request.headers.get("Authorization"), tokens)
    request.state.user = subject
    return subject
