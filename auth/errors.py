"""
auth/errors.py -- Error taxonomy for the authentication core.

Every failure the core can produce is one of three kinds, each with a fixed
HTTP status and a fixed client-facing message:

  InputError    (400)  missing or malformed request fields
  AuthError     (401)  bad credentials, or an invalid/expired/malformed token
  InternalError (500)  signing failure

The message is deliberately generic. The detailed reason (e.g. why a token
was rejected) lives in `kind` and the exception args, which are logged
server-side and never returned to the client. No error carries the signing
secret, a password, or a password hash.

Layer rule: no imports from api/ or core/. The api layer turns these into
JSON responses via to_dict().
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any


class AuthFlowError(Exception):
    """Base class. Subclasses set status and message as class attributes."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "internal error"

    def __init__(self, detail: str | None = None, *, message: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail
        if message is not None:
            self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class InputError(AuthFlowError):
    status = HTTPStatus.BAD_REQUEST
    message = "invalid input"


class AuthError(AuthFlowError):
    status = HTTPStatus.UNAUTHORIZED
    message = "unauthorized"


class InternalError(AuthFlowError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "internal error"


# ---------------------------------------------------------------------------
# Token validation failures
# ---------------------------------------------------------------------------


class TokenError(AuthError):
    """A presented token was rejected. `kind` names the failed check."""

    message = "invalid token"
    kind = "invalid"


class MalformedTokenError(TokenError):
    kind = "malformed"


class InvalidSignatureError(TokenError):
    kind = "invalid_signature"


class ExpiredTokenError(TokenError):
    kind = "expired"


class WrongTokenTypeError(TokenError):
    kind = "wrong_type"


class TokenSigningError(InternalError):
    message = "token generation failed"
