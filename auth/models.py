"""
auth/models.py -- Domain value types for authentication.

Pattern: Data class (pure data container, minimal logic). Stores and services
do the work; these types only own shape and decode-time validation.

Claims.from_payload() is the single place where an untrusted claims dict
becomes a typed value. Anything absent or wrong-typed fails there with
MalformedTokenError, so no caller ever indexes into a raw payload dict.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from auth.errors import MalformedTokenError


class TokenType(str, Enum):
    access = "access"
    refresh = "refresh"


@dataclass(frozen=True)
class Credential:
    """A stored login. The plaintext password never reaches this type."""

    username: str
    password_hash: str


@dataclass(frozen=True)
class Claims:
    """The signed payload of a token.

    Wire names: username -> "username", issued_at -> "iat",
    expires_at -> "exp", token_type -> "type", token_id -> "jti".
    Timestamps are integer unix seconds, so two tokens minted in the same
    second differ only by their jti nonce.
    """

    subject: str
    issued_at: int
    expires_at: int
    token_type: TokenType | None = None
    token_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "username": self.subject,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }
        if self.token_type is not None:
            payload["type"] = self.token_type.value
        if self.token_id is not None:
            payload["jti"] = self.token_id
        return payload

    @classmethod
    def from_payload(cls, payload: Any) -> Claims:
        """Build Claims from a decoded JSON payload or raise MalformedTokenError.

        "type" is optional on decode so tokens minted without it still parse;
        whether its absence is acceptable is decided by TokenService.
        """
        if not isinstance(payload, dict):
            raise MalformedTokenError("claims are not a JSON object")

        subject = payload.get("username")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("missing or invalid 'username' claim")

        expires_at = payload.get("exp")
        # bool is an int subclass -- reject it explicitly
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise MalformedTokenError("missing or invalid 'exp' claim")

        issued_at = payload.get("iat", 0)
        if not isinstance(issued_at, int) or isinstance(issued_at, bool):
            raise MalformedTokenError("invalid 'iat' claim")

        token_type = None
        if "type" in payload:
            try:
                token_type = TokenType(payload["type"])
            except ValueError as exc:
                raise MalformedTokenError("invalid 'type' claim") from exc

        token_id = payload.get("jti")
        if token_id is not None and not isinstance(token_id, str):
            raise MalformedTokenError("invalid 'jti' claim")

        return cls(
            subject=subject,
            issued_at=issued_at,
            expires_at=expires_at,
            token_type=token_type,
            token_id=token_id,
        )


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_claims: Claims
    refresh_claims: Claims
