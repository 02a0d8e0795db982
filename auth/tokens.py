"""
auth/tokens.py -- Signed token issuance and validation.

Security design decisions:
  Format: JWS compact serialization via python-jose with HS256 -- three
       dot-separated base64url segments (header, claims, signature). The
       signature is HMAC-SHA256 over header+claims with the signing secret.

  Secret: TokenService owns the signing secret. It is passed in once, at
       construction, by the application lifespan (see api/main.py) and is
       never read from module-level state or exposed afterwards.

  Validation is split into separate steps so each failure maps to exactly
       one error type:
         1. parse the three segments and claims JSON   -> MalformedTokenError
         2. verify the HMAC signature                  -> InvalidSignatureError
         3. check claim presence and types             -> MalformedTokenError
         4. check expiry (now >= exp is expired)       -> ExpiredTokenError
         5. check the "type" claim, when enforced      -> WrongTokenTypeError
       jose's own exp check is disabled; expiry is evaluated here against the
       injected clock so tests can move time without sleeping.

  Token purpose: every token carries a "type" claim ("access" or "refresh").
       With enforce_type=True (the default) a refresh token is rejected where
       an access token is expected and vice versa. With enforce_type=False
       both kinds are interchangeable, and tokens without a "type" claim are
       accepted anywhere.

  Token ids: every token carries a random "jti" nonce. iat/exp have
       one-second resolution, so without it a refresh in the same second as
       login would return the identical pair.

  Rotation: issuing a new pair does not invalidate earlier tokens. There is
       no revocation store; a refresh token stays usable until its own exp.

Thread safety: the only state is immutable configuration, so one instance is
shared by all requests without locking.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from jose import jws, jwt
from jose.exceptions import JWSError, JWTError

from auth.errors import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenSigningError,
    WrongTokenTypeError,
)
from auth.models import Claims, TokenPair, TokenType

if TYPE_CHECKING:
    from core.config import Settings

logger = logging.getLogger("tokenauth.auth.tokens")

ALGORITHM = "HS256"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and validates HS256 tokens for a single process-wide secret."""

    def __init__(
        self,
        secret: str,
        access_ttl: int = 15 * 60,
        refresh_ttl: int = 7 * 24 * 3600,
        *,
        enforce_type: bool = True,
        clock: Clock = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("signing secret must not be empty")
        if access_ttl <= 0 or refresh_ttl <= 0:
            raise ValueError("token lifetimes must be positive")
        if access_ttl >= refresh_ttl:
            raise ValueError("access TTL must be shorter than refresh TTL")
        self._secret = secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.enforce_type = enforce_type
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utc_now) -> TokenService:
        return cls(
            settings.secret_key,
            access_ttl=settings.access_token_expire_seconds,
            refresh_ttl=settings.refresh_token_expire_seconds,
            enforce_type=settings.enforce_token_type,
            clock=clock,
        )

    def now(self) -> int:
        return int(self._clock().timestamp())

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def issue_pair(self, subject: str) -> TokenPair:
        """Sign a fresh access/refresh pair for subject, both issued at the same instant.

        Each token gets its own random jti, so a pair minted in the same
        second as an earlier one is still a different pair.

        Raises TokenSigningError if the signer fails.
        """
        issued_at = self.now()
        access_claims = Claims(
            subject, issued_at, issued_at + self.access_ttl, TokenType.access, secrets.token_urlsafe(16)
        )
        refresh_claims = Claims(
            subject, issued_at, issued_at + self.refresh_ttl, TokenType.refresh, secrets.token_urlsafe(16)
        )
        return TokenPair(
            access_token=self._sign(access_claims),
            refresh_token=self._sign(refresh_claims),
            access_claims=access_claims,
            refresh_claims=refresh_claims,
        )

    def _sign(self, claims: Claims) -> str:
        try:
            return jwt.encode(claims.to_payload(), self._secret, algorithm=ALGORITHM)
        except (JWSError, JWTError) as exc:
            logger.error("Token signing failed: %s", exc)
            raise TokenSigningError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, token: str, expected_type: TokenType | None = TokenType.access) -> str:
        """Verify token and return its subject.

        expected_type is only checked when enforce_type is on. Pass None to
        accept either kind.

        Raises MalformedTokenError, InvalidSignatureError, ExpiredTokenError or
        WrongTokenTypeError.
        """
        return self.validate_claims(token, expected_type).subject

    def validate_claims(self, token: str, expected_type: TokenType | None = TokenType.access) -> Claims:
        """Like validate(), but return the full decoded Claims."""
        payload = self.decode_unverified(token)

        try:
            jws.verify(token, self._secret, algorithms=[ALGORITHM])
        except JWSError as exc:
            raise InvalidSignatureError(str(exc)) from exc

        claims = Claims.from_payload(payload)

        if self.now() >= claims.expires_at:
            raise ExpiredTokenError(f"token expired at {claims.expires_at}")

        if self.enforce_type and expected_type is not None and claims.token_type is not expected_type:
            found = claims.token_type.value if claims.token_type else "none"
            raise WrongTokenTypeError(f"expected {expected_type.value} token, got {found}")

        return claims

    @staticmethod
    def decode_unverified(token: str) -> dict[str, Any]:
        """Parse the claims segment WITHOUT checking the signature.

        Only for diagnostics (CLI inspect) and as the first step of
        validate_claims(). Never trust the result on its own.
        """
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedTokenError("token must have three dot-separated segments")
        try:
            return jwt.get_unverified_claims(token)
        except (JWSError, JWTError) as exc:
            raise MalformedTokenError(str(exc)) from exc
