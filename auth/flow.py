"""
auth/flow.py -- Register / Login / Refresh orchestration.

AuthFlow composes a CredentialStore and a TokenService, both constructed
once at process start and handed in by reference. It holds no state of its
own and no module-level globals are involved, so tests build an AuthFlow
from whatever collaborators they need.

Refresh is stateless rotation: a valid refresh token buys a brand-new pair,
and the presented token is NOT invalidated. It keeps working until its own
exp. Closing that window needs a revocation store, which this service does
not have.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

from auth.errors import AuthError, TokenError
from auth.models import TokenPair, TokenType
from auth.store import CredentialStore
from auth.tokens import TokenService

logger = logging.getLogger("tokenauth.auth.flow")


class AuthFlow:
    def __init__(self, store: CredentialStore, tokens: TokenService) -> None:
        self.store = store
        self.tokens = tokens

    def register(self, username: str, password: str) -> None:
        """Store credentials for username. Raises InputError on empty fields."""
        self.store.register(username, password)

    def login(self, username: str, password: str) -> TokenPair:
        """Verify credentials and issue a token pair.

        Raises AuthError on any credential failure -- the caller cannot tell
        an unknown user from a wrong password. Raises TokenSigningError if
        the pair cannot be signed.
        """
        if not self.store.verify(username, password):
            logger.warning("Failed login for %r", username)
            raise AuthError("bad credentials")
        pair = self.tokens.issue_pair(username)
        logger.info("Issued token pair for %r", username)
        return pair

    def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a valid refresh token for a new pair (rotation without revocation).

        Raises AuthError ("invalid refresh token") whatever the reason the
        token was rejected; the reason is logged, not returned.
        """
        try:
            subject = self.tokens.validate(refresh_token, expected_type=TokenType.refresh)
        except TokenError as exc:
            logger.warning("Refresh rejected (%s)", exc.kind)
            raise AuthError(exc.kind, message="invalid refresh token") from exc
        pair = self.tokens.issue_pair(subject)
        logger.info("Rotated token pair for %r", subject)
        return pair
