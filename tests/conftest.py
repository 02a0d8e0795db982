"""
tests/conftest.py -- Shared test fixtures for TokenAuth unit and integration tests.

This module provides:
  - FakeClock: a controllable clock injected into TokenService so expiry can
    be tested by moving time instead of sleeping
  - store / tokens / flow: isolated collaborators (bcrypt cost 4 for speed)
  - client: TestClient over the real app with a patched lifespan that wires
    the isolated collaborators into app.state
  - flip_signature_bit(): tamper with a token's signature segment

The DEBUG env var must be set before any api/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import base64
import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.flow import AuthFlow
from auth.store import CredentialStore
from auth.tokens import TokenService

SECRET = "test-secret-0123456789abcdef0123456789abcdef"
OTHER_SECRET = "another-secret-fedcba9876543210fedcba987654"
ACCESS_TTL = 15 * 60
REFRESH_TTL = 7 * 24 * 3600
BCRYPT_TEST_ROUNDS = 4


class FakeClock:
    """Callable clock frozen at a fixed instant until advance() is called."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


def flip_signature_bit(token: str) -> str:
    """Return token with one bit of the decoded signature flipped.

    Works on the decoded bytes rather than the base64 text: changing the last
    base64 character can alter only padding bits and decode to the same MAC.
    """
    header, claims, signature = token.split(".")
    raw = bytearray(base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4)))
    raw[0] ^= 0x01
    tampered = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode("ascii")
    return f"{header}.{claims}.{tampered}"


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tokens(clock: FakeClock) -> TokenService:
    return TokenService(SECRET, ACCESS_TTL, REFRESH_TTL, clock=clock)


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore(rounds=BCRYPT_TEST_ROUNDS)


@pytest.fixture
def flow(store: CredentialStore, tokens: TokenService) -> AuthFlow:
    return AuthFlow(store, tokens)


# ---------------------------------------------------------------------------
# App client
# ---------------------------------------------------------------------------


def _patch_lifespan(store: CredentialStore, tokens: TokenService, flow: AuthFlow):
    """Return an async context manager that replaces the real lifespan.

    Wires the test collaborators into app.state so routes see the fake clock
    and the known SECRET instead of the settings-derived ones.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.store = store
        app.state.tokens = tokens
        app.state.auth_flow = flow
        yield

    return test_lifespan


@pytest.fixture
def client(store: CredentialStore, tokens: TokenService, flow: AuthFlow) -> Generator[TestClient, None, None]:
    """TestClient over the real app, one fresh credential table per test."""
    app.router.lifespan_context = _patch_lifespan(store, tokens, flow)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def bob_tokens(client: TestClient) -> dict:
    """Register bob/pw1, log in, and return the login response body."""
    assert client.post("/register", json={"username": "bob", "password": "pw1"}).status_code == 200
    resp = client.post("/login", json={"username": "bob", "password": "pw1"})
    assert resp.status_code == 200
    return resp.json()
