"""
tests/test_config.py -- Settings validation rules.

Settings is constructed directly with keyword overrides (which take
precedence over the DEBUG=true set in conftest) and _env_file=None so a
developer's local .env never leaks into the assertions.
"""

from __future__ import annotations

import pytest

from auth.tokens import TokenService
from core.config import Settings

GOOD_KEY = "k" * 32


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSecretKey:
    def test_production_requires_secret(self) -> None:
        with pytest.raises(ValueError, match="SECRET_KEY is required"):
            _settings(debug=False, secret_key="")

    def test_debug_generates_secret(self) -> None:
        settings = _settings(debug=True, secret_key="")
        assert len(settings.secret_key) == 64

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least 32"):
            _settings(debug=True, secret_key="short")

    def test_explicit_secret_kept(self) -> None:
        assert _settings(secret_key=GOOD_KEY).secret_key == GOOD_KEY


class TestTokenLifetimes:
    def test_defaults(self) -> None:
        settings = _settings(secret_key=GOOD_KEY)
        assert settings.access_token_expire_seconds == 900
        assert settings.refresh_token_expire_seconds == 7 * 24 * 3600
        assert settings.enforce_token_type is True

    @pytest.mark.parametrize("access,refresh", [(3600, 3600), (7200, 3600), (0, 3600), (60, -1)])
    def test_invalid_lifetimes(self, access: int, refresh: int) -> None:
        with pytest.raises(ValueError):
            _settings(
                secret_key=GOOD_KEY,
                access_token_expire_seconds=access,
                refresh_token_expire_seconds=refresh,
            )

    def test_token_service_from_settings(self) -> None:
        settings = _settings(
            secret_key=GOOD_KEY,
            access_token_expire_seconds=60,
            refresh_token_expire_seconds=600,
            enforce_token_type=False,
        )
        service = TokenService.from_settings(settings)
        assert service.access_ttl == 60
        assert service.refresh_ttl == 600
        assert service.enforce_type is False
        assert service.validate(service.issue_pair("bob").access_token) == "bob"


class TestBcryptRounds:
    @pytest.mark.parametrize("rounds", [3, 32])
    def test_out_of_range(self, rounds: int) -> None:
        with pytest.raises(ValueError):
            _settings(secret_key=GOOD_KEY, bcrypt_rounds=rounds)


def test_env_vars_are_read(monkeypatch) -> None:
    monkeypatch.setenv("SECRET_KEY", GOOD_KEY)
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_SECONDS", "120")
    monkeypatch.setenv("ENFORCE_TOKEN_TYPE", "false")
    settings = Settings(_env_file=None)
    assert settings.secret_key == GOOD_KEY
    assert settings.access_token_expire_seconds == 120
    assert settings.enforce_token_type is False
