"""
tests/test_cli.py -- Tests for the main.py command-line interface.

issue and inspect share the process Settings (DEBUG=true from conftest, so a
throwaway SECRET_KEY), which means a token printed by issue must be accepted
by inspect in the same process.
"""

from __future__ import annotations

import json

from jose import jwt

from auth.tokens import TokenService
from conftest import OTHER_SECRET
from core.config import get_settings
from main import main


def test_issue_json(capsys) -> None:
    assert main(["issue", "alice", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert set(data) == {"access_token", "refresh_token"}


def test_issue_then_inspect(capsys) -> None:
    main(["issue", "alice", "--json"])
    token = json.loads(capsys.readouterr().out)["refresh_token"]
    assert main(["inspect", token]) == 0
    out = capsys.readouterr().out
    assert "Valid refresh token" in out
    assert "alice" in out


def test_inspect_foreign_token(capsys) -> None:
    token = TokenService(OTHER_SECRET).issue_pair("alice").access_token
    assert main(["inspect", token]) == 1
    assert "invalid_signature" in capsys.readouterr().out


def test_inspect_garbage(capsys) -> None:
    assert main(["inspect", "garbage"]) == 1
    assert "malformed" in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_inspect_far_future_timestamps_print_raw(capsys) -> None:
    """Claims beyond the datetime range are shown as the raw integer."""
    far = 10**20
    payload = {"username": "alice", "iat": far, "exp": far, "type": "access"}
    token = jwt.encode(payload, get_settings().secret_key, algorithm="HS256")
    assert main(["inspect", token]) == 0
    out = capsys.readouterr().out
    assert "Valid access token" in out
    assert f"Expires:  {far}" in out
