"""
tests/test_health.py -- Integration tests for GET /api/health.

Covers:
  - 200 response with status, version and user count
  - No authentication required
"""

from __future__ import annotations


def test_health_returns_200(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["users"] == 0


def test_health_counts_registered_users(client):
    client.post("/register", json={"username": "bob", "password": "pw1"})
    client.post("/register", json={"username": "alice", "password": "pw2"})
    client.post("/register", json={"username": "bob", "password": "pw3"})
    assert client.get("/api/health").json()["users"] == 2


def test_health_no_auth_required(client):
    resp = client.get("/api/health", headers={})
    assert resp.status_code == 200
