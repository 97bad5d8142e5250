"""
tests/test_health.py -- Integration tests for GET /health and unknown routes.
"""

from __future__ import annotations


def test_health_returns_200(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert "version" in data


def test_unknown_route_is_structured_404(client):
    resp = client.get("/v3/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"error": {"code": "not_found", "message": "Route not found", "detail": None}}
