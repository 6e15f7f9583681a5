"""
Unit tests for webhook_server.webhook_server (development escalation receiver).

Uses Flask's test client; no network sockets are opened.
"""

from __future__ import annotations

from webhook_server.webhook_server import create_app

AUTH = {"Authorization": "Bearer secret"}


def _client():
    app = create_app(token="secret")
    app.testing = True
    return app.test_client()


def test_health_is_public() -> None:
    r = _client().get("/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_escalation_requires_token() -> None:
    c = _client()
    assert c.post("/escalation", json={"type": "escalation"}).status_code == 401
    bad = c.post("/escalation", json={"type": "escalation"}, headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 403


def test_escalation_is_recorded_and_listed() -> None:
    c = _client()
    body = {"type": "escalation", "subject": "Jane", "severity": "Emergency", "destination": "919999999999"}
    assert c.post("/escalation", json=body, headers=AUTH).status_code == 200

    r = c.get("/api/escalation/recent", headers=AUTH)
    assert r.status_code == 200
    data = r.get_json()
    assert data["count"] == 1
    assert data["events"][0]["body"]["subject"] == "Jane"


def test_non_escalation_payload_rejected() -> None:
    c = _client()
    assert c.post("/escalation", json={"type": "alarm"}, headers=AUTH).status_code == 400
    assert c.post("/escalation", data="not json", headers=AUTH).status_code == 400
