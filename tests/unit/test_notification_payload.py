"""
Unit tests for vitalalert.notification.payload and the deep-link dispatcher.

These tests verify:
- the escalation text layout
- deep links carry the digits of the destination and the URL-encoded text
- the webhook payload is JSON-friendly and complete
"""

from __future__ import annotations

import json
from datetime import datetime
from urllib.parse import unquote

from vitalalert.domain.models import SeverityLevel, VitalType
from vitalalert.notification.base import EscalationMessage, ReadingLine
from vitalalert.notification.deep_link import DeepLinkConfig, DeepLinkDispatcher
from vitalalert.notification.payload import (
    build_deep_link,
    build_escalation_text,
    build_escalation_webhook_payload,
)

TS = datetime(2026, 1, 1, 10, 5, 30)


def _lines():
    return (
        ReadingLine(VitalType.SPO2, 88.0, "%", TS),
        ReadingLine(VitalType.HEART_RATE, None, "bpm", TS),
    )


def _message(destination: str = "+1 (555) 010-9999") -> EscalationMessage:
    lines = _lines()
    return EscalationMessage(
        subject="Jane",
        severity=SeverityLevel.EMERGENCY,
        readings=lines,
        destination=destination,
        text=build_escalation_text("Jane", SeverityLevel.EMERGENCY, lines),
        created_at=TS,
    )


def test_escalation_text_layout() -> None:
    text = build_escalation_text("Jane", SeverityLevel.EMERGENCY, _lines())
    assert text.splitlines() == [
        "EMERGENCY ALERT for Jane!",
        "Severity: Emergency",
        "Latest Vitals:",
        "- SpO2: 88 % at 10:05",
        "- Heart rate: n/a bpm at 10:05",
        "Please check the monitoring dashboard immediately.",
    ]


def test_deep_link_uses_digits_and_encodes_text() -> None:
    url = build_deep_link("https://wa.me/", "+1 (555) 010-9999", "Hi there\nline 2")
    assert url.startswith("https://wa.me/15550109999?text=")
    encoded = url.split("?text=", 1)[1]
    assert " " not in encoded
    assert unquote(encoded) == "Hi there\nline 2"


def test_deep_link_non_numeric_destination_is_encoded() -> None:
    url = build_deep_link("https://chat.example", "ops team", "x")
    assert url == "https://chat.example/ops%20team?text=x"


def test_webhook_payload_is_json_serializable() -> None:
    payload = build_escalation_webhook_payload(_message())
    json.dumps(payload)

    assert payload["type"] == "escalation"
    assert payload["subject"] == "Jane"
    assert payload["severity"] == "Emergency"
    assert payload["created_at"] == "2026-01-01T10:05:30"
    assert payload["used_default_contact"] is False
    assert payload["readings"][0] == {
        "vital_type": "SPO2",
        "value": 88.0,
        "units": "%",
        "timestamp": "2026-01-01T10:05:30",
    }
    assert payload["readings"][1]["value"] is None


def test_deep_link_dispatcher_opens_url() -> None:
    opened = []
    d = DeepLinkDispatcher(DeepLinkConfig(base_url="https://wa.me"), opener=opened.append)
    d.dispatch(_message())

    assert opened == [d.last_url]
    assert opened[0].startswith("https://wa.me/15550109999?text=EMERGENCY%20ALERT%20for%20Jane")
