from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, Sequence
from urllib.parse import quote

from vitalalert.domain.models import SeverityLevel
from vitalalert.notification.base import EscalationMessage, ReadingLine


def _iso(ts: datetime) -> str:
    """
    Convert datetime to ISO-8601 string with second precision.

    Parameters
    ----------
    ts
        Timestamp to convert.

    Returns
    -------
    str
        ISO-8601 formatted timestamp (seconds precision).
    """
    return ts.isoformat(timespec="seconds")


def build_escalation_text(subject: str, severity: SeverityLevel, lines: Sequence[ReadingLine]) -> str:
    """
    Build the human-readable escalation body.

    Parameters
    ----------
    subject
        Identity of the monitored subject.
    severity
        Severity whose label is quoted verbatim ("Emergency").
    lines
        Readings to list, in the order they should appear.

    Returns
    -------
    str
        Multi-line message text.
    """
    body = [
        f"EMERGENCY ALERT for {subject}!",
        f"Severity: {severity.label}",
        "Latest Vitals:",
    ]
    body.extend(f"- {line.render()} at {line.timestamp.strftime('%H:%M')}" for line in lines)
    body.append("Please check the monitoring dashboard immediately.")
    return "\n".join(body)


def build_deep_link(base_url: str, destination: str, text: str) -> str:
    """
    Build a messaging deep link carrying the URL-encoded message.

    Phone numbers are reduced to their digits (the format expected by
    click-to-chat links); other addresses are percent-encoded as-is.

    Parameters
    ----------
    base_url
        Link prefix, e.g. ``https://wa.me``.
    destination
        Contact address.
    text
        Message body.

    Returns
    -------
    str
        ``<base_url>/<destination>?text=<encoded text>``
    """
    digits = re.sub(r"\D", "", destination)
    target = digits if digits else quote(destination, safe="")
    return f"{base_url.rstrip('/')}/{target}?text={quote(text, safe='')}"


def build_escalation_webhook_payload(message: EscalationMessage) -> Dict[str, Any]:
    """
    Build a JSON-serializable webhook payload for an escalation message.

    Parameters
    ----------
    message
        Escalation message to serialize.

    Returns
    -------
    dict
        Payload with keys: "type", "destination", "subject", "severity",
        "created_at", "used_default_contact", "readings" and "text".
    """
    return {
        "type": "escalation",
        "destination": message.destination,
        "subject": message.subject,
        "severity": message.severity.label,
        "created_at": _iso(message.created_at),
        "used_default_contact": message.used_default_contact,
        "readings": [
            {
                "vital_type": line.vital_type.value,
                "value": line.value,
                "units": line.units,
                "timestamp": _iso(line.timestamp),
            }
            for line in message.readings
        ],
        "text": message.text,
    }
