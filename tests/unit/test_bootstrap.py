"""
Unit tests for vitalalert.bootstrap.build_app_system.

The system is wired with fake timer/audio factories and a recording URL
opener, then driven end to end: readings in, alarm state and escalation out.
"""

from __future__ import annotations

from datetime import datetime
from urllib.parse import unquote

from vitalalert.bootstrap import build_app_system
from vitalalert.core.config.yaml_config import parse_app_config
from vitalalert.domain.models import AlarmStatus, SeverityLevel, VitalType, make_reading
from vitalalert.notification.escalation import DEFAULT_CONTACT

T0 = datetime(2026, 1, 1, 10, 0, 0)


def test_end_to_end_emergency_and_escalation(timer_factory, output) -> None:
    opened = []
    cfg = parse_app_config({"profile": {"name": "Jane Doe"}, "logging": {"level": "warning"}})
    wiring = build_app_system(
        config=cfg,
        timer_factory=timer_factory,
        output_factory=lambda: output,
        url_opener=opened.append,
    )
    try:
        assert wiring.dispatch_worker is None

        wiring.store.append(make_reading(VitalType.SPO2, 88.0, T0))
        assert wiring.controller.state.status is AlarmStatus.SOUNDING
        assert wiring.controller.severity is SeverityLevel.EMERGENCY
        assert output.played

        result = wiring.controller.escalate()
        assert result is not None
        assert len(opened) == 1
        assert opened[0].startswith(f"https://wa.me/{DEFAULT_CONTACT}?text=")
        assert "Jane Doe" in unquote(opened[0])
    finally:
        wiring.shutdown()

    assert not wiring.scheduler.loop.running


def test_custom_limits_and_no_deep_link(timer_factory) -> None:
    opened = []
    cfg = parse_app_config(
        {
            "vitals": {"spo2": {"low_warning": 92, "low_emergency": 85}},
            "escalation": {"open_deep_link": False},
        }
    )
    wiring = build_app_system(config=cfg, timer_factory=timer_factory, url_opener=opened.append)
    try:
        wiring.store.append(make_reading(VitalType.SPO2, 93.0, T0))
        assert wiring.controller.severity is SeverityLevel.STABLE

        # temperature is not monitored with this config
        wiring.store.append(make_reading(VitalType.TEMPERATURE, 41.0, T0))
        assert wiring.controller.severity is SeverityLevel.STABLE

        wiring.store.append(make_reading(VitalType.SPO2, 84.0, T0))
        assert wiring.controller.escalate() is not None
        assert opened == []
    finally:
        wiring.shutdown()


def test_webhook_config_starts_dispatch_worker(timer_factory) -> None:
    cfg = parse_app_config(
        {"escalation": {"webhook": {"url": "http://127.0.0.1:9/escalation", "auth_header": "tok"}}}
    )
    wiring = build_app_system(config=cfg, timer_factory=timer_factory, url_opener=lambda url: None)
    try:
        assert wiring.dispatch_worker is not None
        assert wiring.dispatch_worker._thread.is_alive()
    finally:
        wiring.shutdown()
    assert not wiring.dispatch_worker._thread.is_alive()
