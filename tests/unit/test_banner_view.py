"""
Unit tests for vitalalert.ui.adapters.banner_view.

The adapter is pure (no Qt), so the banner's affordances are tested here:
- Mute is enabled only while the alarm is sounding
- Escalate is shown only while the aggregate severity is EMERGENCY
"""

from __future__ import annotations

from datetime import datetime

from vitalalert.core.severity.classifier import SeverityAssessment
from vitalalert.domain.events import AlarmEvent, AlarmTransition
from vitalalert.domain.models import AlarmState, AlarmStatus, SeverityLevel, VitalType, make_reading
from vitalalert.ui.adapters.banner_view import alarm_rows, banner_view, vital_rows

T0 = datetime(2026, 1, 1, 10, 0, 0)


def _assessment(level: SeverityLevel, *triggers: VitalType) -> SeverityAssessment:
    return SeverityAssessment(aggregate=level, per_vital={t: level for t in triggers}, triggers=triggers)


def test_idle_banner() -> None:
    v = banner_view(AlarmState(AlarmStatus.IDLE, SeverityLevel.STABLE, T0), _assessment(SeverityLevel.STABLE))
    assert v.text == "All vitals stable"
    assert v.level is SeverityLevel.STABLE
    assert not v.can_mute
    assert not v.can_escalate


def test_sounding_emergency_banner() -> None:
    v = banner_view(
        AlarmState(AlarmStatus.SOUNDING, SeverityLevel.EMERGENCY, T0),
        _assessment(SeverityLevel.EMERGENCY, VitalType.SPO2),
    )
    assert v.text == "EMERGENCY (SpO2): alarm sounding"
    assert v.level is SeverityLevel.EMERGENCY
    assert v.can_mute
    assert v.can_escalate


def test_sounding_warning_cannot_escalate() -> None:
    v = banner_view(
        AlarmState(AlarmStatus.SOUNDING, SeverityLevel.WARNING, T0),
        _assessment(SeverityLevel.WARNING, VitalType.TEMPERATURE),
    )
    assert v.can_mute
    assert not v.can_escalate


def test_muted_emergency_keeps_escalate() -> None:
    v = banner_view(
        AlarmState(AlarmStatus.MUTED, SeverityLevel.EMERGENCY, T0),
        _assessment(SeverityLevel.EMERGENCY, VitalType.HEART_RATE),
    )
    assert v.text == "EMERGENCY (Heart rate): alarm muted"
    assert not v.can_mute
    assert v.can_escalate


def test_vital_rows_sorted_with_severity() -> None:
    latest = {
        VitalType.SPO2: make_reading(VitalType.SPO2, 93.0, T0),
        VitalType.HEART_RATE: make_reading(VitalType.HEART_RATE, None, T0),
    }
    a = SeverityAssessment(
        aggregate=SeverityLevel.WARNING,
        per_vital={VitalType.SPO2: SeverityLevel.WARNING},
        triggers=(VitalType.SPO2,),
    )
    assert vital_rows(latest, a) == [
        ("Heart rate", "--", "10:00:00", "n/a"),
        ("SpO2", "93 %", "10:00:00", "Warning"),
    ]


def test_alarm_rows_newest_first() -> None:
    events = [
        AlarmEvent(AlarmTransition.STARTED, SeverityLevel.WARNING, T0, "started"),
        AlarmEvent(AlarmTransition.STOPPED, SeverityLevel.STABLE, T0, "stopped"),
    ]
    rows = alarm_rows(events)
    assert [r[1] for r in rows] == ["STOPPED", "STARTED"]
    assert rows[0][2] == "Stable"
