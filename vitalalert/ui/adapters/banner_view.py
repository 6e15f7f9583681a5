from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Tuple

from vitalalert.core.severity.classifier import SeverityAssessment
from vitalalert.domain.events import AlarmEvent
from vitalalert.domain.models import AlarmState, AlarmStatus, Reading, SeverityLevel, VitalType

VitalRow = Tuple[str, str, str, str]
AlarmRow = Tuple[str, str, str, str]


@dataclass(frozen=True)
class BannerView:
    """
    What the alarm banner should show.

    Parameters
    ----------
    level
        STABLE / WARNING / EMERGENCY, used for colouring.
    text
        Banner text.
    can_mute
        Whether the Mute button is enabled.
    can_escalate
        Whether the Escalate button is shown.
    """

    level: SeverityLevel
    text: str
    can_mute: bool
    can_escalate: bool


def banner_view(state: AlarmState, assessment: SeverityAssessment) -> BannerView:
    """
    Build the banner view model from the alarm state and the current assessment.
    """
    aggregate = assessment.aggregate
    triggers = ", ".join(t.label for t in assessment.triggers)
    suffix = f" ({triggers})" if triggers else ""

    if state.status is AlarmStatus.SOUNDING:
        text = f"{state.severity.label.upper()}{suffix}: alarm sounding"
    elif state.status is AlarmStatus.MUTED:
        text = f"{state.severity.label.upper()}{suffix}: alarm muted"
    else:
        text = "All vitals stable"

    level = state.severity if state.status is not AlarmStatus.IDLE else aggregate
    return BannerView(
        level=level,
        text=text,
        can_mute=state.status is AlarmStatus.SOUNDING,
        can_escalate=aggregate is SeverityLevel.EMERGENCY,
    )


def vital_rows(
    latest: Mapping[VitalType, Reading],
    assessment: SeverityAssessment,
) -> List[VitalRow]:
    rows: List[VitalRow] = []
    for vital_type, reading in latest.items():
        level = assessment.per_vital.get(vital_type)
        value = "--" if reading.value is None else f"{reading.value:g} {reading.units}"
        rows.append(
            (
                vital_type.label,
                value,
                reading.timestamp.strftime("%H:%M:%S"),
                "n/a" if level is None else level.label,
            )
        )
    rows.sort(key=lambda r: r[0])
    return rows


def alarm_rows(events: List[AlarmEvent], limit: int = 200) -> List[AlarmRow]:
    rows: List[AlarmRow] = []
    for e in reversed(events[-limit:]):
        rows.append(
            (
                e.timestamp.strftime("%H:%M:%S"),
                e.transition.value,
                e.severity.label,
                e.message,
            )
        )
    return rows
