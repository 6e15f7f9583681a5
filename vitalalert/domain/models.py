"""
Domain models and enums.

This module defines the core domain-level types used across the system:
- Vital types and the severity scale used to classify them
- Vital-sign readings as a tagged variant (one dataclass per vital type)
- The monitored subject's profile (identity + escalation contact)
- AlarmState, which represents the current alarm status for UI/reporting
- ToneProfile, the acoustic signature of an alarm severity

These are designed as immutable (frozen) dataclasses where appropriate so they
can be shared freely between the store, the classifier and the UI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union
from uuid import uuid4


class VitalType(str, Enum):
    """
    Kind of physiological observation carried by a reading.

    Members
    -------
    TEMPERATURE : str
        Body temperature in degrees Celsius.
    HEART_RATE : str
        Heart rate in beats per minute.
    SPO2 : str
        Peripheral oxygen saturation in percent.
    BLOOD_GLUCOSE : str
        Blood glucose in mg/dL.
    """

    TEMPERATURE = "TEMPERATURE"
    HEART_RATE = "HEART_RATE"
    SPO2 = "SPO2"
    BLOOD_GLUCOSE = "BLOOD_GLUCOSE"

    @property
    def label(self) -> str:
        """Human readable name used in messages and tables."""
        return _VITAL_LABELS[self]


_VITAL_LABELS = {
    VitalType.TEMPERATURE: "Temperature",
    VitalType.HEART_RATE: "Heart rate",
    VitalType.SPO2: "SpO2",
    VitalType.BLOOD_GLUCOSE: "Blood glucose",
}


class SeverityLevel(str, Enum):
    """
    Ordered severity scale: STABLE < WARNING < EMERGENCY.

    The comparison operators follow the clinical order rather than the
    alphabetical order of the string values, so ``max()`` over a collection
    of levels yields the most severe one.

    Members
    -------
    STABLE : str
        Value inside its normal range (or no evidence at all).
    WARNING : str
        Inner deviation from the normal range.
    EMERGENCY : str
        Extreme deviation requiring immediate attention.
    """

    STABLE = "STABLE"
    WARNING = "WARNING"
    EMERGENCY = "EMERGENCY"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def label(self) -> str:
        """Display label ("Stable", "Warning", "Emergency")."""
        return self.value.capitalize()

    @property
    def is_alarming(self) -> bool:
        return self is not SeverityLevel.STABLE

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    SeverityLevel.STABLE: 0,
    SeverityLevel.WARNING: 1,
    SeverityLevel.EMERGENCY: 2,
}


def _new_reading_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class TemperatureReading:
    """
    Body temperature reading.

    Parameters
    ----------
    celsius
        Measured temperature. ``None`` when the source did not provide a
        usable number.
    timestamp
        When the observation was taken.
    id
        Unique reading identifier.
    """

    vital_type: ClassVar[VitalType] = VitalType.TEMPERATURE
    units: ClassVar[str] = "°C"

    celsius: Optional[float]
    timestamp: datetime
    id: str = field(default_factory=_new_reading_id)

    @property
    def value(self) -> Optional[float]:
        return self.celsius


@dataclass(frozen=True)
class HeartRateReading:
    """Heart rate reading in beats per minute."""

    vital_type: ClassVar[VitalType] = VitalType.HEART_RATE
    units: ClassVar[str] = "bpm"

    bpm: Optional[float]
    timestamp: datetime
    id: str = field(default_factory=_new_reading_id)

    @property
    def value(self) -> Optional[float]:
        return self.bpm


@dataclass(frozen=True)
class SpO2Reading:
    """Oxygen saturation reading in percent."""

    vital_type: ClassVar[VitalType] = VitalType.SPO2
    units: ClassVar[str] = "%"

    percent: Optional[float]
    timestamp: datetime
    id: str = field(default_factory=_new_reading_id)

    @property
    def value(self) -> Optional[float]:
        return self.percent


@dataclass(frozen=True)
class BloodGlucoseReading:
    """Blood glucose reading in mg/dL."""

    vital_type: ClassVar[VitalType] = VitalType.BLOOD_GLUCOSE
    units: ClassVar[str] = "mg/dL"

    mg_dl: Optional[float]
    timestamp: datetime
    id: str = field(default_factory=_new_reading_id)

    @property
    def value(self) -> Optional[float]:
        return self.mg_dl


Reading = Union[TemperatureReading, HeartRateReading, SpO2Reading, BloodGlucoseReading]

READING_TYPES = {
    VitalType.TEMPERATURE: TemperatureReading,
    VitalType.HEART_RATE: HeartRateReading,
    VitalType.SPO2: SpO2Reading,
    VitalType.BLOOD_GLUCOSE: BloodGlucoseReading,
}


def make_reading(
    vital_type: VitalType,
    value: Optional[float],
    timestamp: datetime,
    reading_id: Optional[str] = None,
) -> Reading:
    """
    Build the reading variant matching ``vital_type``.

    Parameters
    ----------
    vital_type
        Discriminant selecting the reading class.
    value
        Primary numeric payload (may be None).
    timestamp
        Observation time.
    reading_id
        Optional explicit identifier; a random one is generated otherwise.

    Returns
    -------
    Reading
        Instance of the variant registered for ``vital_type``.
    """
    cls = READING_TYPES[vital_type]
    if reading_id is None:
        return cls(value, timestamp)  # type: ignore[call-arg]
    return cls(value, timestamp, reading_id)  # type: ignore[call-arg]


def coerce_value(value: object) -> Optional[float]:
    """
    Coerce a reading payload to a finite float.

    Returns
    -------
    float or None
        None for missing, boolean, non-numeric, NaN or infinite values.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        v = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return v


@dataclass(frozen=True)
class VitalLimits:
    """
    Classification limits for one monitored vital type.

    The normal range is ``[low_warning, high_warning]``. Values outside it
    are WARNING; values beyond an emergency limit are EMERGENCY. Any
    limit may be None for a one-sided range.

    Parameters
    ----------
    vital_type
        Vital the limits apply to.
    low_warning, high_warning
        Bounds of the normal range.
    low_emergency, high_emergency
        Emergency limits.
    emergency_inclusive
        If True a value equal to an emergency limit is EMERGENCY; if False
        the value must lie strictly beyond it.
    """

    vital_type: VitalType
    low_warning: Optional[float] = None
    high_warning: Optional[float] = None
    low_emergency: Optional[float] = None
    high_emergency: Optional[float] = None
    emergency_inclusive: bool = True

    def validate(self) -> None:
        """
        Check that the bands nest around the normal range.

        Raises
        ------
        ValueError
            If a limit is non-finite or the ordering
            ``low_emergency <= low_warning <= high_warning <= high_emergency``
            is violated for the limits that are set.
        """
        ordered = [
            ("low_emergency", self.low_emergency),
            ("low_warning", self.low_warning),
            ("high_warning", self.high_warning),
            ("high_emergency", self.high_emergency),
        ]
        present = [(name, v) for name, v in ordered if v is not None]
        for name, v in present:
            if not math.isfinite(v):
                raise ValueError(f"{self.vital_type.value}.{name} must be finite")
        for (name_a, a), (name_b, b) in zip(present, present[1:]):
            if a > b:
                raise ValueError(f"{self.vital_type.value}: {name_a} ({a}) must not exceed {name_b} ({b})")


DEFAULT_VITAL_LIMITS = (
    VitalLimits(VitalType.TEMPERATURE, low_warning=36.0, high_warning=37.8, low_emergency=35.0, high_emergency=39.5),
    VitalLimits(VitalType.HEART_RATE, low_warning=90.0, high_warning=165.0, low_emergency=70.0, high_emergency=185.0,
                emergency_inclusive=False),
    VitalLimits(VitalType.SPO2, low_warning=94.0, low_emergency=90.0, emergency_inclusive=False),
    VitalLimits(VitalType.BLOOD_GLUCOSE, low_warning=70.0, high_warning=180.0, low_emergency=54.0, high_emergency=250.0),
)


@dataclass(frozen=True)
class Profile:
    """
    Monitored subject, as exposed by the profile collaborator.

    Parameters
    ----------
    name
        Identity of the monitored subject (used in escalation messages).
    display_name
        Optional caregiver display name.
    contact
        Optional escalation address (phone number with country code or
        channel address). When missing, escalation falls back to a default.
    """

    name: str
    display_name: Optional[str] = None
    contact: Optional[str] = None


class AlarmStatus(str, Enum):
    """
    Lifecycle status of the audible alarm.

    Members
    -------
    IDLE : str
        No alarm is sounding.
    SOUNDING : str
        The tone loop is active for a non-stable severity.
    MUTED : str
        The user silenced the current episode; severity is retained for display.
    """

    IDLE = "IDLE"
    SOUNDING = "SOUNDING"
    MUTED = "MUTED"


@dataclass(frozen=True)
class AlarmState:
    """
    Current state of the alarm for fast UI queries and reporting.

    Parameters
    ----------
    status
        IDLE, SOUNDING or MUTED.
    severity
        Severity being sounded, or the last known severity while muted.
        Always STABLE while idle.
    since
        Timestamp of the transition into this state.
    """

    status: AlarmStatus
    severity: SeverityLevel
    since: datetime

    @property
    def sounding(self) -> bool:
        return self.status is AlarmStatus.SOUNDING

    @property
    def muted(self) -> bool:
        return self.status is AlarmStatus.MUTED


class Waveform(str, Enum):
    """Oscillator shape used to synthesize a tone."""

    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"


@dataclass(frozen=True)
class ToneProfile:
    """
    Acoustic signature of one alarm severity.

    Parameters
    ----------
    waveform
        Oscillator shape; harsher shapes (sawtooth/square) for higher severity.
    frequency_hz
        Pitch of the tone.
    period_ms
        Repetition period of the tone loop.
    duration_ms
        Length of each discrete tone (must fit inside the period).
    gain
        Output amplitude in [0, 1].
    """

    waveform: Waveform
    frequency_hz: float
    period_ms: int
    duration_ms: int = 300
    gain: float = 0.1


WARNING_TONE = ToneProfile(waveform=Waveform.SINE, frequency_hz=880.0, period_ms=1200)
EMERGENCY_TONE = ToneProfile(waveform=Waveform.SAWTOOTH, frequency_hz=1200.0, period_ms=500)
