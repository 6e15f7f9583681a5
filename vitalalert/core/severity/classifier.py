"""
Severity classification of the latest vital-sign readings.

The classifier is stateless: its output is a pure function of the latest
reading per monitored vital type and the configured limits. It never raises
on bad data; a reading whose numeric payload is missing or malformed simply
contributes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from vitalalert.core.config.vital_limits_registry import VitalLimitsRegistry
from vitalalert.domain.models import Reading, SeverityLevel, VitalLimits, VitalType, coerce_value


def classify_value(value: float, limits: VitalLimits) -> SeverityLevel:
    """
    Classify one numeric value against its vital limits.

    Parameters
    ----------
    value
        Finite measured value.
    limits
        Normal range and emergency limits for the vital.

    Returns
    -------
    SeverityLevel
        EMERGENCY beyond an emergency limit (or at it, when the limits are
        inclusive), WARNING outside the normal range, STABLE otherwise.
    """
    inclusive = limits.emergency_inclusive
    if limits.low_emergency is not None:
        if value < limits.low_emergency or (inclusive and value == limits.low_emergency):
            return SeverityLevel.EMERGENCY
    if limits.high_emergency is not None:
        if value > limits.high_emergency or (inclusive and value == limits.high_emergency):
            return SeverityLevel.EMERGENCY
    if limits.low_warning is not None and value < limits.low_warning:
        return SeverityLevel.WARNING
    if limits.high_warning is not None and value > limits.high_warning:
        return SeverityLevel.WARNING
    return SeverityLevel.STABLE


def classify_reading(reading: Reading, limits: VitalLimits) -> Optional[SeverityLevel]:
    """
    Classify a single reading.

    Returns
    -------
    SeverityLevel or None
        None when the reading has no usable numeric payload.
    """
    value = coerce_value(reading.value)
    if value is None:
        return None
    return classify_value(value, limits)


@dataclass(frozen=True)
class SeverityAssessment:
    """
    Result of one classification pass.

    Parameters
    ----------
    aggregate
        Maximum severity across the monitored vitals.
    per_vital
        Severity of each monitored vital that contributed a usable reading.
    triggers
        Vital types whose severity equals a non-stable aggregate.
    """

    aggregate: SeverityLevel = SeverityLevel.STABLE
    per_vital: Dict[VitalType, SeverityLevel] = field(default_factory=dict)
    triggers: Tuple[VitalType, ...] = ()


@dataclass
class SeverityClassifier:
    """
    Aggregate severity over the latest reading of each monitored vital.

    Parameters
    ----------
    limits
        Registry of monitored vital types and their limits.
    """

    limits: VitalLimitsRegistry = field(default_factory=VitalLimitsRegistry.with_defaults)

    def assess(self, latest_by_type: Mapping[VitalType, Reading]) -> SeverityAssessment:
        """
        Compute the aggregate severity.

        Parameters
        ----------
        latest_by_type
            Latest reading per vital type (see ``ReadingStore.latest_by_type``).

        Returns
        -------
        SeverityAssessment
            Aggregate severity, per-vital breakdown and triggering vitals.
        """
        per_vital: Dict[VitalType, SeverityLevel] = {}
        for vital_type in self.limits.monitored():
            reading = latest_by_type.get(vital_type)
            if reading is None:
                continue
            level = classify_reading(reading, self.limits.get(vital_type))  # type: ignore[arg-type]
            if level is not None:
                per_vital[vital_type] = level

        aggregate = max(per_vital.values(), default=SeverityLevel.STABLE)
        triggers: Tuple[VitalType, ...] = ()
        if aggregate.is_alarming:
            triggers = tuple(vt for vt, lvl in per_vital.items() if lvl is aggregate)

        return SeverityAssessment(aggregate=aggregate, per_vital=per_vital, triggers=triggers)
