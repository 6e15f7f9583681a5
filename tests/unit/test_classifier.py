"""
Unit tests for vitalalert.core.severity.classifier.

Covers:
- per-vital bands (normal / warning / emergency) and their boundaries
- aggregation as the maximum over monitored vitals
- absence and malformed values contribute nothing
- monotonicity for every vital: moving further from normal never lowers severity
- the documented scenarios (fever emergency, SpO2 inner and outer band)
"""

from __future__ import annotations

from datetime import datetime

import pytest

from vitalalert.core.config.vital_limits_registry import VitalLimitsRegistry
from vitalalert.core.severity.classifier import SeverityClassifier, classify_value
from vitalalert.domain.models import (
    DEFAULT_VITAL_LIMITS,
    SeverityLevel,
    SpO2Reading,
    VitalLimits,
    VitalType,
    make_reading,
)

TS = datetime(2026, 1, 1, 10, 0, 0)
LIMITS = {lim.vital_type: lim for lim in DEFAULT_VITAL_LIMITS}


def _latest(**values):
    return {VitalType[name.upper()]: make_reading(VitalType[name.upper()], v, TS) for name, v in values.items()}


@pytest.mark.parametrize(
    "vital_type,value,expected",
    [
        (VitalType.TEMPERATURE, 36.8, SeverityLevel.STABLE),
        (VitalType.TEMPERATURE, 37.8, SeverityLevel.STABLE),
        (VitalType.TEMPERATURE, 38.2, SeverityLevel.WARNING),
        (VitalType.TEMPERATURE, 39.5, SeverityLevel.EMERGENCY),
        (VitalType.TEMPERATURE, 35.5, SeverityLevel.WARNING),
        (VitalType.TEMPERATURE, 34.0, SeverityLevel.EMERGENCY),
        (VitalType.HEART_RATE, 120, SeverityLevel.STABLE),
        (VitalType.HEART_RATE, 170, SeverityLevel.WARNING),
        (VitalType.HEART_RATE, 186, SeverityLevel.EMERGENCY),
        (VitalType.HEART_RATE, 80, SeverityLevel.WARNING),
        (VitalType.HEART_RATE, 69, SeverityLevel.EMERGENCY),
        (VitalType.HEART_RATE, 69.5, SeverityLevel.EMERGENCY),
        (VitalType.HEART_RATE, 70, SeverityLevel.WARNING),
        (VitalType.HEART_RATE, 185, SeverityLevel.WARNING),
        (VitalType.HEART_RATE, 185.5, SeverityLevel.EMERGENCY),
        (VitalType.SPO2, 100, SeverityLevel.STABLE),
        (VitalType.SPO2, 94, SeverityLevel.STABLE),
        (VitalType.SPO2, 93, SeverityLevel.WARNING),
        (VitalType.SPO2, 89, SeverityLevel.EMERGENCY),
        (VitalType.SPO2, 89.5, SeverityLevel.EMERGENCY),
        (VitalType.SPO2, 90, SeverityLevel.WARNING),
        (VitalType.BLOOD_GLUCOSE, 110, SeverityLevel.STABLE),
        (VitalType.BLOOD_GLUCOSE, 200, SeverityLevel.WARNING),
        (VitalType.BLOOD_GLUCOSE, 50, SeverityLevel.EMERGENCY),
        (VitalType.BLOOD_GLUCOSE, 54, SeverityLevel.EMERGENCY),
        (VitalType.BLOOD_GLUCOSE, 250, SeverityLevel.EMERGENCY),
    ],
)
def test_classify_value_bands(vital_type, value, expected) -> None:
    assert classify_value(float(value), LIMITS[vital_type]) is expected


@pytest.mark.parametrize(
    "vital_type,start,low,high,step",
    [
        (VitalType.TEMPERATURE, 37.0, 32.0, 42.0, 0.1),
        (VitalType.HEART_RATE, 120.0, 30.0, 220.0, 0.5),
        (VitalType.SPO2, 97.0, 70.0, 100.0, 0.5),
        (VitalType.BLOOD_GLUCOSE, 110.0, 20.0, 400.0, 0.5),
    ],
)
def test_monotonic_away_from_normal(vital_type, start, low, high, step) -> None:
    """Walking outward from a normal value never decreases severity."""
    lim = LIMITS[vital_type]
    assert classify_value(start, lim) is SeverityLevel.STABLE

    prev = SeverityLevel.STABLE
    v = start
    while v <= high:
        level = classify_value(v, lim)
        assert level >= prev, f"{vital_type.value} {v}"
        prev = level
        v += step

    prev = SeverityLevel.STABLE
    v = start
    while v >= low:
        level = classify_value(v, lim)
        assert level >= prev, f"{vital_type.value} {v}"
        prev = level
        v -= step


def test_emergency_inclusive_flag_controls_the_limit_itself() -> None:
    """A value exactly on an emergency limit is EMERGENCY only for inclusive limits."""
    strict = VitalLimits(VitalType.SPO2, low_warning=94.0, low_emergency=90.0, emergency_inclusive=False)
    inclusive = VitalLimits(VitalType.SPO2, low_warning=94.0, low_emergency=90.0)
    assert classify_value(90.0, strict) is SeverityLevel.WARNING
    assert classify_value(90.0, inclusive) is SeverityLevel.EMERGENCY
    assert classify_value(89.9, strict) is SeverityLevel.EMERGENCY


def test_scenario_fever_is_emergency() -> None:
    """Temperature 39.6 C alone gives an EMERGENCY aggregate."""
    a = SeverityClassifier().assess(_latest(temperature=39.6))
    assert a.aggregate is SeverityLevel.EMERGENCY
    assert a.triggers == (VitalType.TEMPERATURE,)


def test_scenario_spo2_inner_band_is_warning() -> None:
    a = SeverityClassifier().assess(_latest(spo2=93))
    assert a.per_vital[VitalType.SPO2] is SeverityLevel.WARNING
    assert a.aggregate is SeverityLevel.WARNING


def test_scenario_spo2_outer_band_overrides_warning() -> None:
    """SpO2 89 % is EMERGENCY even with another vital in WARNING."""
    a = SeverityClassifier().assess(_latest(spo2=89, temperature=38.2))
    assert a.per_vital[VitalType.TEMPERATURE] is SeverityLevel.WARNING
    assert a.aggregate is SeverityLevel.EMERGENCY
    assert a.triggers == (VitalType.SPO2,)


def test_aggregate_is_max_over_vitals() -> None:
    a = SeverityClassifier().assess(_latest(temperature=38.2, heart_rate=170, spo2=98))
    assert a.aggregate is SeverityLevel.WARNING
    assert set(a.triggers) == {VitalType.TEMPERATURE, VitalType.HEART_RATE}


def test_no_readings_is_stable() -> None:
    a = SeverityClassifier().assess({})
    assert a.aggregate is SeverityLevel.STABLE
    assert a.per_vital == {}
    assert a.triggers == ()


def test_missing_vital_does_not_affect_others() -> None:
    """Absence of one vital leaves the others' contribution unchanged."""
    with_all = SeverityClassifier().assess(_latest(spo2=93, heart_rate=120))
    without_hr = SeverityClassifier().assess(_latest(spo2=93))
    assert with_all.aggregate is without_hr.aggregate is SeverityLevel.WARNING


@pytest.mark.parametrize("bad", [None, float("nan"), float("inf"), "ninety", True])
def test_malformed_value_is_treated_as_absent(bad) -> None:
    latest = {VitalType.SPO2: SpO2Reading(percent=bad, timestamp=TS)}  # type: ignore[arg-type]
    a = SeverityClassifier().assess(latest)
    assert a.aggregate is SeverityLevel.STABLE
    assert VitalType.SPO2 not in a.per_vital


def test_unmonitored_vital_is_ignored() -> None:
    """Only vitals registered in the limits registry are classified."""
    registry = VitalLimitsRegistry()
    registry.load([VitalLimits(VitalType.SPO2, low_warning=94.0, low_emergency=89.0)])
    a = SeverityClassifier(limits=registry).assess(_latest(spo2=98, temperature=41.0))
    assert a.aggregate is SeverityLevel.STABLE
    assert list(a.per_vital) == [VitalType.SPO2]
