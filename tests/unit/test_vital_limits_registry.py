"""
Unit tests for vitalalert.core.config.vital_limits_registry.VitalLimitsRegistry.

These tests validate:
- built-in defaults cover every vital type
- load() replaces limits for an already registered type
- load() validates limits before registering them
"""

from __future__ import annotations

import pytest

from vitalalert.core.config.vital_limits_registry import VitalLimitsRegistry
from vitalalert.domain.models import VitalLimits, VitalType


def test_defaults_cover_every_vital_type() -> None:
    registry = VitalLimitsRegistry.with_defaults()
    assert set(registry.monitored()) == set(VitalType)
    assert registry.get(VitalType.SPO2).low_emergency == 89.0


def test_empty_registry_monitors_nothing() -> None:
    registry = VitalLimitsRegistry()
    assert registry.monitored() == []
    assert registry.get(VitalType.TEMPERATURE) is None


def test_load_replaces_existing_limits() -> None:
    registry = VitalLimitsRegistry.with_defaults()
    registry.load([VitalLimits(VitalType.SPO2, low_warning=92.0, low_emergency=85.0)])

    assert registry.get(VitalType.SPO2).low_warning == 92.0
    assert len(registry.all()) == len(VitalType)


def test_load_rejects_invalid_limits() -> None:
    registry = VitalLimitsRegistry()
    with pytest.raises(ValueError):
        registry.load([VitalLimits(VitalType.HEART_RATE, low_warning=100.0, high_warning=90.0)])
    assert registry.get(VitalType.HEART_RATE) is None
