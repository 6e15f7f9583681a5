"""
Unit tests for vitalalert.core.alarm.synth.
"""

from __future__ import annotations

from array import array
import sys

import pytest

from vitalalert.core.alarm.synth import synthesize
from vitalalert.domain.models import ToneProfile, Waveform


def _samples(pcm: bytes) -> array:
    a = array("h", pcm)
    if sys.byteorder == "big":
        a.byteswap()
    return a


@pytest.mark.parametrize("waveform", list(Waveform))
def test_length_and_peak(waveform) -> None:
    profile = ToneProfile(waveform=waveform, frequency_hz=1000.0, period_ms=500, duration_ms=100, gain=0.5)
    pcm = synthesize(profile, sample_rate=8000)

    assert len(pcm) == 2 * 800
    s = _samples(pcm)
    assert max(abs(v) for v in s) <= int(32767 * 0.5)
    assert max(abs(v) for v in s) > 0


def test_fade_starts_and_ends_at_silence() -> None:
    profile = ToneProfile(waveform=Waveform.SQUARE, frequency_hz=440.0, period_ms=1000, duration_ms=200)
    s = _samples(synthesize(profile, sample_rate=8000))
    assert s[0] == 0
    assert s[-1] == 0


def test_zero_gain_is_silent() -> None:
    profile = ToneProfile(waveform=Waveform.SINE, frequency_hz=440.0, period_ms=1000, duration_ms=50, gain=0.0)
    assert set(_samples(synthesize(profile, sample_rate=8000))) == {0}
