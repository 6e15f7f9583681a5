"""
Tone synthesis to 16-bit mono PCM.

Used by the audio output to turn a `ToneProfile` into samples. Kept free of
any audio backend so it can be reasoned about (and tested) on its own.
"""

from __future__ import annotations

import math
import sys
from array import array
from typing import Callable, Dict

from vitalalert.domain.models import ToneProfile, Waveform

SAMPLE_RATE = 44100
FADE_MS = 5


def _sine(phase: float) -> float:
    return math.sin(2.0 * math.pi * phase)


def _square(phase: float) -> float:
    return 1.0 if phase < 0.5 else -1.0


def _sawtooth(phase: float) -> float:
    return 2.0 * phase - 1.0


def _triangle(phase: float) -> float:
    return 4.0 * abs(phase - 0.5) - 1.0


OSCILLATORS: Dict[Waveform, Callable[[float], float]] = {
    Waveform.SINE: _sine,
    Waveform.SQUARE: _square,
    Waveform.SAWTOOTH: _sawtooth,
    Waveform.TRIANGLE: _triangle,
}


def synthesize(profile: ToneProfile, sample_rate: int = SAMPLE_RATE) -> bytes:
    """
    Render one tone as little-endian signed 16-bit mono samples.

    A short linear fade is applied at both ends to avoid clicks.

    Parameters
    ----------
    profile
        Waveform, frequency, duration and gain of the tone.
    sample_rate
        Output sample rate in Hz.

    Returns
    -------
    bytes
        Raw PCM data, ``2 * round(sample_rate * duration)`` bytes long.
    """
    n = int(round(sample_rate * profile.duration_ms / 1000.0))
    fade = min(n // 2, int(sample_rate * FADE_MS / 1000.0))
    osc = OSCILLATORS[profile.waveform]
    peak = 32767.0 * max(0.0, min(1.0, profile.gain))
    step = profile.frequency_hz / sample_rate

    samples = array("h", bytes(2 * n))
    for i in range(n):
        env = 1.0
        if fade:
            if i < fade:
                env = i / fade
            elif i >= n - fade:
                env = (n - 1 - i) / fade
        samples[i] = int(peak * env * osc((i * step) % 1.0))

    if sys.byteorder == "big":
        samples.byteswap()
    return samples.tobytes()
