"""
Alarm output contracts (timer, audio output, and their factories).

This module defines the seams between the alarm state machine and the
platform it runs on:

- `PeriodicTimer` drives the tone loop (a `QTimer` in the desktop shell,
  a manual fake in tests).
- `ToneOutput` turns a discrete `ToneEvent` into sound.

Both are created through factories so the tone loop can acquire them lazily
and own their handles explicitly.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from vitalalert.domain.events import ToneEvent


class AudioUnavailable(RuntimeError):
    """Raised by an output factory when no audio device can be used."""


class PeriodicTimer(Protocol):
    """
    Protocol interface for a cancellable periodic callback.

    The callback is bound at construction by the `TimerFactory`.

    Methods
    -------
    start(interval_ms)
        Begin firing every ``interval_ms`` milliseconds.
    set_interval(interval_ms)
        Change the period of a running timer without creating another one.
    stop()
        Stop firing. Must be safe to call more than once.
    """

    def start(self, interval_ms: int) -> None:
        ...

    def set_interval(self, interval_ms: int) -> None:
        ...

    def stop(self) -> None:
        ...


class ToneOutput(Protocol):
    """
    Protocol interface for audio output of discrete tones.

    Methods
    -------
    play(event)
        Emit one tone of bounded duration. Must not block for the tone length.
    """

    def play(self, event: ToneEvent) -> None:
        ...


TimerFactory = Callable[[Callable[[], None]], PeriodicTimer]
OutputFactory = Callable[[], Optional[ToneOutput]]
