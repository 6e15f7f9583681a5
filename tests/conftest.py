"""
Shared fakes for the alarm tests.

The tone loop only talks to a periodic timer and an audio output through
small protocols, so tests drive it with hand-written fakes instead of Qt.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from vitalalert.domain.events import ToneEvent


class FakeTimer:
    """Records start/set_interval/stop calls; `fire()` simulates a timeout."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.interval: Optional[int] = None
        self.start_calls = 0
        self.set_interval_calls: List[int] = []
        self.stopped = False

    def start(self, interval_ms: int) -> None:
        self.start_calls += 1
        self.interval = interval_ms

    def set_interval(self, interval_ms: int) -> None:
        self.set_interval_calls.append(interval_ms)
        self.interval = interval_ms

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        self.callback()


class FakeTimerFactory:
    """Timer factory keeping every timer it created."""

    def __init__(self) -> None:
        self.timers: List[FakeTimer] = []

    def __call__(self, callback: Callable[[], None]) -> FakeTimer:
        t = FakeTimer(callback)
        self.timers.append(t)
        return t

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


class FakeOutput:
    """Audio output recording played tone events."""

    def __init__(self) -> None:
        self.played: List[ToneEvent] = []

    def play(self, event: ToneEvent) -> None:
        self.played.append(event)


class FakeDispatcher:
    """Dispatcher recording messages; optionally raises on every call."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages = []

    def dispatch(self, message) -> None:
        self.messages.append(message)
        if self.fail:
            raise RuntimeError("channel down")


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def failing_dispatcher() -> FakeDispatcher:
    return FakeDispatcher(fail=True)
