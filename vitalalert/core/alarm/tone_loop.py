from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from vitalalert.core.alarm.alarm_base import OutputFactory, PeriodicTimer, TimerFactory, ToneOutput
from vitalalert.domain.events import ToneEvent
from vitalalert.domain.models import SeverityLevel, ToneProfile

logger = logging.getLogger(__name__)


class ToneLoop:
    """
    Periodic tone emitter; the only owner of the alarm timer handle.

    Lifecycle
    ---------
    - `start` creates the timer, emits one tone immediately and then one per
      period. Starting a running loop is a no-op.
    - `retune` changes severity/profile of the running loop in place: the
      same timer keeps running with the new period, so there is neither a
      gap nor a second loop.
    - `cancel` stops and releases the timer. Safe to call at any time.

    Audio degradation
    -----------------
    The audio output is acquired lazily on the first start and reused for the
    lifetime of the loop. If acquisition fails, or the output raises while
    playing, the loop keeps ticking silently. Callers observe this through
    `audible`; nothing is raised.

    Parameters
    ----------
    timer_factory
        Creates a periodic timer bound to the loop's tick callback.
    output_factory
        Creates the audio output. None means no audio capability.
    clock
        Source of "now" for emitted tone events.
    """

    def __init__(
        self,
        timer_factory: TimerFactory,
        output_factory: Optional[OutputFactory] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._timer_factory = timer_factory
        self._output_factory = output_factory
        self._clock = clock

        self._timer: Optional[PeriodicTimer] = None
        self._output: Optional[ToneOutput] = None
        self._output_acquired = False

        self._severity: Optional[SeverityLevel] = None
        self._profile: Optional[ToneProfile] = None
        self.emitted = 0

    @property
    def running(self) -> bool:
        return self._timer is not None

    @property
    def audible(self) -> bool:
        """True when an audio output is available for the tones."""
        return self._output is not None

    @property
    def severity(self) -> Optional[SeverityLevel]:
        return self._severity

    @property
    def profile(self) -> Optional[ToneProfile]:
        return self._profile

    def start(self, severity: SeverityLevel, profile: ToneProfile) -> bool:
        """
        Start the loop if it is not already running.

        Returns
        -------
        bool
            True if a new loop was started, False if one was already active.
        """
        if self._timer is not None:
            return False

        self._acquire_output()
        self._severity = severity
        self._profile = profile
        self._timer = self._timer_factory(self._tick)

        self._tick()
        self._timer.start(profile.period_ms)
        logger.debug("tone loop started (%s, every %d ms)", severity.value, profile.period_ms)
        return True

    def retune(self, severity: SeverityLevel, profile: ToneProfile) -> bool:
        """
        Re-parameterize the running loop.

        Returns
        -------
        bool
            False if the loop is not running (nothing to retune).
        """
        if self._timer is None:
            return False

        period_changed = self._profile is None or self._profile.period_ms != profile.period_ms
        self._severity = severity
        self._profile = profile
        if period_changed:
            self._timer.set_interval(profile.period_ms)
        logger.debug("tone loop retuned (%s, every %d ms)", severity.value, profile.period_ms)
        return True

    def cancel(self) -> None:
        """Stop the timer and release its handle."""
        timer = self._timer
        self._timer = None
        self._severity = None
        self._profile = None
        if timer is not None:
            timer.stop()
            logger.debug("tone loop cancelled")

    def _acquire_output(self) -> None:
        if self._output_acquired:
            return
        self._output_acquired = True

        if self._output_factory is None:
            logger.info("no audio output configured; alarm will be silent")
            return
        try:
            self._output = self._output_factory()
        except Exception as e:
            logger.warning("audio output unavailable, alarm will be silent: %r", e)
            self._output = None
            return
        if self._output is None:
            logger.warning("audio output unavailable, alarm will be silent")

    def _tick(self) -> None:
        # A tick delivered after cancel() must not produce sound.
        if self._timer is None or self._severity is None or self._profile is None:
            return

        event = ToneEvent(severity=self._severity, profile=self._profile, timestamp=self._clock())
        self.emitted += 1

        if self._output is None:
            return
        try:
            self._output.play(event)
        except Exception as e:
            logger.warning("audio output failed, continuing silently: %r", e)
            self._output = None
