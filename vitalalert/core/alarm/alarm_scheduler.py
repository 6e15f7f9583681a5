"""
Alarm lifecycle state machine.

This module turns the aggregate severity produced by the classifier into:
- the current `AlarmState` (IDLE / SOUNDING / MUTED), and
- discrete `AlarmEvent` transitions (STARTED / RETUNED / STOPPED / MUTED / REARMED),

while driving the `ToneLoop` that produces the audible signal. The scheduler
does not classify readings itself; it is fed one severity per new reading.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from vitalalert.core.alarm.tone_loop import ToneLoop
from vitalalert.domain.events import AlarmEvent, AlarmTransition
from vitalalert.domain.models import (
    EMERGENCY_TONE,
    WARNING_TONE,
    AlarmState,
    AlarmStatus,
    SeverityLevel,
    ToneProfile,
    VitalType,
)

logger = logging.getLogger(__name__)

AlarmEventListener = Callable[[AlarmEvent], None]


def default_tones() -> Dict[SeverityLevel, ToneProfile]:
    return {SeverityLevel.WARNING: WARNING_TONE, SeverityLevel.EMERGENCY: EMERGENCY_TONE}


def _describe(severity: SeverityLevel, triggers: Sequence[VitalType]) -> str:
    if not triggers:
        return severity.label
    return f"{severity.label} ({', '.join(t.label for t in triggers)})"


class AlarmScheduler:
    """
    Alarm state machine (IDLE / SOUNDING / MUTED).

    Transition Model
    ----------------
    - IDLE     + WARNING/EMERGENCY  -> SOUNDING  (STARTED)
    - SOUNDING + other non-stable   -> SOUNDING  (RETUNED, loop re-parameterized in place)
    - SOUNDING + same severity      -> SOUNDING  (no event, start is idempotent)
    - SOUNDING + STABLE             -> IDLE      (STOPPED, loop cancelled)
    - SOUNDING + mute()             -> MUTED     (MUTED, loop cancelled, severity kept)
    - MUTED    + WARNING/EMERGENCY  -> SOUNDING  (REARMED, mute covers one episode only)
    - MUTED    + STABLE             -> IDLE      (STOPPED)

    Every call to `apply` represents a new reading, so a muted alarm re-arms
    on the next qualifying reading even when the severity did not change.

    Parameters
    ----------
    loop
        Tone loop owned by this scheduler.
    tones
        Tone profile per alarming severity.
    on_event
        Optional listener receiving each emitted AlarmEvent.
    clock
        Source of "now" when callers do not pass a timestamp.
    """

    def __init__(
        self,
        loop: ToneLoop,
        tones: Optional[Mapping[SeverityLevel, ToneProfile]] = None,
        on_event: Optional[AlarmEventListener] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._loop = loop
        self._tones = dict(tones or default_tones())
        self._listeners: List[AlarmEventListener] = [on_event] if on_event is not None else []
        self._clock = clock
        self._state = AlarmState(status=AlarmStatus.IDLE, severity=SeverityLevel.STABLE, since=clock())

    def subscribe(self, listener: AlarmEventListener) -> None:
        """Register an additional listener for emitted AlarmEvents."""
        self._listeners.append(listener)

    @property
    def state(self) -> AlarmState:
        return self._state

    @property
    def loop(self) -> ToneLoop:
        return self._loop

    def tone_for(self, severity: SeverityLevel) -> ToneProfile:
        """
        Return the tone profile for an alarming severity.

        Raises
        ------
        KeyError
            If ``severity`` is STABLE or has no configured tone.
        """
        return self._tones[severity]

    def apply(
        self,
        severity: SeverityLevel,
        triggers: Sequence[VitalType] = (),
        now: Optional[datetime] = None,
    ) -> List[AlarmEvent]:
        """
        Feed the aggregate severity computed for a new reading.

        Parameters
        ----------
        severity
            Aggregate severity after the reading.
        triggers
            Vital types responsible for ``severity`` (for messages only).
        now
            Timestamp for this transition. If None, uses the scheduler clock.

        Returns
        -------
        list of AlarmEvent
            Zero or one transition event.
        """
        ts = now or self._clock()
        prev = self._state
        trig: Tuple[VitalType, ...] = tuple(triggers)

        if prev.status is AlarmStatus.IDLE:
            if not severity.is_alarming:
                return []
            self._loop.start(severity, self.tone_for(severity))
            return self._transition(AlarmStatus.SOUNDING, severity, AlarmTransition.STARTED, ts, trig)

        if prev.status is AlarmStatus.SOUNDING:
            if not severity.is_alarming:
                self._loop.cancel()
                return self._transition(AlarmStatus.IDLE, SeverityLevel.STABLE, AlarmTransition.STOPPED, ts, trig)
            if severity is prev.severity:
                # Already sounding for this severity; start() is a no-op on a running loop.
                self._loop.start(severity, self.tone_for(severity))
                return []
            self._loop.retune(severity, self.tone_for(severity))
            return self._transition(AlarmStatus.SOUNDING, severity, AlarmTransition.RETUNED, ts, trig)

        # MUTED
        if not severity.is_alarming:
            self._loop.cancel()
            return self._transition(AlarmStatus.IDLE, SeverityLevel.STABLE, AlarmTransition.STOPPED, ts, trig)
        self._loop.start(severity, self.tone_for(severity))
        return self._transition(AlarmStatus.SOUNDING, severity, AlarmTransition.REARMED, ts, trig)

    def mute(self, now: Optional[datetime] = None) -> List[AlarmEvent]:
        """
        Silence the current alarm episode.

        Only meaningful while SOUNDING; otherwise a no-op. The severity is kept
        on the MUTED state for display.

        Returns
        -------
        list of AlarmEvent
            The MUTED event, or an empty list for a no-op.
        """
        if self._state.status is not AlarmStatus.SOUNDING:
            return []
        ts = now or self._clock()
        self._loop.cancel()
        return self._transition(AlarmStatus.MUTED, self._state.severity, AlarmTransition.MUTED, ts, ())

    def teardown(self) -> None:
        """Cancel the tone loop and return to IDLE without emitting events."""
        self._loop.cancel()
        self._state = AlarmState(status=AlarmStatus.IDLE, severity=SeverityLevel.STABLE, since=self._clock())

    def _transition(
        self,
        status: AlarmStatus,
        severity: SeverityLevel,
        transition: AlarmTransition,
        ts: datetime,
        triggers: Tuple[VitalType, ...],
    ) -> List[AlarmEvent]:
        self._state = AlarmState(status=status, severity=severity, since=ts)

        if transition is AlarmTransition.STOPPED:
            message = "Alarm stopped: vitals back in normal range"
        elif transition is AlarmTransition.MUTED:
            message = f"Alarm muted ({severity.label})"
        else:
            message = f"Alarm {transition.value.lower()}: {_describe(severity, triggers)}"

        event = AlarmEvent(
            transition=transition,
            severity=severity,
            timestamp=ts,
            message=message,
            triggers=triggers,
        )
        logger.info(message)

        for listener in list(self._listeners):
            listener(event)
        return [event]
