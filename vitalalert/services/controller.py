from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from vitalalert.core.alarm.alarm_scheduler import AlarmScheduler
from vitalalert.core.alarm.mute import MuteController
from vitalalert.core.severity.classifier import SeverityAssessment, SeverityClassifier
from vitalalert.core.state.alarm_store import AlarmHistory
from vitalalert.core.state.reading_store import ReadingStore
from vitalalert.domain.events import AlarmEvent
from vitalalert.domain.models import AlarmState, Profile, Reading, SeverityLevel
from vitalalert.notification.escalation import EscalationNotifier, EscalationResult

logger = logging.getLogger(__name__)


class MonitoringController:
    """
    Orchestrate severity classification, the alarm and escalation.

    Responsibilities
    ----------------
    - Subscribe to the `ReadingStore`; every appended reading triggers one
      synchronous classification pass.
    - Feed the aggregate severity to the `AlarmScheduler` and record the
      resulting events in the `AlarmHistory`.
    - Expose the user inputs: mute (via `MuteController`) and escalate (only
      while the aggregate is EMERGENCY).

    Notes
    -----
    This controller contains orchestration logic only. Classification rules
    live in the severity classifier, lifecycle transitions in the scheduler.

    Parameters
    ----------
    store
        Reading store to observe.
    classifier
        Severity classifier.
    scheduler
        Alarm state machine.
    notifier
        Escalation notifier.
    profile
        Monitored subject (identity + contact).
    history
        Optional alarm history; a new one is created if omitted.
    """

    def __init__(
        self,
        store: ReadingStore,
        classifier: SeverityClassifier,
        scheduler: AlarmScheduler,
        notifier: EscalationNotifier,
        profile: Profile,
        history: Optional[AlarmHistory] = None,
    ):
        self.store = store
        self.classifier = classifier
        self.scheduler = scheduler
        self.notifier = notifier
        self.profile = profile
        self.history = history if history is not None else AlarmHistory()
        self.muter = MuteController(scheduler)
        scheduler.subscribe(self.history.add_event)

        # Readings already in the store must sound before the first new one arrives.
        self._assessment = classifier.assess(store.latest_by_type())
        scheduler.apply(self._assessment.aggregate, self._assessment.triggers)
        self._listeners: List[Callable[[], None]] = []
        self._unsubscribe: Optional[Callable[[], None]] = store.subscribe(self.handle_reading)

    @property
    def assessment(self) -> SeverityAssessment:
        return self._assessment

    @property
    def severity(self) -> SeverityLevel:
        return self._assessment.aggregate

    @property
    def state(self) -> AlarmState:
        return self.scheduler.state

    @property
    def can_escalate(self) -> bool:
        return self._assessment.aggregate is SeverityLevel.EMERGENCY

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback invoked after every state-affecting action (UI refresh)."""
        self._listeners.append(listener)

    def handle_reading(self, reading: Reading, now: Optional[datetime] = None) -> List[AlarmEvent]:
        """
        Reassess severity after a new reading and drive the alarm.

        Parameters
        ----------
        reading
            Reading that was just appended (classification uses the store's
            latest-per-type index, not this object alone).
        now
            Optional timestamp for this cycle.

        Returns
        -------
        list of AlarmEvent
            Alarm transitions caused by the reading.
        """
        self._assessment = self.classifier.assess(self.store.latest_by_type())
        events = self.scheduler.apply(self._assessment.aggregate, self._assessment.triggers, now=now)
        self._notify()
        return events

    def mute(self, now: Optional[datetime] = None) -> bool:
        """
        Silence the current alarm episode. No-op unless sounding.

        Returns
        -------
        bool
            True if the alarm was muted.
        """
        muted = self.muter.mute(now=now)
        self._notify()
        return muted

    def escalate(self, now: Optional[datetime] = None) -> Optional[EscalationResult]:
        """
        Escalate to the configured contact.

        Returns
        -------
        EscalationResult or None
            None when the aggregate severity is not EMERGENCY (the affordance
            is not offered); the alarm state is never changed.
        """
        if not self.can_escalate:
            logger.info("escalation not offered: severity is %s", self.severity.value)
            return None
        readings = self.store.recent(self.notifier.recent_count)
        return self.notifier.escalate(self.profile, readings, self._assessment.aggregate, now=now)

    def close(self) -> None:
        """Stop observing the store and cancel any sounding alarm."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.scheduler.teardown()
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
