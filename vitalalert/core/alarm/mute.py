from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from vitalalert.core.alarm.alarm_scheduler import AlarmScheduler
from vitalalert.domain.models import AlarmStatus

logger = logging.getLogger(__name__)


class MuteController:
    """
    User-facing override that silences the current alarm episode.

    Muting never changes the aggregate severity; the scheduler re-arms on the
    next qualifying reading.

    Parameters
    ----------
    scheduler
        Alarm scheduler to silence.
    """

    def __init__(self, scheduler: AlarmScheduler):
        self._scheduler = scheduler
        self.mute_count = 0
        self.last_muted: Optional[datetime] = None

    @property
    def can_mute(self) -> bool:
        """Whether the mute affordance should be enabled."""
        return self._scheduler.state.status is AlarmStatus.SOUNDING

    def mute(self, now: Optional[datetime] = None) -> bool:
        """
        Silence the alarm if it is sounding.

        Returns
        -------
        bool
            True if an active alarm was muted, False for a no-op.
        """
        events = self._scheduler.mute(now=now)
        if not events:
            logger.debug("mute ignored: alarm is %s", self._scheduler.state.status.value)
            return False

        self.mute_count += 1
        self.last_muted = events[0].timestamp
        return True
