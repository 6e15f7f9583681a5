from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from vitalalert.domain.events import AlarmEvent


@dataclass
class AlarmHistory:
    """
    In-memory history of alarm lifecycle events.

    The history is what the UI alarm log displays. It is bounded: once
    ``max_events`` is reached the oldest events are dropped.

    Attributes
    ----------
    events
        Alarm events in insertion order.
    max_events
        Maximum number of retained events.
    """

    events: List[AlarmEvent] = field(default_factory=list)
    max_events: int = 500

    def add_event(self, event: AlarmEvent) -> None:
        """
        Append an alarm event, trimming the oldest entries if needed.

        Parameters
        ----------
        event
            AlarmEvent to add.
        """
        self.events.append(event)
        if len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

    def latest(self) -> Optional[AlarmEvent]:
        return self.events[-1] if self.events else None

    def clear(self) -> None:
        """
        Clear all stored alarm events.

        """
        self.events.clear()
