from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from vitalalert.domain.models import Reading, VitalType

logger = logging.getLogger(__name__)

ReadingListener = Callable[[Reading], None]


@dataclass
class ReadingStore:
    """
    Ordered, append-only store of vital-sign readings.

    Besides the full history, the store maintains a small derived index of
    the latest reading per vital type so severity can be recomputed without
    rescanning the history.

    Notes
    -----
    - "Latest" means most recently appended. The caller (logging UI or
      sensor feed) is responsible for appending in the intended order.
    - Subscribers are notified synchronously, in subscription order, before
      `append` returns. A new reading is therefore fully processed before the
      next one is accepted.
    - Readings are never mutated or removed.

    Attributes
    ----------
    _readings
        Full history in append order.
    _latest
        Mapping from vital type -> most recently appended reading of that type.
    """

    _readings: List[Reading] = field(default_factory=list)
    _latest: Dict[VitalType, Reading] = field(default_factory=dict)
    _listeners: List[ReadingListener] = field(default_factory=list, repr=False)

    def append(self, reading: Reading) -> None:
        """
        Append a reading and notify subscribers.

        Parameters
        ----------
        reading
            New reading. Stored as-is.
        """
        self._readings.append(reading)
        self._latest[reading.vital_type] = reading
        logger.debug("reading appended: %s=%r", reading.vital_type.value, reading.value)

        for listener in list(self._listeners):
            listener(reading)

    def subscribe(self, listener: ReadingListener) -> Callable[[], None]:
        """
        Register a callback invoked after every append.

        Parameters
        ----------
        listener
            Callable receiving the appended reading.

        Returns
        -------
        callable
            Function that removes the subscription (safe to call twice).
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def latest(self, vital_type: VitalType) -> Optional[Reading]:
        """
        Get the latest reading for a vital type.

        Returns
        -------
        Reading or None
            Most recently appended reading of that type, if any.
        """
        return self._latest.get(vital_type)

    def latest_by_type(self) -> Dict[VitalType, Reading]:
        """Snapshot copy of the latest-per-type index."""
        return dict(self._latest)

    def recent(self, n: int) -> List[Reading]:
        """
        Return the ``n`` most recently appended readings, newest first.

        Parameters
        ----------
        n
            Maximum number of readings. Non-positive values yield an empty list.
        """
        if n <= 0:
            return []
        return list(reversed(self._readings[-n:]))

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(list(self._readings))
