from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from PySide6.QtCore import QObject, QTimer, Signal

from vitalalert.core.state.reading_store import ReadingStore
from vitalalert.domain.models import Reading, make_reading

logger = logging.getLogger(__name__)


class ReadingReplayer(QObject):
    """
    Feeds recorded readings into the store, one per tick, on the GUI thread.

    Used to exercise the dashboard, the alarm and escalation without a live
    reading source.

    Parameters
    ----------
    store
        Store the readings are appended to.
    readings
        Readings to replay, in order.
    interval_ms
        Delay between two readings.
    restamp
        If True, each reading is appended as a fresh reading (new id)
        stamped with the current time.
    loop
        If True, start over after the last reading.

    Emits
    -----
    finished
        After the last reading when not looping.
    """

    finished = Signal()

    def __init__(
        self,
        store: ReadingStore,
        readings: Sequence[Reading],
        interval_ms: int = 1000,
        restamp: bool = True,
        loop: bool = False,
        clock: Callable[[], datetime] = datetime.now,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self._readings: List[Reading] = list(readings)
        self._restamp = restamp
        self._loop = loop
        self._clock = clock
        self._index = 0

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.step)

    @property
    def position(self) -> int:
        return self._index

    def start(self) -> None:
        if not self._readings:
            logger.warning("nothing to replay")
            return
        logger.info("replaying %d readings every %d ms", len(self._readings), self._timer.interval())
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def step(self) -> None:
        """Append the next reading."""
        if self._index >= len(self._readings):
            if not self._loop:
                self._timer.stop()
                self.finished.emit()
                return
            self._index = 0

        reading = self._readings[self._index]
        self._index += 1
        if self._restamp:
            reading = make_reading(reading.vital_type, reading.value, self._clock())
        self.store.append(reading)
