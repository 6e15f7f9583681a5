from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import List, Optional

from vitalalert.notification.base import Dispatcher, EscalationMessage

logger = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True)
class DispatchThreadConfig:
    max_queue: int = 200
    retry_count: int = 3
    retry_backoff_s: float = 0.5
    poll_timeout_s: float = 0.5


class DispatchWorkerThread:
    """
    Background dispatcher for escalation messages.

    `dispatch()` only enqueues, so the alarm engine never waits on network
    I/O. The worker delivers each message to every wrapped dispatcher with
    exponential-backoff retries; a dispatcher that keeps failing is logged and
    skipped.

    Parameters
    ----------
    dispatchers
        Dispatchers performing the actual delivery.
    cfg
        Queue size and retry policy.
    """

    def __init__(self, dispatchers: List[Dispatcher], cfg: Optional[DispatchThreadConfig] = None):
        self._dispatchers = dispatchers
        self._cfg = cfg or DispatchThreadConfig()
        self._q: "queue.Queue[object]" = queue.Queue(maxsize=self._cfg.max_queue)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="escalation-dispatch", daemon=True)

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        try:
            self._q.put_nowait(_STOP)
        except queue.Full:
            pass
        if self._thread.is_alive():
            self._thread.join(timeout=2.0)

    def dispatch(self, message: EscalationMessage) -> None:
        try:
            self._q.put_nowait(message)
        except queue.Full:
            # Drop newest if overloaded to protect UI/app stability
            logger.warning("dispatch queue full, dropping escalation for %s", message.subject)

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                item = self._q.get(timeout=self._cfg.poll_timeout_s)
            except queue.Empty:
                continue

            if item is _STOP:
                break

            for dispatcher in self._dispatchers:
                self._send_with_retries(dispatcher, item)  # type: ignore[arg-type]

    def _send_with_retries(self, dispatcher: Dispatcher, message: EscalationMessage) -> None:
        for attempt in range(self._cfg.retry_count + 1):
            try:
                dispatcher.dispatch(message)
                return
            except Exception as e:
                if attempt >= self._cfg.retry_count:
                    logger.error(
                        "escalation dispatch via %s failed after %d attempts: %r",
                        type(dispatcher).__name__, attempt + 1, e,
                    )
                    return
                time.sleep(self._cfg.retry_backoff_s * (2 ** attempt))
