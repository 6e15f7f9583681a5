from __future__ import annotations

import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable

from vitalalert.notification.base import EscalationMessage
from vitalalert.notification.payload import build_deep_link

logger = logging.getLogger(__name__)

UrlOpener = Callable[[str], object]


@dataclass(frozen=True)
class DeepLinkConfig:
    """
    Configuration for messaging deep links.

    Parameters
    ----------
    base_url
        Click-to-chat link prefix.
    """

    base_url: str = "https://wa.me"


class DeepLinkDispatcher:
    """
    Dispatcher that hands the escalation to a messaging app through a deep link.

    The message is URL-encoded into the link and the link is passed to an
    opener (the system browser by default). Opening a link is instantaneous,
    so this dispatcher can be called directly from the UI thread.
    """

    def __init__(self, cfg: DeepLinkConfig | None = None, opener: UrlOpener = webbrowser.open):
        self._cfg = cfg or DeepLinkConfig()
        self._opener = opener
        self.last_url: str | None = None

    def dispatch(self, message: EscalationMessage) -> None:
        url = build_deep_link(self._cfg.base_url, message.destination, message.text)
        self.last_url = url
        logger.info("opening escalation link for %s", message.destination)
        self._opener(url)
