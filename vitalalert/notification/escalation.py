"""
Caregiver escalation.

The `EscalationNotifier` composes a snapshot of the current emergency (who,
how severe, the most recent readings) and hands it to one or more dispatch
channels. Delivery is fire-and-forget: the notifier reports that the message
was dispatched, and channel failures are logged rather than raised. Escalation
never touches the alarm state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from vitalalert.domain.models import Profile, Reading, SeverityLevel
from vitalalert.notification.base import Dispatcher, EscalationMessage, ReadingLine
from vitalalert.notification.payload import build_escalation_text

logger = logging.getLogger(__name__)

DEFAULT_CONTACT = "919999999999"


class EscalationNotAllowed(ValueError):
    """Raised when escalation is requested outside an EMERGENCY."""


@dataclass(frozen=True)
class EscalationResult:
    """
    Outcome of an escalation request.

    Parameters
    ----------
    dispatched
        True once the message was handed to the dispatch channels.
    message
        The composed message.
    """

    dispatched: bool
    message: EscalationMessage


class EscalationNotifier:
    """
    Compose and dispatch escalation messages.

    Parameters
    ----------
    dispatchers
        Delivery channels, each receiving every message.
    default_contact
        Destination used when the profile has no contact configured.
    recent_count
        Number of most recent readings included in the message.
    clock
        Source of the message creation time.
    """

    def __init__(
        self,
        dispatchers: Sequence[Dispatcher],
        default_contact: str = DEFAULT_CONTACT,
        recent_count: int = 3,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if recent_count < 1:
            raise ValueError("recent_count must be >= 1")
        self._dispatchers: List[Dispatcher] = list(dispatchers)
        self._default_contact = default_contact
        self._recent_count = recent_count
        self._clock = clock

    @property
    def recent_count(self) -> int:
        return self._recent_count

    def compose(
        self,
        profile: Profile,
        readings: Sequence[Reading],
        severity: SeverityLevel,
        now: Optional[datetime] = None,
    ) -> EscalationMessage:
        """
        Build the escalation message without dispatching it.

        Parameters
        ----------
        profile
            Monitored subject and optional contact.
        readings
            Recent readings, newest first. Only the first ``recent_count``
            are included.
        severity
            Current aggregate severity.
        now
            Creation time; defaults to the notifier clock.
        """
        lines = tuple(
            ReadingLine(vital_type=r.vital_type, value=r.value, units=r.units, timestamp=r.timestamp)
            for r in list(readings)[: self._recent_count]
        )

        contact = (profile.contact or "").strip()
        used_default = not contact
        destination = self._default_contact if used_default else contact

        return EscalationMessage(
            subject=profile.name,
            severity=severity,
            readings=lines,
            destination=destination,
            text=build_escalation_text(profile.name, severity, lines),
            created_at=now or self._clock(),
            used_default_contact=used_default,
        )

    def escalate(
        self,
        profile: Profile,
        readings: Sequence[Reading],
        severity: SeverityLevel,
        now: Optional[datetime] = None,
    ) -> EscalationResult:
        """
        Compose the escalation message and hand it to every dispatcher.

        Parameters
        ----------
        profile
            Monitored subject and optional contact.
        readings
            Recent readings, newest first.
        severity
            Current aggregate severity; must be EMERGENCY.
        now
            Creation time; defaults to the notifier clock.

        Returns
        -------
        EscalationResult
            ``dispatched`` is True even when the default contact was used or
            a channel failed; delivery is outside the engine's state.

        Raises
        ------
        EscalationNotAllowed
            If ``severity`` is not EMERGENCY.
        """
        if severity is not SeverityLevel.EMERGENCY:
            raise EscalationNotAllowed(f"escalation requires EMERGENCY severity, got {severity.value}")

        message = self.compose(profile, readings, severity, now=now)
        if message.used_default_contact:
            logger.warning("no contact configured for %s; escalating to default %s", profile.name, message.destination)
        else:
            logger.warning("escalating emergency for %s to %s", profile.name, message.destination)

        for dispatcher in self._dispatchers:
            try:
                dispatcher.dispatch(message)
            except Exception:
                logger.exception("escalation dispatcher %s failed", type(dispatcher).__name__)

        return EscalationResult(dispatched=True, message=message)
