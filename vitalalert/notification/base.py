from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Tuple

from vitalalert.domain.models import SeverityLevel, VitalType


@dataclass(frozen=True)
class ReadingLine:
    """
    One reading as it appears in an escalation message.

    Parameters
    ----------
    vital_type
        Vital type of the reading.
    value
        Numeric value, or None if the reading had no usable value.
    units
        Display units.
    timestamp
        Observation time.
    """

    vital_type: VitalType
    value: Optional[float]
    units: str
    timestamp: datetime

    def render(self) -> str:
        value = "n/a" if self.value is None else f"{self.value:g}"
        return f"{self.vital_type.label}: {value} {self.units}".rstrip()


@dataclass(frozen=True)
class EscalationMessage:
    """
    Escalation message contract used by the dispatch layer.

    An 'EscalationMessage' represents *what should be communicated* and *to
    whom*, not *how* it is delivered.

    Parameters
    ----------
    subject
        Identity of the monitored subject.
    severity
        Aggregate severity at escalation time.
    readings
        Most recent readings, newest first.
    destination
        Contact address the message is sent to.
    text
        Human-readable body.
    created_at
        When the message was composed.
    used_default_contact
        True when no contact was configured and the default placeholder was used.

    Notes
    -----
    The class is frozen (immutable) so messages remain stable once created,
    supporting safe logging and retries.
    """

    subject: str
    severity: SeverityLevel
    readings: Tuple[ReadingLine, ...]
    destination: str
    text: str
    created_at: datetime
    used_default_contact: bool = False


class Dispatcher(Protocol):
    """
    Protocol interface for escalation delivery.

    Any dispatcher implementation can be used if it provides a
    'dispatch(message)' method with the correct signature. This keeps the
    notifier independent of the delivery channel and easy to test with fakes.

    Methods
    -------
    dispatch(message)
        Deliver an escalation message.
    """

    def dispatch(self, message: EscalationMessage) -> None:
        """
        Deliver an escalation message.

        Parameters
        ----------
        message
            The message to deliver.
        """
        ...
