"""
Alarm event domain models.

This module defines the event-level representation of alarm lifecycle changes.
An `AlarmEvent` represents *what happened* at a specific time, while
`AlarmState` (in models.py) represents *what is currently true*.

`ToneEvent` is the discrete unit emitted by the tone loop on every repetition
and handed to the audio output.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple

from vitalalert.domain.models import SeverityLevel, ToneProfile, VitalType


class AlarmTransition(str, Enum):
    """
    Alarm lifecycle transition.

    Members
    -------
    STARTED : str
        Idle -> sounding.
    RETUNED : str
        Sounding at one severity -> sounding at another (loop re-parameterized).
    STOPPED : str
        Sounding or muted -> idle, because severity returned to stable.
    MUTED : str
        Sounding -> muted by the user.
    REARMED : str
        Muted -> sounding, because a new qualifying reading arrived.
    """

    STARTED = "STARTED"
    RETUNED = "RETUNED"
    STOPPED = "STOPPED"
    MUTED = "MUTED"
    REARMED = "REARMED"


@dataclass(frozen=True)
class AlarmEvent:
    """
    Alarm event emitted when the alarm state machine transitions.

    Parameters
    ----------
    transition
        Lifecycle transition.
    severity
        Severity after the transition (last known severity for MUTED).
    timestamp
        When the transition occurred.
    message
        Human-readable description (used in UI/logs).
    triggers
        Vital types responsible for the severity, if known.
    """

    transition: AlarmTransition
    severity: SeverityLevel
    timestamp: datetime
    message: str
    triggers: Tuple[VitalType, ...] = ()


@dataclass(frozen=True)
class ToneEvent:
    """
    One discrete tone emitted by the alarm loop.

    Parameters
    ----------
    severity
        Severity the tone encodes.
    profile
        Waveform, pitch and duration to synthesize.
    timestamp
        Emission time.
    """

    severity: SeverityLevel
    profile: ToneProfile
    timestamp: datetime
