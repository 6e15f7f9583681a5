from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QObject, QTimer
from PySide6.QtMultimedia import QAudio, QAudioDevice, QAudioFormat, QAudioSink, QMediaDevices

from vitalalert.core.alarm.alarm_base import AudioUnavailable
from vitalalert.core.alarm.synth import SAMPLE_RATE, synthesize
from vitalalert.domain.events import ToneEvent
from vitalalert.domain.models import ToneProfile

logger = logging.getLogger(__name__)


class QtPeriodicTimer:
    """
    `PeriodicTimer` backed by a `QTimer` on the GUI event loop.

    Parameters
    ----------
    callback
        Called on every timeout.
    parent
        Optional QObject owning the timer.
    """

    def __init__(self, callback: Callable[[], None], parent: Optional[QObject] = None) -> None:
        self._timer = QTimer(parent)
        self._timer.timeout.connect(callback)

    def start(self, interval_ms: int) -> None:
        self._timer.start(interval_ms)

    def set_interval(self, interval_ms: int) -> None:
        self._timer.setInterval(interval_ms)

    def stop(self) -> None:
        self._timer.stop()


class QtToneOutput:
    """
    `ToneOutput` that plays synthesized PCM through a single `QAudioSink`.

    The sink is created once and reused for every tone. PCM buffers are
    cached per tone profile.
    """

    def __init__(self, device: QAudioDevice, fmt: QAudioFormat) -> None:
        self._sink = QAudioSink(device, fmt)
        self._buffer: Optional[QBuffer] = None
        self._pcm: Dict[ToneProfile, bytes] = {}

    def play(self, event: ToneEvent) -> None:
        pcm = self._pcm.get(event.profile)
        if pcm is None:
            pcm = synthesize(event.profile, SAMPLE_RATE)
            self._pcm[event.profile] = pcm

        if self._sink.state() != QAudio.State.StoppedState:
            self._sink.stop()
        if self._buffer is not None:
            self._buffer.close()

        self._buffer = QBuffer()
        self._buffer.setData(QByteArray(pcm))
        self._buffer.open(QIODevice.OpenModeFlag.ReadOnly)
        self._sink.start(self._buffer)

        if self._sink.error() != QAudio.Error.NoError:
            raise RuntimeError(f"audio sink error: {self._sink.error()}")


def qt_timer_factory(callback: Callable[[], None]) -> QtPeriodicTimer:
    return QtPeriodicTimer(callback)


def qt_output_factory() -> QtToneOutput:
    """
    Acquire the default audio output.

    Raises
    ------
    AudioUnavailable
        If there is no output device or it cannot play 16-bit mono PCM.
    """
    device = QMediaDevices.defaultAudioOutput()
    if device.isNull():
        raise AudioUnavailable("no default audio output device")

    fmt = QAudioFormat()
    fmt.setSampleRate(SAMPLE_RATE)
    fmt.setChannelCount(1)
    fmt.setSampleFormat(QAudioFormat.SampleFormat.Int16)
    if not device.isFormatSupported(fmt):
        raise AudioUnavailable(f"{device.description()} does not support 16-bit mono PCM")

    logger.info("audio output: %s", device.description())
    return QtToneOutput(device, fmt)
