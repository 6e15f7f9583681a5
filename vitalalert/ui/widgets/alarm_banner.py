from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton

from vitalalert.domain.models import SeverityLevel
from vitalalert.ui.adapters.banner_view import BannerView
from vitalalert.ui.theme import COLOR_TEXT_MUTED, severity_color


class AlarmBanner(QFrame):
    """
    Alarm banner: colored dot + severity text, with Mute and Escalate buttons.

    Emits
    -----
    mute_clicked
        User pressed Mute.
    escalate_clicked
        User pressed Escalate.
    """

    mute_clicked = Signal()
    escalate_clicked = Signal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        self._dot = QLabel("●")
        self._text = QLabel("All vitals stable")
        self._text.setStyleSheet(f"color: {COLOR_TEXT_MUTED}; font-size: 15px; font-weight: 700;")

        self.mute_button = QPushButton("Mute")
        self.mute_button.setEnabled(False)
        self.mute_button.clicked.connect(self.mute_clicked.emit)

        self.escalate_button = QPushButton("Escalate")
        self.escalate_button.setObjectName("Escalate")
        self.escalate_button.setVisible(False)
        self.escalate_button.clicked.connect(self.escalate_clicked.emit)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.addWidget(self._dot, 0, Qt.AlignVCenter)
        layout.addWidget(self._text, 0, Qt.AlignVCenter)
        layout.addStretch(1)
        layout.addWidget(self.mute_button)
        layout.addWidget(self.escalate_button)

        self._set_color(SeverityLevel.STABLE)

    def set_view(self, view: BannerView) -> None:
        self._set_color(view.level)
        self._text.setText(view.text)
        self.mute_button.setEnabled(view.can_mute)
        self.escalate_button.setVisible(view.can_escalate)

    def _set_color(self, level: SeverityLevel) -> None:
        color = severity_color(level)
        self._dot.setStyleSheet(f"color: {color}; font-size: 22px;")
        self.setStyleSheet(f"QFrame#Card {{ border: 2px solid {color}; }}")
