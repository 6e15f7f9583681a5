from __future__ import annotations

import logging

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QMainWindow, QSplitter, QVBoxLayout, QWidget

from vitalalert.notification.escalation import EscalationNotAllowed
from vitalalert.services.controller import MonitoringController
from vitalalert.ui.adapters.banner_view import alarm_rows, banner_view, vital_rows
from vitalalert.ui.widgets.alarm_banner import AlarmBanner
from vitalalert.ui.widgets.alarm_table import AlarmTable
from vitalalert.ui.widgets.vitals_table import VitalsTable

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main monitoring window.
    - Top: alarm banner (Mute / Escalate)
    - Bottom: latest vitals table + alarm log
    """

    def __init__(self, controller: MonitoringController) -> None:
        super().__init__()
        self.controller = controller
        self.setWindowTitle(f"Vital Monitor - {controller.profile.display_name or controller.profile.name}")
        self.resize(1100, 640)

        root = QWidget()
        self.setCentralWidget(root)
        layout = QVBoxLayout(root)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        self.banner = AlarmBanner()
        self.banner.mute_clicked.connect(self.on_mute)
        self.banner.escalate_clicked.connect(self.on_escalate)
        layout.addWidget(self.banner)

        splitter = QSplitter()
        splitter.setChildrenCollapsible(False)

        self.vitals_table = VitalsTable()
        self.alarm_table = AlarmTable()

        splitter.addWidget(self.vitals_table)
        splitter.addWidget(self.alarm_table)
        splitter.setStretchFactor(0, 2)
        splitter.setStretchFactor(1, 3)
        layout.addWidget(splitter, stretch=1)

        controller.add_listener(self.refresh_ui)

        # periodic refresh keeps timestamps current between readings
        self.timer = QTimer(self)
        self.timer.setInterval(500)
        self.timer.timeout.connect(self.refresh_ui)
        self.timer.start()

        self.refresh_ui()

    def refresh_ui(self) -> None:
        c = self.controller
        self.banner.set_view(banner_view(c.state, c.assessment))
        self.vitals_table.set_rows(vital_rows(c.store.latest_by_type(), c.assessment))
        self.alarm_table.set_rows(alarm_rows(c.history.events))

    def on_mute(self) -> None:
        if self.controller.mute():
            self.statusBar().showMessage("Alarm muted until the next qualifying reading", 5000)

    def on_escalate(self) -> None:
        try:
            result = self.controller.escalate()
        except EscalationNotAllowed as e:
            logger.warning("escalation rejected: %s", e)
            result = None
        if result is None:
            self.statusBar().showMessage("Escalation is only available during an emergency", 5000)
            return
        self.statusBar().showMessage(f"Escalation sent to {result.message.destination}", 5000)

    def closeEvent(self, event) -> None:
        self.timer.stop()
        self.controller.close()
        super().closeEvent(event)
