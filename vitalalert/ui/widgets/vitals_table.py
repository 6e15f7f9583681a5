from __future__ import annotations

from typing import List

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor
from PySide6.QtWidgets import QFrame, QLabel, QTableWidget, QTableWidgetItem, QVBoxLayout

from vitalalert.domain.models import SeverityLevel
from vitalalert.ui.adapters.banner_view import VitalRow
from vitalalert.ui.theme import COLOR_TEXT_MUTED, severity_color


class VitalsTable(QFrame):
    """
    Table of the latest reading per vital (name, value, timestamp, severity).
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        title = QLabel("Latest Vitals")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Vital", "Latest Value", "Timestamp", "Severity"])
        self.table.verticalHeader().setVisible(False)
        self.table.setAlternatingRowColors(True)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setSelectionMode(QTableWidget.SingleSelection)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addWidget(title)
        layout.addWidget(self.table)

    def set_rows(self, rows: List[VitalRow]) -> None:
        self.table.setRowCount(len(rows))

        for i, (name, value, ts, severity) in enumerate(rows):
            self._set_item(i, 0, name)
            self._set_item(i, 1, value)
            self._set_item(i, 2, ts)
            self._set_item(i, 3, severity, severity=True)

        self.table.resizeColumnsToContents()

    def _set_item(self, row: int, col: int, text: str, severity: bool = False) -> None:
        item = QTableWidgetItem(text)
        item.setFlags(item.flags() & ~Qt.ItemIsEditable)

        if severity:
            item.setTextAlignment(Qt.AlignCenter)
            item.setForeground(Qt.white)
            try:
                color = severity_color(SeverityLevel(text.upper()))
            except ValueError:
                color = COLOR_TEXT_MUTED
            item.setBackground(QBrush(QColor(color)))

        self.table.setItem(row, col, item)
