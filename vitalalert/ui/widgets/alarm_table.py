from __future__ import annotations

from typing import List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFrame,
    QHBoxLayout,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from vitalalert.ui.adapters.banner_view import AlarmRow


class AlarmTable(QFrame):
    """Alarm log: one row per alarm transition, newest first."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        title = QLabel("Alarm Log")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")

        header = QHBoxLayout()
        header.addWidget(title)
        header.addStretch(1)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Time", "Transition", "Severity", "Message"])
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addLayout(header)
        layout.addWidget(self.table)

    def set_rows(self, rows: List[AlarmRow]) -> None:
        self.table.setRowCount(len(rows))
        for i, (t, transition, severity, msg) in enumerate(rows):
            self._item(i, 0, t)
            self._item(i, 1, transition)
            self._item(i, 2, severity)
            self._item(i, 3, msg)
        self.table.resizeColumnsToContents()

    def _item(self, r: int, c: int, text: str) -> None:
        it = QTableWidgetItem(text)
        it.setFlags(it.flags() & ~Qt.ItemIsEditable)
        if c in (0, 1, 2):
            it.setTextAlignment(Qt.AlignCenter)
        self.table.setItem(r, c, it)
