from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QApplication

from vitalalert.bootstrap import build_app_system
from vitalalert.transport.ndjson import decode_lines
from vitalalert.ui.main_window import MainWindow
from vitalalert.ui.qt_audio import qt_output_factory, qt_timer_factory
from vitalalert.ui.theme import APP_QSS
from vitalalert.ui.workers.reading_replayer import ReadingReplayer

logger = logging.getLogger(__name__)


def open_url(url: str) -> bool:
    """Open ``url`` with the desktop's default handler."""
    return QDesktopServices.openUrl(QUrl(url))


def parse_args(argv):
    p = argparse.ArgumentParser(prog="vitalalert", description="Vital-sign monitor and alarm")
    p.add_argument("--config", help="path to config.yaml")
    p.add_argument("--replay", help="NDJSON file of readings to feed into the monitor")
    p.add_argument("--interval-ms", type=int, default=1000, help="delay between replayed readings")
    p.add_argument("--loop", action="store_true", help="restart the replay after the last reading")
    return p.parse_args(argv)


def main() -> None:
    """
    Start the desktop UI.

    Notes
    -----
    - Loads configuration from `config.yaml` by default.
    - Optional CLI usage:
        python -m vitalalert.dev.run_app --config path/to/config.yaml --replay readings.ndjson
    """
    args = parse_args(sys.argv[1:])
    app = QApplication(sys.argv)
    app.setStyleSheet(APP_QSS)

    wiring = build_app_system(
        config_path=args.config,
        timer_factory=qt_timer_factory,
        output_factory=qt_output_factory,
        url_opener=open_url,
    )

    win = MainWindow(wiring.controller)
    win.show()

    replayer = None
    if args.replay:
        with Path(args.replay).open("r", encoding="utf-8") as f:
            readings = decode_lines(f)
        replayer = ReadingReplayer(wiring.store, readings, interval_ms=args.interval_ms, loop=args.loop)
        replayer.start()

    def _stop_all() -> None:
        if replayer is not None:
            replayer.stop()
        wiring.shutdown()

    app.aboutToQuit.connect(_stop_all)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
