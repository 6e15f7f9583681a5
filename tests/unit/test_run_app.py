"""
Unit tests for vitalalert.dev.run_app.

The Qt classes are replaced with MagicMock so no display is needed. Covers:
- escalation deep links are opened through QDesktopServices
- the desktop entry point hands that opener to build_app_system
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

pytest.importorskip("PySide6.QtWidgets")

from vitalalert.dev import run_app  # noqa: E402


def test_open_url_uses_desktop_services(monkeypatch) -> None:
    services = MagicMock()
    services.openUrl.return_value = True
    monkeypatch.setattr(run_app, "QDesktopServices", services)

    assert run_app.open_url("https://wa.me/919999999999?text=hi") is True

    (qurl,), _ = services.openUrl.call_args
    assert qurl.toString() == "https://wa.me/919999999999?text=hi"


def test_main_wires_desktop_url_opener(monkeypatch) -> None:
    build = MagicMock()
    monkeypatch.setattr(run_app, "build_app_system", build)
    monkeypatch.setattr(run_app, "QApplication", MagicMock())
    monkeypatch.setattr(run_app, "MainWindow", MagicMock())
    monkeypatch.setattr(run_app.sys, "argv", ["vitalalert"])

    with pytest.raises(SystemExit):
        run_app.main()

    assert build.call_args.kwargs["url_opener"] is run_app.open_url
