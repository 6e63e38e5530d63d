"""Tray app runtime: timer-driven ticks rendered into the system tray icon."""

from __future__ import annotations

import sys

from PySide6.QtCore import QObject, QTimer
from PySide6.QtGui import QAction, QIcon, QPixmap
from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from cpuhz_core import AppConfig, FrequencyMonitor, TickResult, load_config
from cpuhz_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from cpuhz_renderer import IconRenderer

from .cli import build_monitor


def _icon_from_png(data: bytes) -> QIcon:
    pixmap = QPixmap()
    pixmap.loadFromData(data, "PNG")
    return QIcon(pixmap)


class TrayController(QObject):
    """Drives one FrequencyMonitor from a QTimer and mirrors it into the tray."""

    def __init__(self, tray: QSystemTrayIcon, config: AppConfig, monitor: FrequencyMonitor | None = None) -> None:
        super().__init__()
        self.config = config
        self.logger = get_logger()
        self.tray = tray
        self.monitor = monitor or build_monitor(config)
        self.renderer = IconRenderer(size=config.icon.size, font_path=config.icon.font_path)
        self.last_result: TickResult | None = None

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.tick)

    def start(self) -> None:
        self.monitor.start()
        self.tick()
        self._timer.start(self.config.sampler.interval_ms)

    def tick(self) -> None:
        result = self.monitor.tick()
        self.last_result = result
        try:
            png = self.renderer.render_png(result.icon_spec)
        except Exception:
            self.logger.exception("icon render failed", extra={"event": "icon_render_failed"})
            return
        self.tray.setIcon(_icon_from_png(png))
        self.tray.setToolTip(result.tooltip)

    def shutdown(self) -> None:
        self._timer.stop()
        self.monitor.stop()


def run_tray() -> int:
    config = load_config()
    configure_logging(keep_files=config.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    app = QApplication(sys.argv)
    app.setApplicationName("CpuHz")
    app.setQuitOnLastWindowClosed(False)

    if not QSystemTrayIcon.isSystemTrayAvailable():
        logger.error("system tray unavailable", extra={"event": "tray_unavailable"})
        return 1

    tray = QSystemTrayIcon(app)
    tray.setToolTip("CPU Hz tray")
    menu = QMenu()
    exit_action = QAction("Exit", menu)
    exit_action.triggered.connect(app.quit)
    menu.addAction(exit_action)
    tray.setContextMenu(menu)

    controller = TrayController(tray, config)
    controller.start()
    tray.show()

    exit_code = app.exec()
    controller.shutdown()
    tray.hide()
    logger.info("app shutdown", extra={"event": "shutdown"})
    return int(exit_code)
