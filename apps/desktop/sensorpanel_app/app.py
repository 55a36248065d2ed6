"""Desktop window that presents poller outcomes."""

from __future__ import annotations

import sys
from dataclasses import asdict

from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QApplication, QMainWindow, QTreeWidget, QTreeWidgetItem

from sensorpanel_core import AppConfig, PollOutcome, Poller, load_config
from sensorpanel_core.logging_setup import get_logger, install_crash_hooks
from sensorpanel_telemetry import Snapshot


# attribute -> (label, unit)
READING_LABELS: dict[str, tuple[str, str]] = {
    "voltage_core": ("Core voltage", "V"),
    "voltage_soc": ("SoC voltage", "V"),
    "current_core": ("Core current", "A"),
    "current_soc": ("SoC current", "A"),
    "temp_die": ("Die temperature", "°C"),
    "temp_ctl": ("Control temperature", "°C"),
    "temp_ccd1": ("CCD1 temperature", "°C"),
    "temp_ccd2": ("CCD2 temperature", "°C"),
}


def snapshot_rows(snapshot: Snapshot, show_cores: bool = True) -> list[tuple[str, list[tuple[str, str]]]]:
    """Flatten a snapshot into ``(group, [(name, value)])`` rows for display."""
    if snapshot.cpu is None:
        return []

    groups: list[tuple[str, list[tuple[str, str]]]] = []
    temp = snapshot.cpu.temperature
    readings = []
    for attr, value in asdict(temp).items():
        label, unit = READING_LABELS.get(attr, (attr, ""))
        readings.append((label, f"{value:.3f} {unit}".rstrip()))
    groups.append((f"CPU ({temp.family})", readings))

    if show_cores:
        cores = [(f"Core {i}", f"{core.freq_mhz:.0f} MHz") for i, core in enumerate(snapshot.cpu.cores)]
        groups.append(("Core clocks", cores))
    return groups


class OutcomeBridge(QObject):
    """Carries outcomes from the poller thread to the GUI thread."""

    outcomeReady = Signal(object)


class SensorWindow(QMainWindow):
    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self.config = config
        self.logger = get_logger("app")

        self.setWindowTitle("Sensors")
        self.resize(config.ui.window_width, config.ui.window_height)

        self.tree = QTreeWidget(self)
        self.tree.setColumnCount(2)
        self.tree.setHeaderLabels(["Sensor", "Value"])
        self.setCentralWidget(self.tree)
        self.statusBar().showMessage("Waiting for first reading")

        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        self.addAction(quit_action)

        self.bridge = OutcomeBridge(self)
        self.bridge.outcomeReady.connect(self.show_outcome)
        self.poller = Poller(
            deliver=self.bridge.outcomeReady.emit,
            suppress_repeated_errors=config.reporting.suppress_repeated_errors,
        )

    @Slot(object)
    def show_outcome(self, outcome: PollOutcome) -> None:
        if outcome.error is not None:
            # Keep the last good readings on screen.
            self.logger.debug("showing acquisition error %s", outcome.error.kind)
            self.statusBar().showMessage(f"{outcome.error.kind}: {outcome.error}")
            return
        if outcome.snapshot is None:
            return

        self.tree.clear()
        for group, rows in snapshot_rows(outcome.snapshot, self.config.ui.show_core_list):
            parent = QTreeWidgetItem(self.tree, [group, ""])
            for name, value in rows:
                QTreeWidgetItem(parent, [name, value])
            parent.setExpanded(True)
        self.tree.resizeColumnToContents(0)
        self.logger.debug("rendered %d groups", self.tree.topLevelItemCount())
        self.statusBar().showMessage(f"Updated in {outcome.duration_s * 1000:.0f} ms")

    def closeEvent(self, event) -> None:  # noqa: N802
        self.poller.stop()
        super().closeEvent(event)


def run_gui() -> int:
    install_crash_hooks()
    logger = get_logger()
    config = load_config()

    app = QApplication(sys.argv)
    app.setApplicationName("SensorPanel")

    window = SensorWindow(config)
    window.show()
    window.poller.start()

    exit_code = app.exec()
    window.poller.stop()
    logger.info("app shutdown", extra={"event": "shutdown"})
    return int(exit_code)
