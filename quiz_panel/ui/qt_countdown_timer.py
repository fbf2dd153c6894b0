"""Countdown tick source driven by the Qt event loop."""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer

from quiz_panel.constants.quiz_constants import TICK_INTERVAL_MS
from quiz_panel.core.services.countdown_timer import TickCallback


class QtCountdownTimer:
    """Single-use QTimer wrapper delivering ticks on the GUI thread; ``stop()`` deletes the QTimer."""

    def __init__(self, parent: QObject | None = None, interval_ms: int = TICK_INTERVAL_MS) -> None:
        self._timer: QTimer | None = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)
        self._callback: TickCallback | None = None

    def start(self, callback: TickCallback) -> None:
        if self._timer is None:
            raise RuntimeError("Countdown timer was stopped; create a new one.")
        if self._timer.isActive():
            raise RuntimeError("Countdown timer is already running.")
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        self._callback = None
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def is_active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()
