from typing import Callable

from PySide6.QtCore import QObject, QTimer

from ..core.ports import Scheduler, Timer


class QtTimer(Timer):
    def __init__(self, interval_ms: int, callback: Callable[[], None], parent: QObject | None = None):
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(callback)
        self._callback: Callable[[], None] | None = callback

    def dispose(self) -> None:
        # drop the closure so the entry it captures can be collected
        callback, self._callback = self._callback, None
        if callback is None:
            return
        self._timer.stop()
        self._timer.timeout.disconnect(callback)
        self._timer.deleteLater()

    def start(self) -> None:
        # QTimer.start() on an active timer restarts it
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()


class QtScheduler(Scheduler):
    """Timers on the GUI thread; callbacks run from the Qt event loop."""

    def __init__(self, parent: QObject | None = None):
        self.parent = parent

    def create_timer(self, interval_ms: int, callback: Callable[[], None]) -> QtTimer:
        return QtTimer(interval_ms, callback, self.parent)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        QTimer.singleShot(delay_ms, callback)
