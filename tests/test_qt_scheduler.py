"""Tests for the Qt timer adapter."""

import os

import pytest

try:
    from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer
    QT_AVAILABLE = True
except ImportError:
    QT_AVAILABLE = False

pytestmark = pytest.mark.skipif(not QT_AVAILABLE, reason="PySide6 not installed")


@pytest.fixture(scope="module")
def app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    return QCoreApplication.instance() or QCoreApplication([])


def run_loop(ms):
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


def test_timer_restart_fires_once(app):
    from notepile.adapters.qt_scheduler import QtScheduler

    fired = []
    timer = QtScheduler().create_timer(30, lambda: fired.append(1))

    timer.start()
    assert timer.is_active()
    run_loop(10)
    timer.start()
    run_loop(200)

    assert fired == [1]
    assert not timer.is_active()


def test_timer_stop(app):
    from notepile.adapters.qt_scheduler import QtScheduler

    fired = []
    timer = QtScheduler().create_timer(20, lambda: fired.append(1))
    timer.start()
    timer.stop()
    run_loop(100)

    assert fired == []


def test_call_later(app):
    from notepile.adapters.qt_scheduler import QtScheduler

    fired = []
    QtScheduler().call_later(10, lambda: fired.append(1))
    run_loop(150)

    assert fired == [1]


def test_disposed_timer_never_fires(app):
    from notepile.adapters.qt_scheduler import QtScheduler

    fired = []
    timer = QtScheduler().create_timer(20, lambda: fired.append(1))
    timer.start()
    timer.dispose()
    timer.dispose()
    run_loop(100)

    assert fired == []
