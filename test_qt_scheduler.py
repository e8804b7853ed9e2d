#!/usr/bin/env python3
"""Tests for the Qt autosave bridge."""

import pytest

QtCore = pytest.importorskip("PySide6.QtCore")

from core.config import ConfigManager  # noqa: E402
from core.layout.document import LayoutSession  # noqa: E402
from core.layout.models import Manuscript  # noqa: E402
from gui.layout.autosave_timer import AutosaveNotifier, QtTimerScheduler  # noqa: E402


@pytest.fixture(scope="module")
def qt_app():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


def wait_until(app, predicate, timeout_ms=2000):
    timer = QtCore.QElapsedTimer()
    timer.start()
    while not predicate() and timer.elapsed() < timeout_ms:
        app.processEvents(QtCore.QEventLoop.ProcessEventsFlag.AllEvents, 20)
    return predicate()


def make_session():
    return LayoutSession(Manuscript.from_dict({"title": "Qt", "chapters": [{"title": "One"}]}))


def test_single_shot_fires_once(qt_app):
    calls = []
    handle = QtTimerScheduler().schedule(10, lambda: calls.append(1))
    assert wait_until(qt_app, lambda: calls)
    wait_until(qt_app, lambda: len(calls) > 1, timeout_ms=100)
    assert calls == [1]
    handle.cancel()


def test_cancel_prevents_callback(qt_app):
    calls = []
    handle = QtTimerScheduler().schedule(20, lambda: calls.append(1))
    handle.cancel()
    assert handle.active is False
    assert not wait_until(qt_app, lambda: calls, timeout_ms=150)


def test_notifier_autosaves_and_emits(qt_app, tmp_path):
    config = ConfigManager(config_dir=tmp_path)
    config.set_autosave_delay_ms(10)
    saved = []
    session = make_session()
    notifier = AutosaveNotifier(session, lambda snapshot: saved.append(snapshot) or True, config)

    dirty_events = []
    save_events = []
    notifier.dirtyChanged.connect(dirty_events.append)
    notifier.saveFinished.connect(lambda ok, error: save_events.append((ok, error)))

    session.set_columns(2)
    assert dirty_events == [True]
    assert wait_until(qt_app, lambda: save_events)
    assert save_events == [(True, "")]
    assert dirty_events == [True, False]
    assert saved == [session.state]
    notifier.shutdown(force_save=False)
