#!/usr/bin/env python3
"""Tests for dirty tracking and the autosave coordinator."""

from core.layout.autosave import AutosaveCoordinator, SaveStatus
from core.layout.document import LayoutSession
from core.layout.errors import PersistenceError
from core.layout.models import Manuscript


class FakeHandle:
    def __init__(self, scheduler, delay_ms, callback):
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Collects scheduled callbacks; ``fire`` runs the live one."""

    def __init__(self):
        self.handles = []

    def schedule(self, delay_ms, callback):
        handle = FakeHandle(self, delay_ms, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def fire(self):
        handle = self.pending[-1]
        handle.cancelled = True
        handle.callback()


class RecordingPersist:
    def __init__(self, fail=False):
        self.fail = fail
        self.saved = []

    def __call__(self, snapshot):
        if self.fail:
            raise PersistenceError("disk full")
        self.saved.append(snapshot)
        return True


def make_session():
    manuscript = Manuscript.from_dict({
        "title": "Autosave",
        "chapters": [{"title": "One"}, {"title": "Two"}],
    })
    return LayoutSession(manuscript)


def make_coordinator(persist=None, **kwargs):
    session = make_session()
    scheduler = FakeScheduler()
    persist = persist or RecordingPersist()
    coordinator = AutosaveCoordinator(session, persist, scheduler, **kwargs)
    session.add_listener(coordinator.notify_changed)
    return session, scheduler, persist, coordinator


def test_change_starts_timer_with_default_delay():
    session, scheduler, _, coordinator = make_coordinator()
    assert coordinator.status == SaveStatus.CLEAN
    session.set_columns(2)
    assert coordinator.status == SaveStatus.DIRTY
    assert coordinator.timer_active
    assert scheduler.pending[-1].delay_ms == 30000


def test_each_change_restarts_quiet_period():
    session, scheduler, _, _ = make_coordinator()
    session.set_columns(2)
    session.set_columns(3)
    assert len(scheduler.handles) == 2
    assert scheduler.handles[0].cancelled
    assert len(scheduler.pending) == 1


def test_timer_saves_dirty_state():
    session, scheduler, persist, coordinator = make_coordinator()
    session.set_columns(2)
    scheduler.fire()
    assert persist.saved == [session.state]
    assert session.is_dirty() is False
    assert coordinator.last_result.success
    assert coordinator.last_result.autosave


def test_timer_skips_clean_state():
    session, scheduler, persist, _ = make_coordinator()
    session.set_columns(2)
    session.undo()
    scheduler.fire()
    assert persist.saved == []


def test_failure_keeps_dirty_and_retries():
    persist = RecordingPersist(fail=True)
    session, scheduler, _, coordinator = make_coordinator(persist)
    results = []
    coordinator.add_listener(results.append)

    session.set_columns(2)
    scheduler.fire()
    assert session.is_dirty() is True
    assert results[-1].success is False
    assert "disk full" in results[-1].error
    # Rescheduled for another attempt
    assert coordinator.timer_active

    persist.fail = False
    scheduler.fire()
    assert results[-1].success is True
    assert session.is_dirty() is False


def test_falsy_persist_result_is_failure():
    session, scheduler, _, coordinator = make_coordinator(lambda snapshot: False)
    session.set_columns(2)
    result = coordinator.save_now()
    assert result.success is False
    assert session.is_dirty() is True


def test_manual_save_restarts_timer():
    session, scheduler, persist, coordinator = make_coordinator()
    session.set_columns(2)
    first = scheduler.pending[-1]
    result = coordinator.save_now()
    assert result.success and not result.autosave
    assert first.cancelled
    assert coordinator.timer_active
    assert len(persist.saved) == 1


def test_edit_during_save_stays_dirty():
    session = make_session()
    scheduler = FakeScheduler()

    def persist(snapshot):
        # The user keeps typing while the write is in progress
        session.set_columns(3)
        return True

    coordinator = AutosaveCoordinator(session, persist, scheduler)
    session.set_columns(2)
    assert coordinator.save_now().success
    assert session.is_dirty() is True


def test_single_save_in_flight():
    session = make_session()
    scheduler = FakeScheduler()
    nested = []

    def persist(snapshot):
        nested.append(coordinator.save_now())
        return True

    coordinator = AutosaveCoordinator(session, persist, scheduler)
    session.set_columns(2)
    coordinator.save_now()
    assert nested[0].skipped is True
    assert nested[0].success is False


def test_disabled_autosave():
    session, scheduler, persist, coordinator = make_coordinator(enabled=False)
    session.set_columns(2)
    assert scheduler.pending == []
    coordinator.enabled = True
    assert coordinator.timer_active


def test_close_flushes_when_asked():
    session, scheduler, persist, coordinator = make_coordinator()
    session.set_columns(2)
    assert coordinator.close() is None
    assert persist.saved == []
    assert scheduler.pending == []

    result = coordinator.close(force_save=True)
    assert result.success
    assert persist.saved == [session.state]
