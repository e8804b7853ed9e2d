"""Qt bridge for the layout autosave coordinator."""

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from core.config import ConfigManager
from core.layout.autosave import AutosaveCoordinator, SaveResult
from core.layout.document import LayoutSession

logger = logging.getLogger(__name__)


class QtTimerHandle:
    """Cancelable handle around a single-shot QTimer."""

    def __init__(self, timer: QTimer):
        self._timer = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtTimerScheduler:
    """Scheduler for AutosaveCoordinator running callbacks on the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None):
        self.parent = parent

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self.parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_ms)))
        timer.timeout.connect(callback)
        timer.start()
        return QtTimerHandle(timer)


class AutosaveNotifier(QObject):
    """
    Wires a LayoutSession to an AutosaveCoordinator and re-emits state
    changes as Qt signals for the editor widgets.
    """

    # Signals
    dirtyChanged = Signal(bool)  # Emitted when unsaved-changes state flips
    saveFinished = Signal(bool, str)  # Success, error message (empty on success)
    historyChanged = Signal(bool, bool)  # can_undo, can_redo

    def __init__(self, session: LayoutSession, persist: Callable, config: Optional[ConfigManager] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.config = config or ConfigManager()
        self.session = session
        self.coordinator = AutosaveCoordinator(
            session,
            persist,
            QtTimerScheduler(self),
            delay_ms=self.config.get_autosave_delay_ms(),
            enabled=self.config.get_autosave_enabled(),
        )
        self._last_dirty = session.is_dirty()
        session.add_listener(self._on_session_changed)
        self.coordinator.add_listener(self._on_save_finished)
        logger.debug(f"Autosave bridge ready (delay={self.coordinator.delay_ms}ms, "
                     f"enabled={self.coordinator.enabled})")

    def _emit_dirty(self) -> None:
        dirty = self.session.is_dirty()
        if dirty != self._last_dirty:
            self._last_dirty = dirty
            self.dirtyChanged.emit(dirty)

    def _on_session_changed(self) -> None:
        self.coordinator.notify_changed()
        self.historyChanged.emit(self.session.can_undo(), self.session.can_redo())
        self._emit_dirty()

    def _on_save_finished(self, result: SaveResult) -> None:
        self.saveFinished.emit(result.success, result.error or "")
        self._emit_dirty()

    def save_now(self) -> SaveResult:
        return self.coordinator.save_now()

    def set_enabled(self, enabled: bool) -> None:
        self.coordinator.enabled = enabled
        self.config.set_autosave_enabled(enabled)

    def shutdown(self, force_save: bool = True) -> Optional[SaveResult]:
        """Stop autosaving, flushing unsaved work by default."""
        return self.coordinator.close(force_save=force_save)
