"""
Dirty tracking and autosave.

Every change restarts a quiet-period timer (30 s by default). When it fires
and the document differs from the last saved snapshot, the snapshot is
handed to the persistence collaborator and, on success, recorded as saved.
A manual save runs immediately and restarts the timer. Failures leave the
document dirty, are reported to listeners, and are retried on the next
timer tick. At most one save is in flight at a time.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional

from core.constants import AUTOSAVE_DELAY_MS
from core.logging_config import LogManager

logger = LogManager().get_logger("layout.autosave")


class SaveStatus(str, Enum):
    CLEAN = "Clean"
    DIRTY = "Dirty"
    SAVING = "Saving"


@dataclass(frozen=True)
class SaveResult:
    success: bool
    error: Optional[str] = None
    autosave: bool = False
    skipped: bool = False
    saved_at: Optional[datetime] = None


class AutosaveCoordinator:
    """
    Couples a document session to a persistence collaborator.

    Args:
        session: Object with ``state``, ``is_dirty()`` and ``mark_saved(state)``
        persist: Callable taking the state snapshot; returns truthy on
                 success, falsy or raises on failure
        scheduler: Object with ``schedule(delay_ms, callback)`` returning a
                   handle that has ``cancel()``
        delay_ms: Quiet period before an autosave
        enabled: Whether the timer runs at all
    """

    def __init__(self, session, persist: Callable[[Any], Any], scheduler,
                 delay_ms: int = AUTOSAVE_DELAY_MS, enabled: bool = True):
        self.session = session
        self.persist = persist
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self._enabled = enabled
        self._timer = None
        self._in_flight = False
        self._listeners: List[Callable[[SaveResult], None]] = []
        self.last_result: Optional[SaveResult] = None

    # Listeners

    def add_listener(self, callback: Callable[[SaveResult], None]) -> None:
        self._listeners.append(callback)

    def _notify(self, result: SaveResult) -> None:
        self.last_result = result
        for callback in list(self._listeners):
            callback(result)

    # Timer

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)
        if not self._enabled:
            self._cancel_timer()
        elif self.session.is_dirty():
            self._restart_timer()

    @property
    def timer_active(self) -> bool:
        return self._timer is not None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _restart_timer(self) -> None:
        self._cancel_timer()
        if self._enabled:
            self._timer = self.scheduler.schedule(self.delay_ms, self._on_timer)

    def notify_changed(self) -> None:
        """Call after every document change; restarts the quiet period."""
        self._restart_timer()

    def _on_timer(self) -> None:
        self._timer = None
        if not self.session.is_dirty():
            logger.debug("Autosave timer fired with no unsaved changes")
            return
        self._save(autosave=True)

    # Saving

    @property
    def status(self) -> SaveStatus:
        if self._in_flight:
            return SaveStatus.SAVING
        return SaveStatus.DIRTY if self.session.is_dirty() else SaveStatus.CLEAN

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def save_now(self) -> SaveResult:
        """Persist immediately and restart the autosave timer."""
        self._cancel_timer()
        result = self._save(autosave=False)
        if result.success:
            self._restart_timer()
        return result

    def _save(self, autosave: bool) -> SaveResult:
        if self._in_flight:
            logger.info("Save requested while another is in flight, rescheduling")
            self._restart_timer()
            return SaveResult(success=False, error="A save is already in progress", autosave=autosave, skipped=True)

        snapshot = self.session.state
        self._in_flight = True
        try:
            ok = self.persist(snapshot)
            error = None if ok else "Persistence collaborator reported failure"
        except Exception as e:
            logger.error(f"{'Autosave' if autosave else 'Save'} failed: {e}", exc_info=True)
            ok, error = False, str(e) or type(e).__name__
        finally:
            self._in_flight = False

        if ok:
            self.session.mark_saved(snapshot)
            result = SaveResult(success=True, autosave=autosave, saved_at=datetime.now())
            logger.info(f"{'Autosaved' if autosave else 'Saved'} document")
        else:
            result = SaveResult(success=False, error=error, autosave=autosave)
            logger.warning(f"Save failed, document stays dirty: {error}")
            # Retry on the next quiet period
            self._restart_timer()

        self._notify(result)
        return result

    def close(self, force_save: bool = False) -> Optional[SaveResult]:
        """Stop the timer; optionally flush unsaved changes first."""
        self._cancel_timer()
        result = None
        if force_save and self.session.is_dirty():
            result = self._save(autosave=False)
            self._cancel_timer()
        return result
