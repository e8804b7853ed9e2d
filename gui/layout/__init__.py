"""Qt bridges for the layout editor."""

from .autosave_timer import AutosaveNotifier, QtTimerScheduler

__all__ = ["AutosaveNotifier", "QtTimerScheduler"]
