"""
Bounded undo/redo history with a saved-snapshot baseline.

Snapshots are stored as-is, so callers must push immutable values (the
frozen layout models qualify). ``is_dirty`` compares the current snapshot
with the last committed one by value.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from core.constants import HISTORY_LIMIT
from core.logging_config import LogManager

logger = LogManager().get_logger("layout.history")

T = TypeVar("T")


class HistoryManager(Generic[T]):
    """Manages undo/redo history for a document (max 50 levels by default)"""

    def __init__(self, initial: T, max_size: int = HISTORY_LIMIT):
        if max_size < 1:
            raise ValueError("History size must be at least 1")
        self.max_size = max_size
        self.history: List[T] = [initial]
        self.current_index: int = 0
        self.saved: T = initial

    def __len__(self) -> int:
        return len(self.history)

    @property
    def current(self) -> T:
        return self.history[self.current_index]

    def push(self, snapshot: T) -> None:
        """Add a new snapshot, discarding any redo tail."""
        # If we're not at the end of history, discard everything after current position
        if self.current_index < len(self.history) - 1:
            self.history = self.history[:self.current_index + 1]

        self.history.append(snapshot)

        # Trim to max size if needed (remove oldest)
        if len(self.history) > self.max_size:
            dropped = len(self.history) - self.max_size
            self.history = self.history[-self.max_size:]
            logger.debug(f"History full, evicted {dropped} oldest snapshot(s)")

        self.current_index = len(self.history) - 1

    def can_undo(self) -> bool:
        """Check if undo is available"""
        return self.current_index > 0

    def can_redo(self) -> bool:
        """Check if redo is available"""
        return self.current_index < len(self.history) - 1

    def undo(self) -> Optional[T]:
        """Step back one snapshot; returns it, or None at the oldest entry"""
        if self.can_undo():
            self.current_index -= 1
            return self.history[self.current_index]
        return None

    def redo(self) -> Optional[T]:
        """Step forward one snapshot; returns it, or None at the newest entry"""
        if self.can_redo():
            self.current_index += 1
            return self.history[self.current_index]
        return None

    def is_dirty(self) -> bool:
        """True when the current snapshot differs from the last committed one"""
        return self.current != self.saved

    def commit(self, snapshot: Optional[T] = None) -> None:
        """Record a snapshot as saved (default: the current one). Adds no history entry."""
        self.saved = self.current if snapshot is None else snapshot

    def reset(self, snapshot: T) -> None:
        """Drop all history and start over from ``snapshot`` as saved state."""
        self.history = [snapshot]
        self.current_index = 0
        self.saved = snapshot

    def stats(self) -> Dict[str, Any]:
        return {
            "length": len(self.history),
            "current_index": self.current_index,
            "max_size": self.max_size,
            "dirty": self.is_dirty(),
        }
