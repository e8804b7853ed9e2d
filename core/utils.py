"""Utility functions for Folio."""

import re
import string
from datetime import datetime
from pathlib import Path

from .constants import PROJECT_FILE_EXTENSION


def sanitize_filename(name: str, max_len: int = 100) -> str:
    """
    Sanitize a string for use as a filename.

    Args:
        name: String to sanitize
        max_len: Maximum length of filename

    Returns:
        Sanitized filename string
    """
    valid_chars = f"-_.() {string.ascii_letters}{string.digits}"
    sanitized = "".join(c if c in valid_chars else "_" for c in name)

    # Collapse runs of spaces/underscores
    sanitized = re.sub(r"[_\s]+", "_", sanitized)

    if len(sanitized) > max_len:
        sanitized = sanitized[:max_len]

    # Remove trailing dots/spaces (Windows compatibility)
    sanitized = sanitized.rstrip(". _")

    if not sanitized:
        sanitized = "untitled"

    return sanitized


def project_file_name(title: str) -> str:
    """Build the on-disk file name for a book project."""
    return f"{sanitize_filename(title, max_len=80)}{PROJECT_FILE_EXTENSION}"


def generate_timestamp() -> str:
    """
    Generate an ISO-8601 timestamp for saved snapshots.

    Returns:
        Timestamp such as 2025-01-31T18:04:11
    """
    return datetime.now().replace(microsecond=0).isoformat()


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def ensure_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if needed and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path
