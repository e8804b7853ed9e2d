"""Constants and default values for Folio."""

import os
import platform
from pathlib import Path

# Application metadata
APP_NAME = "Folio"
VERSION = "0.4.0"
__version__ = VERSION
__author__ = "Folio Contributors"
__email__ = "dev@folio-books.org"
__license__ = "MIT"
__copyright__ = "Copyright 2025 Folio Contributors"

# History
HISTORY_LIMIT = 50

# Autosave
AUTOSAVE_DELAY_MS = 30_000

# Freeform canvas geometry (percent of the page)
MIN_IMAGE_SIZE = 10.0
DEFAULT_IMAGE_X = 25.0
DEFAULT_IMAGE_Y = 25.0
DEFAULT_IMAGE_WIDTH = 50.0
DEFAULT_IMAGE_HEIGHT = 40.0

# Layout bounds
MIN_COLUMNS = 1
MAX_COLUMNS = 4
HEADER_FOOTER_HEIGHT_RANGE = (5, 30)  # mm, editor slider range
HEADER_FOOTER_FONT_RANGE = (8, 16)  # pt, editor slider range

# Page-number estimate used by the table of contents: index * 2 + offset
TOC_PAGE_STRIDE = 2
TOC_PAGE_OFFSET = 5

# Preview defaults
PREVIEW_PAGE_SIZE = (148, 210)  # A5 in mm, used for aspect ratio only
PREVIEW_MAX_WIDTH = 512
PREVIEW_MAX_HEIGHT = 512

# Project files
PROJECT_FILE_EXTENSION = ".folio.json"
PROJECT_SCHEMA_VERSION = "1.0"


def get_user_data_dir() -> Path:
    """Get platform-specific user data directory for Folio.

    Returns:
        Path to the user data directory where configuration, logs, and saved
        projects are stored.
    """
    override = os.getenv("FOLIO_CONFIG_DIR")
    if override:
        return Path(override)

    system = platform.system()
    home = Path.home()

    if system == "Windows":
        base = Path(os.getenv("APPDATA", home / "AppData" / "Roaming"))
        return base / APP_NAME
    elif system == "Darwin":  # macOS
        return home / "Library" / "Application Support" / APP_NAME
    else:  # Linux/Unix
        base = Path(os.getenv("XDG_CONFIG_HOME", home / ".config"))
        return base / APP_NAME
