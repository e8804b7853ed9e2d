"""Core functionality for Folio."""

from .config import ConfigManager
from .constants import (
    APP_NAME,
    VERSION,
    __version__,
    __author__,
    __email__,
    __license__,
    __copyright__,
    get_user_data_dir,
)
from .utils import (
    sanitize_filename,
    project_file_name,
    generate_timestamp,
    format_file_size,
)

__all__ = [
    "ConfigManager",
    "APP_NAME",
    "VERSION",
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",
    "get_user_data_dir",
    "sanitize_filename",
    "project_file_name",
    "generate_timestamp",
    "format_file_size",
]
