"""
Centralized logging configuration for Folio.
Logs errors to both console and file for easy debugging and error reporting.
"""

import logging
import logging.handlers
from pathlib import Path
from datetime import datetime
import platform
import sys
from typing import Dict, Optional

from .constants import APP_NAME, VERSION, get_user_data_dir

ROOT_LOGGER_NAME = "folio"


def get_log_dir() -> Path:
    """Directory holding rotating log files."""
    return get_user_data_dir() / "logs"


def setup_logging(log_level=logging.INFO, log_to_file=True, log_dir: Optional[Path] = None):
    """
    Set up comprehensive logging for the entire application.

    Args:
        log_level: Minimum level to log (default: INFO)
        log_to_file: Whether to also log to file (default: True)
        log_dir: Override for the log directory (default: user data dir)

    Returns:
        Path to log file if logging to file, None otherwise
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        '%(levelname)s - %(message)s'
    )

    # Console handler (simple format for user)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors in console
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    # Capture Python warnings to the log
    logging.captureWarnings(True)
    logging.getLogger('py.warnings').setLevel(logging.WARNING)

    if not log_to_file:
        return None

    log_dir = Path(log_dir) if log_dir else get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"folio_{timestamp}.log"

    # File handler (detailed format for debugging)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(file_handler)

    root_logger.info("=" * 60)
    root_logger.info(f"{APP_NAME} {VERSION} started")
    root_logger.info(f"Python: {sys.executable}")
    root_logger.info(f"Version: {sys.version}")
    root_logger.info(f"Platform: {platform.platform()}")
    root_logger.info(f"Log file: {log_file}")
    root_logger.info("=" * 60)

    # Log Qt environment if available; the autosave timer bridge depends on it
    try:
        import PySide6  # type: ignore
        from PySide6 import QtCore  # type: ignore
        root_logger.info(f"PySide6 version: {getattr(PySide6, '__version__', 'unknown')}")
        root_logger.info(f"Qt version: {QtCore.qVersion()}")
    except ImportError as e:
        root_logger.info(f"PySide6 not detected at startup: {e}")

    return log_file


def get_error_report_info() -> Dict[str, Optional[str]]:
    """
    Get information for error reporting.

    Returns:
        Dictionary with system info and recent log location
    """
    log_dir = get_log_dir()

    # Find most recent log file
    recent_log = None
    if log_dir.exists():
        log_files = sorted(log_dir.glob("folio_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
        if log_files:
            recent_log = log_files[0]

    return {
        "platform": platform.platform(),
        "python_version": sys.version,
        "log_directory": str(log_dir),
        "recent_log": str(recent_log) if recent_log else None,
    }


class LogManager:
    """Hands out loggers namespaced under the application root logger."""

    def __init__(self, root: str = ROOT_LOGGER_NAME):
        self.root = root

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a child logger, e.g. ``get_logger("layout.history")``.

        Args:
            name: Dotted area name below the application root

        Returns:
            Logger named ``<root>.<name>``
        """
        if not name:
            return logging.getLogger(self.root)
        return logging.getLogger(f"{self.root}.{name}")


class ErrorLogger:
    """Context manager for logging exceptions with additional context"""

    def __init__(self, operation_name, logger=None, reraise=True):
        """
        Args:
            operation_name: Description of the operation being performed
            logger: Logger instance to use (default: root logger)
            reraise: Whether to re-raise the exception after logging
        """
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger()
        self.reraise = reraise
        self.error: Optional[BaseException] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.error = exc_val
            self.logger.error(
                f"Error during {self.operation_name}: {exc_type.__name__}: {exc_val}",
                exc_info=True
            )
            if not self.reraise:
                return True  # Suppress exception
        return False
