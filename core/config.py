"""Configuration management for Folio."""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .constants import (
    AUTOSAVE_DELAY_MS,
    HISTORY_LIMIT,
    PREVIEW_MAX_HEIGHT,
    PREVIEW_MAX_WIDTH,
    get_user_data_dir,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages application configuration and persistence."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration manager."""
        self.config_dir = Path(config_dir) if config_dir else self._get_config_dir()
        self.config_path = self.config_dir / "config.json"
        self.config = self._load_config()

    def _get_config_dir(self) -> Path:
        """Get platform-specific configuration directory."""
        return get_user_data_dir()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                return json.loads(self.config_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable config file {self.config_path}: {e}")
                return {}
        return {}

    def save(self) -> None:
        """Save current configuration to disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            json.dumps(self.config, indent=2),
            encoding="utf-8"
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self.config[key] = value

    # Layout module settings

    def get_layout_config(self) -> Dict[str, Any]:
        """Get layout module configuration."""
        return self.config.get("layout", {})

    def set_layout_config(self, layout_config: Dict[str, Any]) -> None:
        """Set layout module configuration."""
        self.config["layout"] = layout_config

    def _set_layout_value(self, key: str, value: Any) -> None:
        layout_config = self.get_layout_config()
        layout_config[key] = value
        self.set_layout_config(layout_config)

    def get_autosave_enabled(self) -> bool:
        """Whether the editor autosaves after a quiet period."""
        return bool(self.get_layout_config().get("autosave_enabled", True))

    def set_autosave_enabled(self, enabled: bool) -> None:
        self._set_layout_value("autosave_enabled", bool(enabled))

    def get_autosave_delay_ms(self) -> int:
        """Quiet period before an autosave fires, in milliseconds."""
        value = self.get_layout_config().get("autosave_delay_ms", AUTOSAVE_DELAY_MS)
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            logger.warning(f"Invalid autosave_delay_ms {value!r}, using default")
            return AUTOSAVE_DELAY_MS

    def set_autosave_delay_ms(self, delay_ms: int) -> None:
        self._set_layout_value("autosave_delay_ms", max(0, int(delay_ms)))

    def get_history_limit(self) -> int:
        """Maximum number of undo snapshots kept per session."""
        value = self.get_layout_config().get("history_limit", HISTORY_LIMIT)
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            logger.warning(f"Invalid history_limit {value!r}, using default")
            return HISTORY_LIMIT

    def set_history_limit(self, limit: int) -> None:
        self._set_layout_value("history_limit", max(1, int(limit)))

    def get_templates_dir(self) -> Path:
        """Get directory for user layout templates."""
        custom_path = self.get_layout_config().get("templates_dir")
        if custom_path:
            return Path(custom_path).expanduser()
        return self.config_dir / "templates" / "layouts"

    def get_projects_dir(self) -> Path:
        """Get directory where book projects are saved."""
        custom_path = self.get_layout_config().get("projects_dir")
        if custom_path:
            return Path(custom_path).expanduser()
        return self.config_dir / "projects"

    def get_preview_size(self) -> tuple:
        """Bounding box (width, height) for spread preview thumbnails."""
        size = self.get_layout_config().get("preview_size", [PREVIEW_MAX_WIDTH, PREVIEW_MAX_HEIGHT])
        try:
            width, height = int(size[0]), int(size[1])
        except (TypeError, ValueError, IndexError):
            logger.warning(f"Invalid preview_size {size!r}, using default")
            return (PREVIEW_MAX_WIDTH, PREVIEW_MAX_HEIGHT)
        return (max(16, width), max(16, height))
