"""
Page Layout Template Management

Built-in named layouts plus user templates discovered from JSON files.
Template files are validated against ``template_schema.json`` and may
extend another template by key.
"""

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import jsonschema

from core.logging_config import LogManager

from .errors import TemplateError
from .models import LayoutConfiguration

logger = LogManager().get_logger("layout.templates")

SCHEMA_PATH = Path(__file__).parent / "template_schema.json"


# Built-in templates, in the same shape as template files
BUILTIN_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "default": {
        "name": "Default Layout",
        "category": "general",
        "description": "Standard page layout",
        "tags": ["book", "rtl"],
        "layout": {},
    },
    "classic-novel": {
        "name": "Classic Novel",
        "category": "novel",
        "description": "Single column serif text with a running chapter head",
        "tags": ["novel", "fiction", "serif"],
        "layout": {
            "typography": {
                "bodyFont": "Frank Ruhl Libre",
                "bodyFontSize": 11.5,
                "lineHeight": 1.5,
                "headingFont": "Frank Ruhl Libre",
                "headingFontSize": 22,
            },
            "margins": {"top": 25, "bottom": 25, "left": 22, "right": 18},
            "header": {"content": {"left": "", "center": "", "right": "{chapter}"}},
            "footer": {"content": {"left": "", "center": "— {pageNumber} —", "right": ""}},
        },
    },
    "academic": {
        "name": "Academic",
        "category": "nonfiction",
        "description": "Two columns with title and chapter running heads",
        "tags": ["academic", "columns", "nonfiction"],
        "layout": {
            "columns": 2,
            "columnGap": 8,
            "margins": {"top": 20, "bottom": 20, "left": 25, "right": 25},
            "typography": {"bodyFontSize": 10, "lineHeight": 1.4, "headingFontSize": 18},
            "header": {"content": {"left": "{chapter}", "center": "", "right": "{title}"}},
            "footer": {"content": {"left": "{pageNumber}", "center": "", "right": "{author}"}},
        },
    },
    "children": {
        "name": "Children's Picture Book",
        "category": "children",
        "description": "Picture on top, large text below",
        "tags": ["children", "illustrated", "split"],
        "layout": {
            "splitType": "horizontal",
            "splitRatio": [60, 40],
            "typography": {"bodyFontSize": 16, "lineHeight": 1.8, "headingFontSize": 32},
            "header": {"enabled": False},
            "footer": {"content": {"left": "", "center": "{pageNumber}", "right": ""}},
            "background": {
                "type": "pattern",
                "color": "#ffffff",
                "pattern": {"type": "dots", "color": "#ffe4b5", "opacity": 0.4},
            },
        },
    },
    "poetry": {
        "name": "Poetry",
        "category": "poetry",
        "description": "Airy single column with generous margins",
        "tags": ["poetry", "minimal"],
        "layout": {
            "margins": {"top": 35, "bottom": 35, "left": 30, "right": 30},
            "typography": {"bodyFontSize": 12, "lineHeight": 2.0, "headingFontSize": 20},
            "header": {"enabled": False},
            "footer": {"content": {"left": "", "center": "{pageNumber}", "right": ""}},
        },
    },
}


@dataclass
class TemplateMetadata:
    """Metadata for a template"""
    key: str
    name: str
    category: str = "custom"
    description: str = ""
    tags: List[str] = field(default_factory=list)
    author: str = ""
    extends: Optional[str] = None
    filepath: Optional[Path] = None

    @property
    def builtin(self) -> bool:
        return self.filepath is None

    def matches_search(self, query: str) -> bool:
        """Check if template matches search query"""
        query_lower = query.lower()
        return (
            query_lower in self.key.lower() or
            query_lower in self.name.lower() or
            query_lower in self.description.lower() or
            any(query_lower in tag.lower() for tag in self.tags)
        )


@dataclass
class ValidationError:
    """Template validation error"""
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class TemplateValidator:
    """Validates template JSON against schema"""

    def __init__(self, schema_path: Optional[Path] = None):
        self.schema_path = schema_path or SCHEMA_PATH
        with open(self.schema_path, 'r', encoding='utf-8') as f:
            self.schema = json.load(f)

    def validate(self, template_data: Any, source: str) -> List[ValidationError]:
        """
        Validate template data against schema

        Returns:
            List of validation errors (empty if valid)
        """
        if not isinstance(template_data, dict):
            return [ValidationError(path=source, message="Template must be a JSON object")]

        validator = jsonschema.Draft7Validator(self.schema)
        errors = []
        for error in sorted(validator.iter_errors(template_data), key=lambda e: list(e.path)):
            location = "/".join(str(p) for p in error.path) or "<root>"
            errors.append(ValidationError(path=source, message=f"{location}: {error.message}"))
        return errors


class TemplateManager:
    """
    Manages built-in and file-based layout templates
    """

    def __init__(self, template_dirs: Optional[List[Path]] = None, include_builtin: bool = True):
        """
        Initialize template manager

        Args:
            template_dirs: Directories to search for ``*.json`` templates
            include_builtin: Whether the built-in templates are available
        """
        self.template_dirs = [Path(d) for d in (template_dirs or [])]
        self.validator = TemplateValidator()

        self._templates: Dict[str, TemplateMetadata] = {}
        self._raw: Dict[str, Dict[str, Any]] = {}
        self._resolved: Dict[str, Dict[str, Any]] = {}

        if include_builtin:
            for key, data in BUILTIN_TEMPLATES.items():
                self._register(key, data, None)

        logger.info(f"Initialized TemplateManager with directories: {self.template_dirs}")

    def _register(self, key: str, data: Dict[str, Any], filepath: Optional[Path]) -> TemplateMetadata:
        metadata = TemplateMetadata(
            key=key,
            name=data.get("name", key),
            category=data.get("category", "custom"),
            description=data.get("description", ""),
            tags=list(data.get("tags", [])),
            author=data.get("author", ""),
            extends=data.get("extends"),
            filepath=filepath,
        )
        self._templates[key] = metadata
        self._raw[key] = data
        self._resolved.pop(key, None)
        return metadata

    def discover_templates(self) -> List[TemplateMetadata]:
        """
        Load every valid template file from the configured directories.

        Files that fail to parse or validate are skipped with a warning.
        The file name without extension is the template key; a file can
        shadow a built-in template of the same key.

        Returns:
            List of all known template metadata
        """
        for template_dir in self.template_dirs:
            if not template_dir.exists():
                logger.warning(f"Template directory does not exist: {template_dir}")
                continue

            for json_file in sorted(template_dir.rglob("*.json")):
                try:
                    data = json.loads(json_file.read_text(encoding="utf-8"))
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning(f"Skipping unreadable template {json_file}: {e}")
                    continue

                errors = self.validator.validate(data, str(json_file))
                if errors:
                    logger.warning(f"Template {json_file.name} has validation errors:")
                    for error in errors[:3]:  # Show first 3 errors
                        logger.warning(f"  - {error}")
                    continue

                self._register(json_file.stem, data, json_file)
                logger.debug(f"Discovered template: {json_file.stem} ({data.get('name')})")

        logger.info(f"{len(self._templates)} templates available")
        return list(self._templates.values())

    def keys(self) -> List[str]:
        return sorted(self._templates)

    def get_template(self, key: str) -> Optional[TemplateMetadata]:
        return self._templates.get(key)

    def load_template_data(self, key: str) -> Dict[str, Any]:
        """
        Load template data with inheritance resolved

        Raises:
            TemplateError: unknown key or an inheritance cycle
        """
        return self._resolve(key, set())

    def _resolve(self, key: str, seen: Set[str]) -> Dict[str, Any]:
        if key in self._resolved:
            return self._resolved[key]
        if key not in self._raw:
            raise TemplateError(f"Template not found: {key}")
        if key in seen:
            raise TemplateError(f"Template inheritance cycle through '{key}'")
        seen.add(key)

        data = self._raw[key]
        parent_key = data.get("extends")
        if parent_key:
            merged = copy.deepcopy(self._resolve(parent_key, seen))
            for field_name, value in data.items():
                if field_name == "extends":
                    continue
                if field_name == "layout":
                    merged["layout"] = _deep_merge(merged.get("layout", {}), value)
                else:
                    merged[field_name] = value
            data = merged

        self._resolved[key] = data
        return data

    def build_configuration(self, key: str) -> LayoutConfiguration:
        """Create the layout configuration a template describes."""
        data = self.load_template_data(key)
        layout = dict(data.get("layout", {}))
        layout.setdefault("name", data.get("name", key))
        layout.setdefault("description", data.get("description", ""))
        return LayoutConfiguration.from_dict(layout)

    def search_templates(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> List[TemplateMetadata]:
        """
        Search templates by query, category, and tags

        Args:
            query: Text search in key/name/description/tags
            category: Filter by category
            tags: Filter by tags (any match)

        Returns:
            List of matching template metadata
        """
        results = [self._templates[key] for key in self.keys()]

        if query:
            results = [t for t in results if t.matches_search(query)]
        if category:
            results = [t for t in results if t.category == category]
        if tags:
            results = [t for t in results if any(tag in t.tags for tag in tags)]

        return results

    def get_categories(self) -> List[str]:
        """Get list of all template categories"""
        return sorted(set(t.category for t in self._templates.values()))

    def validate_template_file(self, filepath: Path) -> List[ValidationError]:
        """Validate a template file"""
        try:
            data = json.loads(Path(filepath).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            return [ValidationError(path=str(filepath), message=f"Invalid JSON: {e}")]
        except OSError as e:
            return [ValidationError(path=str(filepath), message=f"Error reading file: {e}")]
        return self.validator.validate(data, str(filepath))


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
