"""
JSON project files.

A project file holds the manuscript the pages were generated from and the
current document state. Files are validated with ``project_schema.json``
on load and written atomically (temp file + rename) on save.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jsonschema

from core.config import ConfigManager
from core.constants import PROJECT_FILE_EXTENSION, PROJECT_SCHEMA_VERSION
from core.logging_config import LogManager
from core.utils import ensure_dir, generate_timestamp, project_file_name

from .errors import PersistenceError
from .models import DocumentState, Manuscript

logger = LogManager().get_logger("layout.persistence")

SCHEMA_PATH = Path(__file__).parent / "project_schema.json"

_schema_cache: Optional[Dict[str, Any]] = None


def project_schema() -> Dict[str, Any]:
    global _schema_cache
    if _schema_cache is None:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            _schema_cache = json.load(f)
    return _schema_cache


def build_project_document(state: DocumentState, manuscript: Optional[Manuscript] = None) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "schemaVersion": PROJECT_SCHEMA_VERSION,
        "savedAt": generate_timestamp(),
        "state": state.to_dict(),
    }
    if manuscript is not None:
        document["manuscript"] = manuscript.to_dict()
    return document


def validate_project_document(document: Any, source: str = "<memory>") -> None:
    """
    Check a project document against the schema.

    Raises:
        PersistenceError: with the first validation message
    """
    try:
        jsonschema.validate(instance=document, schema=project_schema())
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise PersistenceError(f"Invalid project file at {location}: {e.message}", path=source) from e


class JsonProjectStore:
    """
    Persists document snapshots to one JSON file.

    Instances are callable so they can be handed straight to the autosave
    coordinator as its persistence collaborator.
    """

    def __init__(self, path: Path, manuscript: Optional[Manuscript] = None):
        self.path = Path(path)
        self.manuscript = manuscript

    @classmethod
    def for_title(cls, title: str, manuscript: Optional[Manuscript] = None,
                  config: Optional[ConfigManager] = None) -> "JsonProjectStore":
        """Store under the configured projects directory, named after ``title``."""
        config = config or ConfigManager()
        return cls(config.get_projects_dir() / project_file_name(title), manuscript)

    def __call__(self, state: DocumentState) -> bool:
        self.save(state)
        return True

    def save(self, state: DocumentState) -> Path:
        """
        Write ``state`` to the project file.

        Returns:
            Path written

        Raises:
            PersistenceError: the file could not be written
        """
        document = build_project_document(state, self.manuscript)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            ensure_dir(self.path.parent)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Could not write project: {e}", path=self.path) from e

        logger.info(f"Saved project with {len(state.pages)} pages to {self.path}")
        return self.path

    def load_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            raise PersistenceError("Project file not found", path=self.path)
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Invalid JSON: {e}", path=self.path) from e
        except OSError as e:
            raise PersistenceError(f"Could not read project: {e}", path=self.path) from e

        validate_project_document(document, str(self.path))
        return document

    def load(self) -> Tuple[DocumentState, Optional[Manuscript]]:
        """
        Read the project back.

        Returns:
            Tuple of (document state, manuscript or None)
        """
        document = self.load_document()
        state = DocumentState.from_dict(document["state"])
        manuscript = document.get("manuscript")
        if manuscript is not None:
            manuscript = Manuscript.from_dict(manuscript)
            if self.manuscript is None:
                self.manuscript = manuscript
        logger.info(f"Loaded project from {self.path}")
        return state, manuscript


def list_projects(directory: Path) -> List[Path]:
    """Project files in ``directory``, newest first."""
    directory = Path(directory)
    if not directory.exists():
        return []
    files = directory.glob(f"*{PROJECT_FILE_EXTENSION}")
    return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)
