"""CLI runner for Folio."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from core import ConfigManager, format_file_size
from core.layout import (
    JsonProjectStore,
    LayoutConfiguration,
    LayoutSession,
    Manuscript,
    PaginationFlags,
    PersistenceError,
    SpreadPreviewGenerator,
    TemplateError,
    TemplateManager,
)
from core.layout.pagination import manuscript_is_rtl
from core.logging_config import ErrorLogger, get_error_report_info

logger = logging.getLogger(__name__)


def report_error(message: str) -> None:
    """Print an error together with where the logs are kept."""
    print(f"Error: {message}")
    info = get_error_report_info()
    if info["recent_log"]:
        print(f"Details: {info['recent_log']}")
    else:
        print(f"Logs: {info['log_directory']}")


def load_json_file(path: str) -> Dict[str, Any]:
    """Read a JSON object from ``path``; raises ValueError on bad input."""
    fp = Path(path).expanduser()
    try:
        data = json.loads(fp.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read {fp}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {fp}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{fp} must contain a JSON object")
    return data


def build_template_manager(args, config: ConfigManager) -> TemplateManager:
    dirs = [config.get_templates_dir()] + [Path(d).expanduser() for d in args.template_dir]
    manager = TemplateManager([d for d in dirs if d.exists()])
    manager.discover_templates()
    return manager


def resolve_configuration(args, templates: TemplateManager, manuscript: Manuscript) -> LayoutConfiguration:
    """Pick the starting configuration from --config, --template or defaults."""
    if args.config:
        configuration = LayoutConfiguration.from_dict(load_json_file(args.config))
    elif args.template:
        configuration = templates.build_configuration(args.template)
    else:
        configuration = LayoutConfiguration(is_rtl=manuscript_is_rtl(manuscript))
    return configuration


def create_session(args, config: ConfigManager, templates: TemplateManager):
    """
    Build a session from --load or from a manuscript file.

    Returns:
        Tuple of (session, store or None)
    """
    history_limit = config.get_history_limit()
    if args.load:
        store = JsonProjectStore(Path(args.load).expanduser())
        state, manuscript = store.load()
        if manuscript is None:
            raise ValueError(f"Project {args.load} has no manuscript")
        session = LayoutSession.from_state(
            manuscript, state, history_limit=history_limit, template_manager=templates
        )
        return session, store

    manuscript = Manuscript.from_dict(load_json_file(args.manuscript))
    flags = PaginationFlags(include_toc=not args.no_toc, include_back_cover=not args.no_back_cover)
    session = LayoutSession(
        manuscript,
        configuration=resolve_configuration(args, templates, manuscript),
        flags=flags,
        history_limit=history_limit,
        template_manager=templates,
    )
    return session, None


def print_pages(session: LayoutSession) -> None:
    print(f"{session.manuscript.title}: {len(session.pages)} pages, {session.spread_count()} spreads")
    for index, page in enumerate(session.pages):
        images = f"  [{len(page.images)} image(s)]" if page.images else ""
        print(f"  {index + 1:3d}  {page.role.value:<8} {page.id}{images}")


def print_spread(session: LayoutSession, cursor: int) -> None:
    model = session.render_model(cursor)
    print(f"Spread {model['cursor']}: {model['label']} ({'RTL' if model['isRTL'] else 'LTR'})")
    for side in ("left", "right"):
        view = model[side]
        if view is None:
            print(f"  {side:<5}: -")
            continue
        number = "-" if view["index"] is None else view["index"] + 1
        print(f"  {side:<5}: page {number} ({view['role']})")
        for band in ("header", "footer"):
            if view[band]:
                text = " | ".join(view[band][slot] for slot in ("left", "center", "right"))
                print(f"         {band}: {text}")


def list_templates(templates: TemplateManager) -> None:
    for meta in templates.search_templates():
        origin = "built-in" if meta.builtin else str(meta.filepath)
        print(f"  {meta.key:<16} {meta.name:<26} [{meta.category}] {origin}")


def run_cli(args) -> int:
    """
    Run CLI with parsed arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = ConfigManager()

    if args.validate_template:
        errors = TemplateManager(include_builtin=False).validate_template_file(Path(args.validate_template))
        if errors:
            print(f"Template {args.validate_template} is invalid:")
            for error in errors:
                print(f"  - {error}")
            return 1
        print(f"Template {args.validate_template} is valid.")
        return 0

    templates = build_template_manager(args, config)

    if args.list_templates:
        list_templates(templates)
        return 0

    if not args.manuscript and not args.load:
        print("No manuscript given. Pass a manuscript JSON file or --load PROJECT.")
        return 2

    try:
        session, store = create_session(args, config, templates)
    except (ValueError, TemplateError, PersistenceError) as e:
        logger.error(f"Could not open book: {e}")
        report_error(str(e))
        return 2

    if args.ltr or args.rtl:
        session.set_rtl(bool(args.rtl))
    if args.preset:
        session.apply_header_footer_preset(args.preset)

    if args.list_pages or (args.spread is None and not args.preview and not args.save):
        print_pages(session)

    cursor: Optional[int] = None
    if args.spread is not None:
        cursor = session.go_to_spread(args.spread)
        print_spread(session, cursor)

    if args.preview:
        size = config.get_preview_size()
        generator = SpreadPreviewGenerator(preview_size=size)
        spread = session.navigator.get_spread(cursor)
        with ErrorLogger("writing spread preview", logger, reraise=False) as guard:
            path = generator.save_spread(session.configuration, spread, Path(args.preview).expanduser())
            print(f"Preview written to {path}")
        if guard.error is not None:
            report_error(f"could not write preview: {guard.error}")
            return 1

    if args.save:
        target = JsonProjectStore(Path(args.save).expanduser(), session.manuscript)
    elif store is not None and session.is_dirty():
        target = store
    else:
        target = None

    if target is not None:
        try:
            path = target.save(session.state)
        except PersistenceError as e:
            report_error(str(e))
            return 1
        session.mark_saved()
        print(f"Project saved to {path} ({format_file_size(path.stat().st_size)})")

    return 0
