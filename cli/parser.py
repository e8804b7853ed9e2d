"""Argument parser for Folio CLI."""

import argparse
from core.constants import VERSION, __author__, __email__, __copyright__


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Paginate a book manuscript, inspect spreads and save layout projects"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}\n{__copyright__}\nAuthor: {__author__} <{__email__}>"
    )

    parser.add_argument(
        "manuscript",
        nargs="?",
        help="Manuscript JSON file (title, author, chapters, synopsis)"
    )

    # Layout source
    layout_group = parser.add_argument_group("layout")
    layout_group.add_argument(
        "-c", "--config",
        metavar="LAYOUT_JSON",
        help="Layout configuration JSON file"
    )
    layout_group.add_argument(
        "-t", "--template",
        help="Named layout template (see --list-templates)"
    )
    layout_group.add_argument(
        "--template-dir",
        action="append",
        default=[],
        help="Additional directory of template JSON files (repeatable)"
    )
    layout_group.add_argument(
        "--preset",
        choices=["classic", "academic", "minimal", "none"],
        help="Apply a header/footer preset"
    )
    layout_group.add_argument(
        "--ltr",
        action="store_true",
        help="Force left-to-right reading direction"
    )
    layout_group.add_argument(
        "--rtl",
        action="store_true",
        help="Force right-to-left reading direction"
    )

    # Pagination
    page_group = parser.add_argument_group("pagination")
    page_group.add_argument(
        "--no-toc",
        action="store_true",
        help="Do not generate a table of contents"
    )
    page_group.add_argument(
        "--no-back-cover",
        action="store_true",
        help="Do not generate a back cover summary page"
    )

    # Actions
    action_group = parser.add_argument_group("actions")
    action_group.add_argument(
        "--list-pages",
        action="store_true",
        help="Print the generated page sequence"
    )
    action_group.add_argument(
        "--spread",
        type=int,
        metavar="N",
        help="Print spread N (0 is the cover)"
    )
    action_group.add_argument(
        "--preview",
        metavar="PNG",
        help="Write a wireframe preview of the selected spread"
    )
    action_group.add_argument(
        "--save",
        metavar="PROJECT",
        help="Save the layout project to this file"
    )
    action_group.add_argument(
        "--load",
        metavar="PROJECT",
        help="Load a saved project instead of a manuscript"
    )
    action_group.add_argument(
        "--list-templates",
        action="store_true",
        help="List available layout templates"
    )
    action_group.add_argument(
        "--validate-template",
        metavar="TEMPLATE_JSON",
        help="Validate a template file and exit"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show log output on the console"
    )

    return parser
