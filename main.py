#!/usr/bin/env python3
"""
Folio - Book page layout and composition

Command-line entry point: paginates a manuscript, prints spreads, renders
wireframe previews and saves layout projects.
"""

import logging
import sys
import threading


def main(argv=None):
    """Main entry point for Folio."""
    from cli import build_arg_parser, run_cli
    from core.logging_config import setup_logging

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    log_file = setup_logging(log_level=logging.DEBUG if args.verbose else logging.INFO)
    if args.verbose:
        for handler in logging.getLogger().handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(logging.DEBUG)

    def _log_unhandled(exc_type, exc_value, exc_traceback):
        logger = logging.getLogger(__name__)
        logger.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))
        print(f"\nAn unexpected error occurred. See {log_file} for details.")
    sys.excepthook = _log_unhandled

    def _thread_excepthook(hook_args):
        logger = logging.getLogger(__name__)
        logger.error(
            "Unhandled thread exception",
            exc_info=(hook_args.exc_type, hook_args.exc_value, hook_args.exc_traceback),
        )
    threading.excepthook = _thread_excepthook

    return run_cli(args)


if __name__ == "__main__":
    sys.exit(main())
