"""Command-line front door for mimicfm.

Parses CLI options, merges them over the persisted config, configures file
logging, and runs the full-screen session until quit or SIGTERM.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import signal
import sys
from pathlib import Path

from .config import load_settings, save_theme_name
from .log_setup import configure_logging
from .runtime import FileManagerController, run_main_loop
from .terminal import TerminalController
from .ui_theme import available_theme_names, normalize_theme_name, resolve_theme

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse and manage files in a windowed terminal icon view.")
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); remembered for later sessions.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--editor", default=None, help="Command used for 'Open with Editor' (default: code).")
    parser.add_argument("--log-file", type=Path, default=None, help="Write the log here instead of the user log dir.")
    parser.add_argument("--verbose", action="store_true", help="Log debug detail.")
    return parser


def _raise_system_exit(signum, _frame) -> None:
    raise SystemExit(128 + signum)


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and run the file manager on a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)

    path = Path(args.path) if args.path is not None else (default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("mimicfm needs an interactive terminal.")

    settings = load_settings()
    overrides = {}
    if args.theme is not None:
        overrides["theme"] = normalize_theme_name(args.theme)
    if args.editor is not None:
        overrides["editor"] = args.editor
    settings = dataclasses.replace(settings, **overrides)

    configure_logging(args.log_file, verbose=args.verbose)
    if args.theme is not None:
        save_theme_name(overrides["theme"])
    signal.signal(signal.SIGTERM, _raise_system_exit)

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    controller = FileManagerController(
        path.resolve(),
        terminal,
        settings=settings,
        theme=resolve_theme(settings.theme, no_color=args.no_color),
    )
    try:
        controller.start()
        run_main_loop(controller, terminal.stdin_fd)
    except Exception:
        logger.exception("Unhandled error, shutting down")
        raise
    finally:
        controller.stop()


if __name__ == "__main__":
    main()
