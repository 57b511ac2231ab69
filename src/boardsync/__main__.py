"""CLI entry point for boardsync."""

import argparse
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="boardsync",
        description="Drag-and-drop kanban board that keeps a board server in sync",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Path to project root containing boardsync.yml (default: current directory)",
    )
    parser.add_argument(
        "--project",
        default=None,
        metavar="PROJECT_ID",
        help="Board project to open (overrides boardsync.yml)",
    )
    parser.add_argument(
        "--backend",
        choices=["file", "http"],
        default=None,
        help="Persistence backend (overrides boardsync.yml)",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate default boardsync.yml and board store, then exit",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the board with drag tokens and exit",
    )
    parser.add_argument(
        "--drop",
        nargs=2,
        default=None,
        metavar=("SOURCE", "TARGET"),
        help="Drag SOURCE token onto TARGET token, persist, and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Build settings from CLI args on top of environment values."""
    settings_kwargs: dict = {}
    if args.project_root:
        settings_kwargs["project_root"] = args.project_root
    if args.project:
        settings_kwargs["project_id"] = args.project
    if args.backend:
        settings_kwargs["backend"] = args.backend
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file
    return Settings(**settings_kwargs)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = build_settings(args)

    interactive = not (args.generate or args.show or args.drop)
    # The TUI owns the terminal, so only the log file gets output
    setup_logging(settings.verbose, settings.log_file, stderr=not interactive)

    if args.generate:
        from .cli.generate import run_generate

        raise SystemExit(run_generate(settings.project_root))

    if args.show:
        from .cli.board import run_show

        raise SystemExit(run_show(settings))

    if args.drop:
        from .cli.board import run_drop

        source, target = args.drop
        raise SystemExit(run_drop(settings, source, target))

    # Import here to keep textual out of the non-interactive commands
    from .app import run

    run(settings)


if __name__ == "__main__":
    main()
