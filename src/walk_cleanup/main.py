"""Main entry point for walk-cleanup."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .actions import action_from_config
from .config import WalkConfig, parse_date
from .errors import ValidationError, WalkCleanupError
from .walker import TreeWalker

if TYPE_CHECKING:
    from datetime import date

    from .walker import WalkStats

err_console = Console(stderr=True)


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="walk-cleanup",
        description="Find files by extension, size and date, then list, delete or archive them",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument("--root", type=Path, default=Path("."), help="Root directory to start")
    parser.add_argument("--list", action="store_true", default=None, dest="list_files", help="List files only")
    parser.add_argument("--del", action="store_true", default=None, dest="delete", help="Delete files")
    parser.add_argument("--archive", type=Path, default=None, dest="archive_dir", help="Archive directory")
    parser.add_argument("--ext", default=None, dest="extension", help="Only act on files with this extension, e.g. .log")
    parser.add_argument("--size", type=int, default=None, dest="min_size", help="Minimum file size in bytes")
    parser.add_argument(
        "--date",
        type=_date_arg,
        default=None,
        dest="modified_after",
        help="Skip files modified before this date (YYYY-MM-DD)",
    )
    parser.add_argument("--log", type=Path, default=None, dest="audit_log_file", help="Deletion audit log file")
    parser.add_argument("--log-level", default=None, dest="log_level", help="Application log level")
    parser.add_argument("--summary", action="store_true", help="Print run statistics to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser.parse_args(argv)


def setup_logging(config: WalkConfig) -> logging.Logger:
    """Set up application logging.

    Returns:
        The package logger.

    """
    logger = logging.getLogger("walk_cleanup")
    logger.setLevel(getattr(logging, config.log_level.upper()))

    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=err_console,
        show_time=True,
        show_path=False,
    )
    logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(file_handler)

    return logger


def cmd_config(config: WalkConfig, args: argparse.Namespace) -> int:
    """Execute config command.

    Args:
        config: Effective configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    if args.init:
        config_path = args.config or WalkConfig.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            return 1
        WalkConfig().save(config_path)
        console.print(f"[green]Created config: {config_path}[/green]")
        return 0

    if args.show:
        table = Table(title="Current Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Extension", config.extension or "(any)")
        table.add_row("Minimum size", f"{config.min_size} bytes")
        table.add_row("Modified after", config.modified_after.isoformat())
        table.add_row("Action", action_from_config(config).name)
        table.add_row("Archive directory", str(config.archive_dir or "-"))
        table.add_row("Audit log", str(config.audit_log_file or "stdout"))
        table.add_row("Log file", str(config.log_file or "-"))
        table.add_row("Log level", config.log_level)

        console.print(table)
        return 0

    console.print("[yellow]Use --init or --show[/yellow]")
    return 1


def print_summary(stats: WalkStats) -> None:
    table = Table(title="Walk summary")
    table.add_column("Counter", style="cyan")
    table.add_column("Files", style="green", justify="right")

    table.add_row("Visited", str(stats.visited))
    table.add_row("Matched", str(stats.matched))
    table.add_row("Listed", str(stats.listed))
    table.add_row("Deleted", str(stats.deleted))
    table.add_row("Archived", str(stats.archived))

    err_console.print(table)


def cmd_run(config: WalkConfig, args: argparse.Namespace) -> int:
    """Walk the root and apply the configured action.

    Args:
        config: Effective configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    with contextlib.ExitStack() as stack:
        audit_log = sys.stdout
        if config.audit_log_file is not None:
            audit_log = stack.enter_context(config.audit_log_file.open("a", encoding="utf-8"))

        stats = TreeWalker(args.root, sys.stdout, config, audit_log).walk()

    if args.summary:
        print_summary(stats)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)

    try:
        config = WalkConfig.load(args.config).with_overrides(
            extension=args.extension,
            min_size=args.min_size,
            modified_after=args.modified_after,
            list_files=args.list_files,
            delete=args.delete,
            archive_dir=args.archive_dir,
            audit_log_file=args.audit_log_file,
            log_level=args.log_level.upper() if args.log_level else None,
        )
        config.validate()
        setup_logging(config)

        if args.command == "config":
            return cmd_config(config, args)
        return cmd_run(config, args)
    except (WalkCleanupError, OSError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
