"""Command-line entry point for folder-mirror.

Mirrors a source folder onto a replica folder, once or periodically.
Status and per-entry outcomes are logged to stderr and, optionally, to an
append-only log file.
"""

import argparse
import json
import logging
import sys

from . import __version__
from .bootstrap import load_file_config, resolve_configuration
from .config_loader import ensure_config
from .logger import setup_logging
from .scheduler import run_cycle, run_periodic
from .sync import (
    CompareMode,
    LocalFileSystem,
    RootNotFoundError,
    SyncEngine,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folder-mirror",
        description="Folder Mirror - one-way periodic synchronization of a "
        "source folder into a replica folder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mirror every 60 seconds, logging to a file as well as stderr
  folder-mirror /data/source /backup/replica --period 60 --log-file /var/log/mirror.log

  # Compare file content (MD5) instead of size and modification time
  folder-mirror /data/source /backup/replica --compare-mode hash

  # Single pass, JSON report on stdout
  folder-mirror /data/source /backup/replica --once --json

  # Preview what a pass would change
  folder-mirror /data/source /backup/replica --dry-run

  # Take folders and settings from .folder_mirror/config.yml or MIRROR_* env vars
  folder-mirror

Note: The replica folder is made identical to the source folder. Files
and folders that exist only in the replica are deleted.
        """,
    )

    parser.add_argument(
        "source",
        nargs="?",
        help="Source folder (overrides MIRROR_SOURCE env var and config files)",
    )
    parser.add_argument(
        "replica",
        nargs="?",
        help="Replica folder (overrides MIRROR_REPLICA env var and config files)",
    )
    parser.add_argument(
        "--period",
        type=int,
        help="Synchronization period in seconds (default: 60)",
    )
    parser.add_argument(
        "--log-file",
        help="Absolute path of a log file to append to, in addition to stderr",
    )
    parser.add_argument(
        "--compare-mode",
        choices=[m.value for m in CompareMode],
        help="How changed files are detected: size-time (default) or "
        "hash (MD5 of file content)",
    )
    parser.add_argument(
        "--allow-readonly-modify",
        action="store_true",
        help="Clear the read-only attribute of replica files so they can "
        "be updated or deleted (default: leave them and report an error)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single pass, print the report and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what a single pass would change without changing anything",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print reports as JSON (with --once or --dry-run)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log line format (default: text)",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Create a starter .folder_mirror/config.yml and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"folder-mirror version {__version__}",
    )
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict:
    """Collect the CLI values that were actually given."""
    config_overrides = {}
    if args.source:
        config_overrides["source"] = args.source
    if args.replica:
        config_overrides["replica"] = args.replica
    if args.period is not None:
        config_overrides["period"] = args.period
    if args.compare_mode:
        config_overrides["compare_mode"] = args.compare_mode
    if args.allow_readonly_modify:
        config_overrides["allow_readonly_modify"] = True
    if args.log_file:
        config_overrides["log_file"] = args.log_file
    return config_overrides


def _print_report(report, as_json: bool) -> None:
    if as_json:
        print(json.dumps(report_to_json(report), indent=2))
    elif report.dry_run:
        print(format_dry_run_preview(report))
    else:
        print(format_sync_report(report))


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, build the engine and run it.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    if args.init_config:
        path = ensure_config()
        print(f"Config file: {path}")
        return 0

    try:
        file_config = load_file_config()
    except RuntimeError:
        # Error already printed to stderr
        return 1
    log_format = args.log_format or file_config.logging.format
    setup_logging(
        debug=args.debug,
        log_format=log_format,
        level=file_config.logging.level,
    )

    try:
        config = resolve_configuration(
            _overrides_from_args(args), file_config=file_config
        )
    except RuntimeError:
        # Error already printed to stderr
        return 1

    if config.log_file:
        try:
            setup_logging(
                debug=args.debug,
                log_file=config.log_file,
                log_format=log_format,
                level=file_config.logging.level,
            )
        except OSError as exc:
            print(
                f"ERROR: Cannot open log file {config.log_file}: {exc}",
                file=sys.stderr,
            )
            return 1

    engine = SyncEngine(LocalFileSystem(), config)

    if args.dry_run:
        try:
            report = engine.synchronize(dry_run=True)
        except RootNotFoundError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        _print_report(report, args.json)
        return 0

    if args.once:
        report = run_cycle(engine, config)
        if report is None:
            return 1
        _print_report(report, args.json)
        return 1 if report.errors else 0

    logger.info("Starting periodic synchronization (Ctrl-C to stop)")
    run_periodic(engine, config)
    return 0  # pragma: no cover


def run() -> None:
    """Entry point that handles interruption gracefully."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
