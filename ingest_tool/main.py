#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for the Recorder Ingest Tool.
"""

import argparse
import logging
import sys
from pathlib import Path

from .commands.ingest import cmd_ingest
from .commands.plan import cmd_plan
from .commands.settings import cmd_settings_reset, cmd_settings_set, cmd_settings_show
from .jsonio import enable_json_logging
from .models.options import OutputFormat
from .settings import SettingsStore


def setup_logging(verbose: bool, log_file=None):
    """Configure logging for the CLI tool."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )
    logging.debug("Verbose logging enabled (DEBUG level).")


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Recorder Ingest Tool - move, merge and convert voice recorder files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Ingest a mounted recorder into the configured destination
  %(prog)s ingest --source /Volumes/DJI

  # Keep lossless output and the raw recordings
  %(prog)s ingest --source /Volumes/DJI --format wav --preserve-originals

  # Preview grouping without touching the volume
  %(prog)s plan --source /Volumes/DJI --json

  # Settings
  %(prog)s settings set destination ~/Dropbox/Inbox
  %(prog)s settings show --json
        """
    )

    # Global options
    parser.add_argument("--settings", default=None,
                        help="Settings file path (default: ~/.config/ingest-tool/settings.json)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (DEBUG) output")
    parser.add_argument("--json", action="store_true",
                        help="Output results as JSON instead of human-readable text")
    parser.add_argument("--log-file", default=None,
                        help="Also write the log to this file")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    _add_ingest_parser(subparsers)
    _add_plan_parser(subparsers)
    _add_settings_parser(subparsers)

    return parser


def _add_ingest_parser(subparsers):
    """Add ingest command parser."""
    ingest_parser = subparsers.add_parser("ingest", help="Transfer and consolidate recordings from a volume")
    ingest_parser.add_argument("--source", required=True,
                               help="Mounted recorder volume to ingest")
    ingest_parser.add_argument("--dest",
                               help="Destination folder (default: configured destination)")
    ingest_parser.add_argument("--format", choices=[f.value for f in OutputFormat],
                               help="Output format (default: from settings)")
    ingest_parser.add_argument("--no-merge", action="store_true",
                               help="Do not merge split recordings")
    ingest_parser.add_argument("--keep-small", action="store_true",
                               help="Do not delete recordings below the small-file threshold")
    ingest_parser.add_argument("--small-threshold-mb", type=float,
                               help="Small-file threshold in MB")
    ingest_parser.add_argument("--preserve-originals", action="store_true",
                               help="Keep raw recordings next to the outputs")


def _add_plan_parser(subparsers):
    """Add plan command parser."""
    plan_parser = subparsers.add_parser("plan", help="Preview grouping for a volume without changing it")
    plan_parser.add_argument("--source", required=True,
                             help="Mounted recorder volume to inspect")


def _add_settings_parser(subparsers):
    """Add settings command parsers."""
    settings_parser = subparsers.add_parser("settings", help="Show or change persisted settings")
    actions = settings_parser.add_subparsers(dest="settings_action", required=True)
    actions.add_parser("show", help="Show current settings")
    set_parser = actions.add_parser("set", help="Change one setting")
    set_parser.add_argument("key", choices=list(SettingsStore.KEYS), help="Setting name")
    set_parser.add_argument("value", help="New value")
    actions.add_parser("reset", help="Restore processing defaults")


def _ingest_overrides(args) -> dict:
    """Only flags the user actually gave override stored settings."""
    overrides = {"output_format": args.format}
    if args.no_merge:
        overrides["merge_enabled"] = False
    if args.keep_small:
        overrides["delete_small_files"] = False
    if args.small_threshold_mb is not None:
        overrides["small_file_threshold"] = int(args.small_threshold_mb * 1024 * 1024)
    if args.preserve_originals:
        overrides["preserve_originals"] = True
    return overrides


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    as_json = args.json

    if as_json:
        enable_json_logging()
    else:
        setup_logging(args.verbose, args.log_file)

    logging.debug("Parsed arguments: %s", args)
    store = SettingsStore(Path(args.settings).expanduser() if args.settings else None)
    logging.debug("Using settings: %s", store.path)

    code = 0
    try:
        if args.command == "ingest":
            logging.info("Starting ingest from %s", args.source)
            code = cmd_ingest(store, Path(args.source), Path(args.dest) if args.dest else None,
                              overrides=_ingest_overrides(args), as_json=as_json)

        elif args.command == "plan":
            code = cmd_plan(store, Path(args.source), as_json)

        elif args.command == "settings":
            if args.settings_action == "show":
                code = cmd_settings_show(store, as_json)
            elif args.settings_action == "set":
                code = cmd_settings_set(store, args.key, args.value, as_json)
            else:
                code = cmd_settings_reset(store, as_json)

    except KeyboardInterrupt:
        if as_json:
            from .jsonio import error
            return error(args.command, "Operation interrupted by user", code=130)
        logging.warning("Operation interrupted by user.")
        sys.exit(130)
    except Exception as e:
        if as_json:
            from .jsonio import error
            debug_info = {"exception_type": type(e).__name__} if args.verbose else None
            return error(args.command, str(e), debug=debug_info, code=1)
        logging.error("Error occurred: %s", e, exc_info=args.verbose)
        sys.exit(1)

    return code


if __name__ == "__main__":
    sys.exit(main())
