"""Command-line interface for moonraker-fleet."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, TextIO

from . import constants
from .app import FleetMonitorApp, render_view_json
from .config import load_config
from .fleet import derive_fleet
from .logging import configure_logging
from .telemetry_normalizer import SnapshotFormatError

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME, description="Live status view for a Moonraker printer fleet"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    watch_parser = subparsers.add_parser(
        "watch", help="Poll the aggregator and print one JSON view per tick"
    )
    watch_parser.add_argument(
        "--once", action="store_true", help="Poll a single time and exit"
    )

    derive_parser = subparsers.add_parser(
        "derive", help="Derive the fleet view from a saved snapshot"
    )
    derive_parser.add_argument(
        "input", help="JSON file holding the /printers response, or '-' for stdin"
    )

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def _read_snapshot(source: str, stdin: TextIO) -> Any:
    if source == "-":
        return json.load(stdin)
    with Path(source).open("r", encoding="utf-8") as stream:
        return json.load(stream)


def main(
    argv: Optional[list[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    out = stdout or sys.stdout

    config = load_config(args.config)

    if args.command == "watch":
        ok = FleetMonitorApp.start(config, once=args.once)
        return 0 if ok else 1

    if args.command == "derive":
        configure_logging(config.logging.level, log_path=config.logging.path)
        try:
            records = _read_snapshot(args.input, stdin or sys.stdin)
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.error("Cannot read snapshot from %s: %s", args.input, exc)
            return 1

        if not isinstance(records, list):
            LOGGER.error("Snapshot must be a JSON array, got %s", type(records).__name__)
            return 1

        now = datetime.now(timezone.utc)
        try:
            view = derive_fleet(records, now)
        except SnapshotFormatError as exc:
            LOGGER.error("Malformed snapshot: %s", exc)
            return 1

        print(render_view_json(view, now=now), file=out)
        return 0

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n", file=out)
        for section in config.raw.sections():
            print(f"[{section}]", file=out)
            for key, value in config.raw[section].items():
                print(f"{key} = {value}", file=out)
            print(file=out)
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
