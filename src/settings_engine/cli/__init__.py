"""Command-line interface for the settings engine.

Usage:
    settings-engine [--definitions FILE] check
    settings-engine [--definitions FILE] graph
    settings-engine [--definitions FILE] propagate NAME=VALUE ... [--state NAME=VALUE ...] [--json]
"""

import argparse
import logging
import sys

from settings_engine.cli.definitions import cmd_check, cmd_graph
from settings_engine.cli.propagate import cmd_propagate
from settings_engine.config import definitions_path


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="settings-engine",
        description="Compile setting definitions and preview cascade/sync propagation",
    )
    parser.add_argument(
        "--definitions", default=str(definitions_path()),
        help="Path to the setting definitions YAML file",
    )
    parser.add_argument(
        "--max-iterations", type=int, default=None,
        help="Override the propagation wave cap",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log compile (-v) and per-wave (-vv) details",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("check", help="Validate definitions and report every problem")
    sub.add_parser("graph", help="Show cascade edges, sync edges and sync order")

    prop = sub.add_parser("propagate", help="Plan the writes that follow from a change")
    prop.add_argument(
        "changes", nargs="+", metavar="NAME=VALUE",
        help="Settings being assigned",
    )
    prop.add_argument(
        "--state", action="append", default=[], metavar="NAME=VALUE",
        help="Current value of a setting (repeatable; others use their default)",
    )
    prop.add_argument(
        "--json", action="store_true",
        help="Output machine-readable JSON",
    )

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    dispatch = {
        "check": cmd_check,
        "graph": cmd_graph,
        "propagate": cmd_propagate,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
