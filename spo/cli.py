#!/usr/bin/env python3
"""
spo-cli

Command-line entry point. Parses options, validates them, runs one command
and prints its result.

Usage:
    spo-cli group-list --webUrl https://contoso.sharepoint.com
    spo-cli term-group-add --name PnPTermSets --description "PnP term sets"
    spo-cli term-group-list --output text
    spo-cli term-set-list --termGroupName PnPTermSets

Exit codes:
    0  success
    1  command, server or network error
    2  invalid options
"""

import argparse
import json
import logging
import sys

import requests

from spo import __version__, config
from spo.client import SpoClient
from spo.commands import COMMAND_REGISTRY
from spo.errors import CommandError, ValidationError
from spo.telemetry import default_recorder
from spo.validation import check_option_sets

logger = logging.getLogger(__name__)

OUTPUT_MODES = ("json", "text")


# =============================================================================
# ARGUMENTS
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    global_options = argparse.ArgumentParser(add_help=False)
    global_options.add_argument(
        "-o", "--output", choices=OUTPUT_MODES, default="json", help="Output format (default: json)"
    )
    global_options.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    global_options.add_argument("--debug", action="store_true", help="Log requests and responses to stderr")

    parser = argparse.ArgumentParser(
        prog="spo-cli",
        description="Manage SharePoint Online taxonomy term groups, term sets and site groups",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    for name, command in COMMAND_REGISTRY.items():
        subparser = subparsers.add_parser(
            name, parents=[global_options], help=command.DESCRIPTION, description=command.DESCRIPTION
        )
        command.add_arguments(subparser)

    return parser


def configure_logging(verbose: bool = False, debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)


# =============================================================================
# EXECUTION
# =============================================================================


def validate_options(command, options: dict):
    """Raise ValidationError for the first failing check."""
    for check in (
        lambda: check_option_sets(options, command.OPTION_SETS),
        lambda: command.validate(options),
    ):
        result = check()
        if result is not True:
            raise ValidationError(result or f"Invalid options for {command.NAME}")


def run_command(name: str, options: dict, client: SpoClient = None, telemetry=None):
    """Validate and execute one command, returning its output."""
    command = COMMAND_REGISTRY[name]
    telemetry = telemetry or default_recorder()

    validate_options(command, options)
    telemetry.record(name, command.telemetry_properties(options))

    client = client or SpoClient()
    return command.execute(client, options)


# =============================================================================
# OUTPUT
# =============================================================================


def _project(record: dict, properties) -> dict:
    if not properties:
        return record
    return {name: record[name] for name in properties if name in record}


def format_output(result, output: str = "json", default_properties=None) -> str:
    if output == "json":
        return json.dumps(result, indent=2, ensure_ascii=False)

    if isinstance(result, list):
        rows = [_project(record, default_properties) for record in result]
        columns = []
        for row in rows:
            columns.extend(key for key in row if key not in columns)
        lines = ["\t".join(columns)]
        lines.extend("\t".join(str(row.get(column, "")) for column in columns) for row in rows)
        return "\n".join(lines)

    if isinstance(result, dict):
        return "\n".join(f"{key}: {value}" for key, value in result.items())

    return str(result)


# =============================================================================
# MAIN
# =============================================================================


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config.load_env()
    configure_logging(args.verbose, args.debug)

    options = vars(args)
    command = COMMAND_REGISTRY[args.command]

    try:
        result = run_command(args.command, options)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(2)
    except CommandError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except requests.RequestException as e:
        logger.debug("Request failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if result is not None:
        print(format_output(result, args.output, command.DEFAULT_PROPERTIES))
    sys.exit(0)


if __name__ == "__main__":
    main()
