# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the Tyco command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from yachalk import chalk

from tyco.cli.config import CONFIG_FILE_NAME, ConfigError, OutputConfig, find_config, load_config
from tyco.compiler.build import load
from tyco.compiler.export import FORMATS, serialize, write_output
from tyco.diagnostics import TycoError

# ###############
# Public Interface
# ###############


def main(argv: list[str] | None = None) -> None:
    """Run the Tyco CLI."""
    parser = argparse.ArgumentParser(
        prog="tyco",
        description="Tyco: typed configuration parser and resolver",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the progress of each loading stage to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the resolved document",
        description="Load a Tyco file and print (or write) its resolved structure.",
    )
    dump_parser.add_argument("file", help="Tyco file to load")
    dump_parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: from config, else json)",
    )
    dump_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indentation width; 0 selects compact JSON (default: from config, else 2)",
    )
    dump_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write to this file instead of standard output",
    )
    dump_parser.add_argument(
        "--config",
        default=None,
        help=f"Output configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that Tyco files load without errors",
        description="Parse and resolve each file, reporting the first error in each.",
    )
    check_parser.add_argument("files", nargs="+", help="Tyco files to check")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "dump":
        return _cmd_dump(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    try:
        config = _output_config(args)
    except ConfigError as exc:
        _print_error(str(exc))
        return 1

    fmt = args.format or config.format
    indent = args.indent if args.indent is not None else config.indent
    if indent < 0:
        _print_error("--indent must be a non-negative integer")
        return 1

    try:
        context = load(Path(args.file))
    except TycoError as exc:
        _print_error(exc.render())
        return 1

    if args.output:
        write_output(context, Path(args.output), fmt, indent)
        print(f"Wrote '{args.output}'.")
    else:
        print(serialize(context, fmt, indent))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    has_errors = False
    for file in args.files:
        try:
            load(Path(file))
        except TycoError as exc:
            _print_error(f"{file}\n{exc.render()}")
            has_errors = True
            continue
        print(f"{chalk.green('OK')}  {file}")

    if has_errors:
        return 1
    return 0


def _output_config(args: argparse.Namespace) -> OutputConfig:
    if args.config:
        return load_config(Path(args.config))
    return find_config(Path.cwd())


def _print_error(message: str) -> None:
    print(f"{chalk.red('error:')} {message}", file=sys.stderr)
