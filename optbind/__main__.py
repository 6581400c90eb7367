"""
Optbind CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging
import sys
from argparse import REMAINDER, ArgumentParser, Namespace
from pathlib import Path
from typing import Any

from rich.markup import escape

from optbind.config import find_optbind_config, loader
from optbind.console import console
from optbind.exceptions import OptbindError, ParseError
from optbind.signals import HelpSignal, VersionSignal
from optbind.utils import setup_logging
from optbind.version import __version__


def get_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="optbind",
        description="Parse tokens against a declarative CLI config and show the bindings.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to an optbind YAML or TOML config. Discovered when omitted.",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging to the console."
    )
    parser.add_argument(
        "--run",
        action="store_true",
        help="Execute the selected command instead of printing its bindings.",
    )
    parser.add_argument("--version", action="version", version=f"optbind {__version__}")
    parser.add_argument("tokens", nargs=REMAINDER, help="Tokens to parse.")
    return parser


def main(argv: list[str] | None = None) -> Any:
    args: Namespace = get_parser().parse_args(argv)
    if args.debug:
        setup_logging(mode="cli", log_filename=None, console_log_level=logging.DEBUG)

    config_path = args.config or find_optbind_config()
    if config_path is None:
        console.print("[error]No optbind config found.[/error] Pass one with --config.")
        return 1

    try:
        cli = loader(config_path)
    except (OptbindError, ValueError, FileNotFoundError) as error:
        console.print(f"[error]Invalid config {escape(str(config_path))}:[/error] {escape(str(error))}")
        return 1

    tokens = list(args.tokens)
    if tokens[:1] == ["--"]:
        tokens = tokens[1:]
    if args.run:
        return cli.go(tokens)

    try:
        result = cli.parse(tokens)
    except VersionSignal:
        cli.print_version()
        return 0
    except HelpSignal as signal:
        cli.usage.render(signal.target, signal.path)
        return 0
    except ParseError as error:
        cli.report_error(error, tokens)
        return 1
    cli.render_bindings(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
