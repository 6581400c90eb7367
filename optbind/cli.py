# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `CLI`, the driver that sits on top of the parsing engine.

A `CLI` is the root `CommandGroup` of a program. `CLI.go()` normalizes the
process arguments, parses them, and turns the outcome into output and an exit
code: help and version requests print and return 0, parse errors are rendered
with usage and return 1, and a successful parse runs the selected command.

How unrecognized options are reported is a per-CLI policy: see
`UnrecognizedOptionsPrintingBehavior` and `fail_on_unrecognized`. With
`fail_on_unrecognized=False` the offending token is dropped and the parse is
run again.

Example:
    cli = CLI("greeter", version="1.0.0", commands=[greet])
    sys.exit(cli.go())
"""
from __future__ import annotations

import sys
from enum import Enum
from typing import Iterable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from optbind.command import Command, CommandGroup
from optbind.console import console as default_console
from optbind.exceptions import (
    CommandNotFoundError,
    DeclarationError,
    OptbindError,
    ParseError,
    UnrecognizedOptionError,
)
from optbind.logger import logger
from optbind.parser.arguments import ArgumentList
from optbind.parser.normalizer import OptionSplitter
from optbind.parser.option import Flag, Option
from optbind.parser.option_group import OptionGroup
from optbind.parser.parser import ParseResult, Parser
from optbind.signals import HelpSignal, VersionSignal
from optbind.usage import UsageRenderer

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class UnrecognizedOptionsPrintingBehavior(Enum):
    """What to print when an unrecognized option is passed."""

    PRINT_NONE = "none"
    PRINT_ONLY_UNRECOGNIZED_OPTIONS = "only_unrecognized_options"
    PRINT_ONLY_USAGE = "only_usage"
    PRINT_ALL = "all"

    @classmethod
    def _missing_(cls, value: object) -> UnrecognizedOptionsPrintingBehavior:
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: {value!r}. Must be one of: {valid}")

    @property
    def prints_message(self) -> bool:
        return self in (
            UnrecognizedOptionsPrintingBehavior.PRINT_ONLY_UNRECOGNIZED_OPTIONS,
            UnrecognizedOptionsPrintingBehavior.PRINT_ALL,
        )

    @property
    def prints_usage(self) -> bool:
        return self in (
            UnrecognizedOptionsPrintingBehavior.PRINT_ONLY_USAGE,
            UnrecognizedOptionsPrintingBehavior.PRINT_ALL,
        )


class CLI(CommandGroup):
    """
    The root command group of a program plus the policies for driving it.

    Attributes:
        version (str | None): Printed for `--version` when set.
        description (str): Shown at the top of the root usage statement.
        unrecognized_behavior (UnrecognizedOptionsPrintingBehavior): What to
            print for unrecognized options.
        fail_on_unrecognized (bool): Whether an unrecognized option ends the
            run with exit code 1.
    """

    def __init__(
        self,
        name: str,
        version: str | None = None,
        description: str = "",
        commands: Iterable[Command | CommandGroup] | None = None,
        global_options: Iterable[Option] | None = None,
        option_groups: Iterable[OptionGroup] | None = None,
        unrecognized_behavior: UnrecognizedOptionsPrintingBehavior | str = (
            UnrecognizedOptionsPrintingBehavior.PRINT_ALL
        ),
        fail_on_unrecognized: bool = True,
        split_options: bool = True,
        console: Console | None = None,
        parser: Parser | None = None,
    ) -> None:
        self.version_flag: Flag | None = None
        if version is not None:
            self.version_flag = Flag(
                "--version", help="Show the version and exit", dest="version"
            )
        super().__init__(
            name,
            short_description=description,
            children=commands,
            global_options=global_options,
            option_groups=option_groups,
        )
        self.version: str | None = version
        self.description: str = description
        self.unrecognized_behavior = UnrecognizedOptionsPrintingBehavior(
            unrecognized_behavior
        )
        self.fail_on_unrecognized: bool = fail_on_unrecognized
        self.split_options: bool = split_options
        self.console: Console = console or default_console
        self.parser: Parser = parser or Parser()
        self.usage = UsageRenderer(name, console=self.console)

    def add_global_option(self, option: Option) -> Option:
        if self.version_flag is not None and any(
            key in self.version_flag.keys for key in option.keys
        ):
            raise DeclarationError(
                f"Global option {option.identifier} clashes with the version flag"
            )
        return super().add_global_option(option)

    def _normalize(self, argv: Sequence[str]) -> list[str]:
        arguments = ArgumentList(argv)
        if self.split_options:
            OptionSplitter().manipulate(arguments)
        return arguments.remaining()

    def parse(self, argv: Sequence[str] | None = None) -> ParseResult:
        """
        Normalize and parse `argv` (defaults to `sys.argv[1:]`).

        Unrecognized options are reported according to the CLI's policy; with
        `fail_on_unrecognized=False` they are dropped and parsing continues.

        Raises:
            ParseError: If the tokens cannot be bound.
            HelpSignal: If a help flag was passed.
            VersionSignal: If `--version` was passed and a version is set.
        """
        tokens = self._normalize(sys.argv[1:] if argv is None else argv)
        while True:
            try:
                return self.parser.parse(self, list(tokens))
            except UnrecognizedOptionError as error:
                if (
                    self.fail_on_unrecognized
                    or error.index is None
                    or tokens[error.index : error.index + 1] != [error.token]
                ):
                    raise
                self.report_unrecognized(error, tokens)
                del tokens[error.index]
                logger.debug("Dropped unrecognized option %s and retrying", error.token)

    def go(self, argv: Sequence[str] | None = None) -> int:
        """Parse `argv`, run the selected command and return an exit code."""
        tokens = list(sys.argv[1:] if argv is None else argv)
        try:
            result = self.parse(tokens)
        except VersionSignal:
            self.print_version()
            return EXIT_SUCCESS
        except HelpSignal as signal:
            self.usage.render(signal.target, signal.path)
            return EXIT_SUCCESS
        except UnrecognizedOptionError as error:
            self.report_unrecognized(error, tokens)
            return EXIT_FAILURE
        except ParseError as error:
            self.report_error(error, tokens)
            return EXIT_FAILURE

        return self.execute(result)

    def print_version(self) -> None:
        self.console.print(f"{self.name} version {escape(str(self.version))}")

    def execute(self, result: ParseResult) -> int:
        logger.debug("Executing '%s'", result.command.name)
        try:
            outcome = result.command.execute(result)
        except OptbindError as error:
            logger.error("Command '%s' failed: %s", result.command.name, error)
            self.console.print(f"[error]Error:[/error] {escape(str(error))}")
            return EXIT_FAILURE
        if outcome is None:
            return EXIT_SUCCESS
        return int(outcome)

    def _usage_target(self, tokens: Sequence[str]) -> tuple[Command | CommandGroup, list[str]]:
        """Best-effort guess of the command the user was invoking."""
        node: Command | CommandGroup = self
        path: list[str] = []
        for token in tokens:
            if not node.is_group:
                break
            child = node.find(token)
            if child is None:
                continue
            node = child
            path.append(token)
        return node, path

    def report_unrecognized(self, error: UnrecognizedOptionError, tokens: Sequence[str]) -> None:
        behavior = self.unrecognized_behavior
        if behavior.prints_message:
            self.console.print(f"[error]{escape(str(error))}[/error]")
            if behavior.prints_usage:
                self.console.print()
        if behavior.prints_usage:
            self.usage.render(*self._usage_target(tokens))

    def report_error(self, error: ParseError, tokens: Sequence[str]) -> None:
        if isinstance(error, CommandNotFoundError):
            group = error.group if error.group is not None else self
            self.console.print(f"[error]{escape(str(error))}[/error]\n")
            self.usage.render(group, error.path)
            return
        self.console.print(f"[error]Error:[/error] {escape(str(error))}\n")
        self.usage.render(*self._usage_target(tokens))

    def render_bindings(self, result: ParseResult) -> None:
        """Print a table of every declaration in scope and its value."""
        table = Table(title=" ".join([self.name, *result.path]))
        table.add_column("Destination", style="option")
        table.add_column("Value", style="value")
        table.add_column("Passed")
        declarations = [
            *result.global_options,
            *result.command.options,
            *result.command.parameters,
        ]
        for declaration in declarations:
            table.add_row(
                declaration.dest,
                escape(repr(result.get(declaration))),
                "yes" if result.present(declaration) else "",
            )
        self.console.print(table)

    def go_and_exit(self, argv: Sequence[str] | None = None) -> None:
        sys.exit(self.go(argv))
