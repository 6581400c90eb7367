# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements `Parser`, the engine that binds command-line tokens to a
command's declarations, and `Scanner`, the left-to-right state machine at its
core.

A parse runs in three steps:
1. `CommandResolver` consumes global options and routing names to select the
   command (skipped when parsing directly against a `Command`).
2. `Scanner` walks the remaining tokens. While scanning, a token matching a
   flag or key is bound, any other option-shaped token is an error, and a
   plain token fills the next open required parameter, then the next open
   optional parameter. Once every required and optional parameter is bound
   and the command declares a collected parameter, the scanner locks: every
   remaining token, whatever its shape, is appended to the collected
   parameter. Without a collected parameter the scanner never locks, so
   options may appear anywhere.
3. Option groups of the command, then those of every group routed through,
   are checked against the bindings.

Any failure raises a `ParseError` subclass at the point it is detected and
aborts the parse. Options are never mutated; the values live in the
`Bindings` carried by the returned `ParseResult`.

Example Usage:
    cmd = Command("run", parameters=[Parameter("executable"), CollectedParameter("args")])
    verbose = cmd.add_flag("-v")
    result = Parser().parse(CommandGroup("tester", children=[cmd]), ["run", "-v", "cli", "arg"])
    result[verbose]  # True
    result.as_dict()  # {'verbose': True, 'executable': 'cli', 'args': ['arg']}
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from optbind.exceptions import (
    MissingParameterError,
    OptionGroupMisuseError,
    ParseError,
    UnexpectedArgumentError,
    UnrecognizedOptionError,
)
from optbind.logger import logger
from optbind.parser.arguments import ArgumentList
from optbind.parser.option import Option
from optbind.parser.option_group import OptionGroup
from optbind.parser.parameter import Parameter
from optbind.parser.parser_types import Bindings, Declaration, ScanMode
from optbind.parser.resolver import CommandResolver, RoutingResult
from optbind.parser.utils import is_option_shaped
from optbind.signals import HelpSignal, VersionSignal

if TYPE_CHECKING:
    from optbind.command import Command, CommandGroup


@dataclass
class ParseResult:
    """
    The outcome of a successful parse.

    Attributes:
        command (Command): The command selected for invocation.
        bindings (Bindings): Values bound during the parse.
        path (list[str]): Names used to route to the command.
        positional_tokens (list[str]): Tokens assigned to parameters, in order.
        global_options (list[Option]): Global options that were in scope.
    """

    command: Command
    bindings: Bindings
    path: list[str] = field(default_factory=list)
    positional_tokens: list[str] = field(default_factory=list)
    global_options: list[Option] = field(default_factory=list)

    def get(self, declaration: Declaration) -> Any:
        """Return the bound value of `declaration`, or its default."""
        return self.bindings.get(declaration)

    def __getitem__(self, declaration: Declaration) -> Any:
        return self.get(declaration)

    def present(self, declaration: Declaration) -> bool:
        """True if the parse bound a value to `declaration`."""
        return self.bindings.is_bound(declaration)

    def as_dict(self) -> dict[str, Any]:
        """Map every declaration in scope to its value, defaults included."""
        declarations: list[Declaration] = [
            *self.global_options,
            *self.command.options,
            *self.command.parameters,
        ]
        return {
            declaration.dest: self.bindings.get(declaration)
            for declaration in declarations
        }


class Scanner:
    """Binds one command's tokens, left to right."""

    def __init__(
        self,
        command: Command,
        arguments: ArgumentList,
        bindings: Bindings,
        global_options: Iterable[Option] = (),
        path: Sequence[str] = (),
        version_flag: Option | None = None,
    ) -> None:
        self.command = command
        self.version_flag = version_flag
        self.arguments = arguments
        self.bindings = bindings
        self.path = list(path)
        self.mode = ScanMode.SCANNING
        self.positional_tokens: list[str] = []
        self._global_options: dict[str, Option] = {}
        for option in global_options:
            for key in option.keys:
                self._global_options.setdefault(key, option)
        self._open_required: deque[Parameter] = deque(command.required_parameters)
        self._open_optional: deque[Parameter] = deque(command.optional_parameters)
        self._collected = command.collected_parameter

    def scan(self) -> None:
        """
        Consume every remaining token, then check parameters and option groups.

        Raises:
            ParseError: On the first malformed token, unfilled required
                parameter or violated option group.
            HelpSignal: If the command's help flag is seen while scanning.
            VersionSignal: If the CLI's version flag is seen while scanning.
        """
        while True:
            token = self.arguments.pop()
            if token is None:
                break
            if self.mode is ScanMode.LOCKED:
                self._collect(token)
            else:
                self._handle_token(token)
        self._check_parameters()
        check_option_groups(self.command.option_groups, self.bindings)

    def _lookup(self, token: str) -> Option | None:
        option = self.command.find_option(token)
        if option is None:
            option = self._global_options.get(token)
        return option

    def _handle_token(self, token: str) -> None:
        option = self._lookup(token)
        if option is not None:
            if option is self.command.help_flag:
                raise HelpSignal(self.command, self.path)
            option.consume(token, self.arguments, self.bindings)
        elif self.version_flag is not None and self.version_flag.matches(token):
            raise VersionSignal()
        elif is_option_shaped(token):
            raise UnrecognizedOptionError(token)
        else:
            self._bind_positional(token)

    def _bind_positional(self, token: str) -> None:
        if self._open_required:
            parameter = self._open_required.popleft()
        elif self._open_optional:
            parameter = self._open_optional.popleft()
        elif self._collected is not None:
            self._lock()
            self._collect(token)
            return
        else:
            raise UnexpectedArgumentError(token)

        self.bindings.bind(parameter, token)
        self.positional_tokens.append(token)
        logger.debug("Parameter '%s' bound to %r", parameter.name, token)
        if self._collected is not None and not self._open_required and not self._open_optional:
            self._lock()

    def _lock(self) -> None:
        if self.mode is not ScanMode.LOCKED:
            self.mode = ScanMode.LOCKED
            logger.debug(
                "Scanner locked onto collected parameter '%s'",
                self._collected.name if self._collected else None,
            )

    def _collect(self, token: str) -> None:
        assert self._collected is not None, "locked without a collected parameter"
        self.bindings.append(self._collected, token)
        self.positional_tokens.append(token)

    def _check_parameters(self) -> None:
        if self._open_required:
            raise MissingParameterError(self._open_required[0])
        if (
            self._collected is not None
            and self._collected.required
            and not self.bindings.is_bound(self._collected)
        ):
            raise MissingParameterError(self._collected)


def check_option_groups(groups: Iterable[OptionGroup], bindings: Bindings) -> None:
    """Raise `OptionGroupMisuseError` for the first violated group."""
    for group in groups:
        if not group.check(bindings):
            logger.debug(
                "Option group '%s' violated with %d present", group.name, group.count(bindings)
            )
            raise OptionGroupMisuseError(group)


class Parser:
    """
    Selects a command and binds its declarations from a token list.

    The parser holds no per-parse state and can be reused; each call builds a
    fresh `Bindings` map.
    """

    def __init__(self, resolver: CommandResolver | None = None) -> None:
        self.resolver: CommandResolver = resolver or CommandResolver()

    def parse(
        self,
        target: CommandGroup | Command,
        arguments: ArgumentList | Sequence[str],
    ) -> ParseResult:
        """
        Parse `arguments` against a command group, or directly against a command.

        Args:
            target: The `CommandGroup` to route through, or a `Command` to bind
                without routing.
            arguments: The tokens, typically `sys.argv[1:]`. An `ArgumentList`
                is consumed in place.

        Returns:
            ParseResult: The selected command and its bindings.

        Raises:
            ParseError: The structured failure describing malformed input.
            HelpSignal: If a help flag was passed.
            VersionSignal: If the CLI's version flag was passed.
        """
        if not isinstance(arguments, ArgumentList):
            arguments = ArgumentList(arguments)
        bindings = Bindings()
        total = len(arguments)
        try:
            if target.is_group:
                routing = self.resolver.resolve(target, arguments, bindings)
            else:
                routing = RoutingResult(command=target, path=[target.name], groups=[])
            global_options = routing.global_options
            scanner = Scanner(
                routing.command,
                arguments,
                bindings,
                global_options=global_options,
                path=routing.path,
                version_flag=routing.version_flag,
            )
            scanner.scan()
            for group in routing.groups:
                check_option_groups(group.option_groups, bindings)
        except ParseError as error:
            if isinstance(error, UnrecognizedOptionError) and error.index is None:
                error.index = total - len(arguments) - 1
            logger.debug("Parse failed: %s", error)
            raise

        logger.debug("Parsed '%s' with %d binding(s)", routing.command.name, len(bindings))
        return ParseResult(
            command=routing.command,
            bindings=bindings,
            path=routing.path,
            positional_tokens=scanner.positional_tokens,
            global_options=global_options,
        )
