# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `CommandResolver`, which consumes the leading tokens of an
`ArgumentList` to select the command to invoke.

Leading tokens that match a global option of the current group are bound
immediately. The first token that is not option-shaped names a child of the
current group; a nested group continues the walk with its own global options
added to those already in scope, a command ends it. Whatever remains in the
`ArgumentList` belongs to the selected command.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from optbind.exceptions import CommandNotFoundError, UnrecognizedOptionError
from optbind.logger import logger
from optbind.parser.arguments import ArgumentList
from optbind.parser.option import Option
from optbind.parser.parser_types import Bindings
from optbind.parser.utils import is_option_shaped
from optbind.signals import HelpSignal, VersionSignal

if TYPE_CHECKING:
    from optbind.command import Command, CommandGroup


@dataclass
class RoutingResult:
    """The command selected by routing and the groups walked to reach it."""

    command: Command
    path: list[str] = field(default_factory=list)
    groups: list[CommandGroup] = field(default_factory=list)
    version_flag: Option | None = None

    @property
    def global_options(self) -> list[Option]:
        """Global options in scope, innermost group first."""
        options: list[Option] = []
        for group in reversed(self.groups):
            options.extend(group.global_options)
        return options


class CommandResolver:
    """Selects a command from a (possibly nested) `CommandGroup`."""

    def resolve(
        self,
        command_group: CommandGroup,
        arguments: ArgumentList,
        bindings: Bindings,
    ) -> RoutingResult:
        """
        Consume routing tokens and global options from `arguments`.

        Raises:
            CommandNotFoundError: If a name matches no child, or the tokens run
                out before a command is named.
            UnrecognizedOptionError: If an option-shaped token matches no
                global option in scope.
            OptionError: If a global key is given a missing or invalid value.
            HelpSignal: If the group's help flag is passed.
            VersionSignal: If the root group's version flag is passed.
        """
        group = command_group
        groups: list[CommandGroup] = [group]
        path: list[str] = []
        option_map: dict[str, Option] = self._option_map(group)
        version_flag: Option | None = getattr(command_group, "version_flag", None)

        while True:
            token = arguments.pop()
            if token is None:
                logger.debug("No command given for group '%s'", group.name)
                raise CommandNotFoundError(None, group, path)

            if group.help_flag is not None and group.help_flag.matches(token):
                raise HelpSignal(group, path)

            option = option_map.get(token)
            if option is not None:
                option.consume(token, arguments, bindings)
                continue

            if version_flag is not None and version_flag.matches(token):
                raise VersionSignal()

            if is_option_shaped(token):
                raise UnrecognizedOptionError(token)

            child: Any = group.find(token)
            if child is None:
                logger.debug("No command '%s' in group '%s'", token, group.name)
                raise CommandNotFoundError(token, group, path)

            path.append(token)
            if child.is_group:
                logger.debug("Routing into group '%s'", child.name)
                group = child
                groups.append(group)
                option_map.update(self._option_map(group))
                continue

            logger.debug("Resolved command '%s' via %s", child.name, path)
            return RoutingResult(
                command=child, path=path, groups=groups, version_flag=version_flag
            )

    def _option_map(self, group: CommandGroup) -> dict[str, Option]:
        return {key: option for option in group.global_options for key in option.keys}
