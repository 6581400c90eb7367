# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Command` and `CommandGroup`, the declaration containers a parse runs
against.

A `Command` owns its options, positional parameters and option groups, all
registered up front and checked for conflicts as they are added. A
`CommandGroup` owns child commands (or nested groups) plus global options that
are recognized before the command name and by every command beneath it.

Both expose `is_group` so the resolver can walk a tree of groups without
depending on concrete classes.

Example:
    run = Command("run", short_description="Run an executable")
    executable = run.add_parameter(Parameter("executable"))
    args = run.add_parameter(CollectedParameter("args"))
    verbose = run.add_flag("-v", "--verbose")

    group = CommandGroup("tester", children=[run])
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable

from optbind.exceptions import CommandAlreadyExistsError, DeclarationError
from optbind.logger import logger
from optbind.parser.option import CollectedKey, Flag, Key, Option
from optbind.parser.option_group import OptionGroup
from optbind.parser.parameter import CollectedParameter, Parameter

if TYPE_CHECKING:
    from optbind.parser.parser import ParseResult


def _help_flag(description: str) -> Flag:
    return Flag("-h", "--help", help=description, dest="help")


class _OptionRegistry:
    """Key and dest bookkeeping shared by commands and command groups."""

    def __init__(self) -> None:
        self._options: list[Option] = []
        self._keys: dict[str, Option] = {}
        self._dests: set[str] = set()

    def _register_option(self, option: Option, owner: str) -> Option:
        if not isinstance(option, Option):
            raise DeclarationError(f"{option!r} is not an option")
        for key in option.keys:
            if key in self._keys:
                existing = self._keys[key]
                raise DeclarationError(
                    f"Key '{key}' is already used by '{existing.dest}' in '{owner}'"
                )
        if option.dest in self._dests:
            raise DeclarationError(
                f"Destination '{option.dest}' is already defined in '{owner}'. "
                "Define a unique 'dest' for each option."
            )
        for key in option.keys:
            self._keys[key] = option
        self._dests.add(option.dest)
        self._options.append(option)
        return option

    def find_option(self, key: str) -> Option | None:
        return self._keys.get(key)


class Command(_OptionRegistry):
    """
    A concrete, invocable command.

    Attributes:
        name (str): The name this command is invoked with.
        short_description (str): One line shown in group usage listings.
        aliases (list[str]): Alternative names.
        help_flag (Flag | None): The `-h/--help` flag, when enabled.
    """

    is_group = False

    def __init__(
        self,
        name: str,
        *,
        short_description: str = "",
        aliases: list[str] | None = None,
        options: Iterable[Option] | None = None,
        parameters: Iterable[Parameter] | None = None,
        option_groups: Iterable[OptionGroup] | None = None,
        execute: Callable[[ParseResult], int | None] | None = None,
        help_flag: bool = True,
        help_text: str = "",
    ) -> None:
        super().__init__()
        if not name or not isinstance(name, str) or name.startswith("-"):
            raise DeclarationError(f"Invalid command name: {name!r}")
        self.name: str = name
        self.short_description: str = short_description
        self.aliases: list[str] = list(aliases or [])
        self.help_text: str = help_text
        self._execute = execute
        self._parameters: list[Parameter] = []
        self._option_groups: list[OptionGroup] = []
        self.help_flag: Flag | None = None
        if help_flag:
            self.help_flag = _help_flag("Show help information for this command")
            self._register_option(self.help_flag, self.name)
        for option in options or []:
            self.add_option(option)
        for parameter in parameters or []:
            self.add_parameter(parameter)
        for group in option_groups or []:
            self.add_option_group(group)

    @property
    def options(self) -> tuple[Option, ...]:
        """Declared options, without the help flag."""
        return tuple(option for option in self._options if option is not self.help_flag)

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return tuple(self._parameters)

    @property
    def option_groups(self) -> tuple[OptionGroup, ...]:
        return tuple(self._option_groups)

    @property
    def required_parameters(self) -> list[Parameter]:
        return [p for p in self._parameters if p.required and not p.collects]

    @property
    def optional_parameters(self) -> list[Parameter]:
        return [p for p in self._parameters if not p.required and not p.collects]

    @property
    def collected_parameter(self) -> CollectedParameter | None:
        last = self._parameters[-1] if self._parameters else None
        return last if isinstance(last, CollectedParameter) else None

    @property
    def signature(self) -> str:
        return " ".join(parameter.signature for parameter in self._parameters)

    def add_option(self, option: Option) -> Option:
        return self._register_option(option, self.name)

    def add_flag(self, *keys: str, **kwargs: Any) -> Flag:
        flag = Flag(*keys, **kwargs)
        self.add_option(flag)
        return flag

    def add_key(self, *keys: str, **kwargs: Any) -> Key:
        key = Key(*keys, **kwargs)
        self.add_option(key)
        return key

    def add_collected_key(self, *keys: str, **kwargs: Any) -> CollectedKey:
        key = CollectedKey(*keys, **kwargs)
        self.add_option(key)
        return key

    def add_parameter(self, parameter: Parameter) -> Parameter:
        """
        Register a positional parameter.

        Raises:
            DeclarationError: If the parameter comes after a collected parameter,
                a required parameter follows an optional one, or its dest clashes.
        """
        if not isinstance(parameter, Parameter):
            raise DeclarationError(f"{parameter!r} is not a parameter")
        if self.collected_parameter is not None:
            raise DeclarationError(
                f"'{parameter.name}' cannot follow the collected parameter "
                f"'{self.collected_parameter.name}' in '{self.name}'"
            )
        if (
            parameter.required
            and not parameter.collects
            and self.optional_parameters
        ):
            raise DeclarationError(
                f"Required parameter '{parameter.name}' cannot follow an optional "
                f"parameter in '{self.name}'"
            )
        if parameter.dest in self._dests:
            raise DeclarationError(
                f"Destination '{parameter.dest}' is already defined in '{self.name}'"
            )
        self._dests.add(parameter.dest)
        self._parameters.append(parameter)
        return parameter

    def add_option_group(self, group: OptionGroup) -> OptionGroup:
        """Register an option group; every member must be an option of this command."""
        for option in group.options:
            if option not in self._options:
                raise DeclarationError(
                    f"Option {option.identifier} in group '{group.name}' "
                    f"is not declared on '{self.name}'"
                )
        self._option_groups.append(group)
        return group

    def execute(self, result: ParseResult) -> int | None:
        """Run the command with a successful parse result."""
        if self._execute is None:
            logger.debug("Command '%s' has no execute callable", self.name)
            return None
        return self._execute(result)

    def __str__(self) -> str:
        return (
            f"Command(name={self.name!r}, options={len(self.options)}, "
            f"parameters={len(self._parameters)}, groups={len(self._option_groups)})"
        )

    def __repr__(self) -> str:
        return str(self)


class CommandGroup(_OptionRegistry):
    """
    A set of candidate commands (or nested groups) plus global options.

    Global options are matched before the command name and remain in scope
    while the selected command's own tokens are scanned.
    """

    is_group = True

    def __init__(
        self,
        name: str,
        *,
        short_description: str = "",
        aliases: list[str] | None = None,
        children: Iterable[Command | CommandGroup] | None = None,
        global_options: Iterable[Option] | None = None,
        option_groups: Iterable[OptionGroup] | None = None,
        help_flag: bool = True,
    ) -> None:
        super().__init__()
        if not name or not isinstance(name, str):
            raise DeclarationError(f"Invalid command group name: {name!r}")
        self.name: str = name
        self.short_description: str = short_description
        self.aliases: list[str] = list(aliases or [])
        self._children: dict[str, Command | CommandGroup] = {}
        self._child_list: list[Command | CommandGroup] = []
        self._option_groups: list[OptionGroup] = []
        self.help_flag: Flag | None = None
        if help_flag:
            self.help_flag = _help_flag("Show help information")
        for child in children or []:
            self.add_command(child)
        for option in global_options or []:
            self.add_global_option(option)
        for group in option_groups or []:
            self.add_option_group(group)

    @property
    def children(self) -> tuple[Command | CommandGroup, ...]:
        return tuple(self._child_list)

    @property
    def global_options(self) -> tuple[Option, ...]:
        return tuple(self._options)

    @property
    def option_groups(self) -> tuple[OptionGroup, ...]:
        return tuple(self._option_groups)

    def add_command(self, child: Command | CommandGroup) -> Command | CommandGroup:
        if not hasattr(child, "is_group"):
            raise DeclarationError(f"{child!r} is not a command or command group")
        for name in [child.name, *child.aliases]:
            if name in self._children:
                raise CommandAlreadyExistsError(
                    f"'{name}' is already registered in '{self.name}'"
                )
        for name in [child.name, *child.aliases]:
            self._children[name] = child
        self._child_list.append(child)
        return child

    def add_commands(self, children: Iterable[Command | CommandGroup]) -> None:
        for child in children:
            self.add_command(child)

    def add_global_option(self, option: Option) -> Option:
        if self.help_flag is not None and any(
            key in self.help_flag.keys for key in option.keys
        ):
            raise DeclarationError(
                f"Global option {option.identifier} clashes with the help flag"
            )
        return self._register_option(option, self.name)

    def add_option_group(self, group: OptionGroup) -> OptionGroup:
        for option in group.options:
            if option not in self._options:
                raise DeclarationError(
                    f"Option {option.identifier} in group '{group.name}' "
                    f"is not a global option of '{self.name}'"
                )
        self._option_groups.append(group)
        return group

    def find(self, name: str) -> Command | CommandGroup | None:
        """Return the child registered under `name` or one of its aliases."""
        return self._children.get(name)

    def __str__(self) -> str:
        return (
            f"CommandGroup(name={self.name!r}, children={len(self._child_list)}, "
            f"global_options={len(self._options)})"
        )

    def __repr__(self) -> str:
        return str(self)
