# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Usage statements for commands and command groups.

`UsageRenderer` builds plain-text usage from declarations only; it never looks
at a parse. The text can be returned as a string (for tests or embedding) or
printed through the Rich console with the theme's `usage` style.

Command usage looks like:

    Usage: tester run <executable> [<args>] ... [options]

    -v, --verbose                            Print more output
    -h, --help                               Show help information for this command
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from rich.console import Console
from rich.markup import escape

from optbind.console import console as default_console
from optbind.parser.option import Option

if TYPE_CHECKING:
    from optbind.command import Command, CommandGroup

USAGE_PADDING = 40


def pad(first_component: str, description: str, width: int = USAGE_PADDING) -> str:
    if not description:
        return first_component
    spacing = " " * max(width - len(first_component), 1)
    return f"{first_component}{spacing}{description}"


class UsageRenderer:
    """Builds and prints usage statements for one program."""

    def __init__(self, program: str, console: Console | None = None) -> None:
        self.program = program
        self.console: Console = console or default_console

    def option_lines(self, options: Iterable[Option]) -> list[str]:
        return [pad(option.usage_label, option.help) for option in options]

    def _prefix(self, path: Sequence[str]) -> str:
        return " ".join([self.program, *path])

    def command_usage(self, command: Command, path: Sequence[str] = ()) -> str:
        message = f"Usage: {self._prefix(path or [command.name])}"
        if command.signature:
            message += f" {command.signature}"

        options = list(command.options)
        if command.help_flag is not None:
            options.append(command.help_flag)
        if not options:
            return message + " (no options)\n"

        message += " [options]\n"
        if command.help_text:
            message += f"\n{command.help_text}\n"
        message += "\n" + "\n".join(self.option_lines(options)) + "\n"
        return message

    def group_usage(self, group: CommandGroup, path: Sequence[str] = ()) -> str:
        message = f"Usage: {self._prefix(path)} <command> [options]\n"
        if group.short_description:
            message += f"\n{group.short_description}\n"
        if group.children:
            message += "\nCommands:\n"
            for child in group.children:
                message += f"  {pad(child.name, child.short_description, USAGE_PADDING - 2)}\n"
        options = list(group.global_options)
        version_flag = getattr(group, "version_flag", None)
        if version_flag is not None:
            options.append(version_flag)
        if group.help_flag is not None:
            options.append(group.help_flag)
        if options:
            message += "\nOptions:\n"
            for line in self.option_lines(options):
                message += f"  {line}\n"
        return message

    def usage_for(self, target: Command | CommandGroup, path: Sequence[str] = ()) -> str:
        if target.is_group:
            return self.group_usage(target, path)
        return self.command_usage(target, path)

    def render(self, target: Command | CommandGroup, path: Sequence[str] = ()) -> None:
        """Print the usage statement for `target` to the console."""
        text = self.usage_for(target, path)
        first, _, rest = text.partition("\n")
        self.console.print(f"[usage]{escape(first)}[/usage]")
        if rest:
            self.console.print(escape(rest), end="")
