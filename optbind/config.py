# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Configuration loader for declarative optbind command-line interfaces.

A YAML or TOML file describes the program, its global options, and its commands
with their options, parameters and option groups. Each section is validated by
a pydantic model and converted into the same `Command`, `CommandGroup` and
`CLI` objects used when declaring a CLI in code.

Example (YAML):
    name: tester
    version: 1.0.0
    global_options:
      - keys: ["-y", "--yes"]
    commands:
      - name: run
        action: my_module.run
        parameters:
          - name: executable
          - name: args
            kind: collected
        options:
          - keys: ["-t", "--times"]
            kind: key
            type: int
            validators:
              - kind: greater_than
                value: 0
"""
from __future__ import annotations

import importlib
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Literal

import toml
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from optbind import validators as validator_factories
from optbind.cli import CLI, UnrecognizedOptionsPrintingBehavior
from optbind.command import Command, CommandGroup
from optbind.exceptions import DeclarationError
from optbind.logger import logger
from optbind.parser.option import CollectedKey, Flag, Key, Option
from optbind.parser.option_group import OptionGroup, Restriction
from optbind.parser.parameter import (
    CollectedParameter,
    OptionalParameter,
    Parameter,
)
from optbind.validators import Validator

MAX_GROUP_DEPTH = 5

TYPE_MAP: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "datetime": datetime,
    "path": Path,
}

VALIDATOR_MAP: dict[str, Callable[..., Validator]] = {
    "allowing": validator_factories.allowing,
    "rejecting": validator_factories.rejecting,
    "greater_than": validator_factories.greater_than,
    "less_than": validator_factories.less_than,
    "within": validator_factories.within,
    "contains": validator_factories.contains,
    "matching": validator_factories.matching,
}

_SPREAD_VALIDATORS = {"allowing", "rejecting", "within"}


def import_action(dotted_path: str) -> Callable[..., Any]:
    """Dynamically imports a callable from a dotted path like 'my.module.func'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise DeclarationError(f"Invalid action path: {dotted_path}")
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise DeclarationError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        action = getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        raise DeclarationError(
            f"Module '{module_path}' has no attribute '{attr}'"
        ) from error
    if not callable(action):
        raise DeclarationError(f"'{dotted_path}' is not callable")
    return action


class RawValidator(BaseModel):
    """A validator reference such as `{kind: greater_than, value: 18}`."""

    kind: str
    value: Any = None
    message: str | None = None

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, value: str) -> str:
        if value not in VALIDATOR_MAP:
            valid = ", ".join(VALIDATOR_MAP)
            raise ValueError(f"Unknown validator '{value}'. Must be one of: {valid}")
        return value

    def to_validator(self) -> Validator:
        factory = VALIDATOR_MAP[self.kind]
        if self.kind in _SPREAD_VALIDATORS:
            values = self.value if isinstance(self.value, (list, tuple)) else [self.value]
            return factory(*values, message=self.message)
        return factory(self.value, message=self.message)


class RawOption(BaseModel):
    """Raw option model: a flag, key or collected key."""

    keys: list[str]
    kind: Literal["flag", "key", "collected_key"] = "flag"
    help: str = ""
    dest: str | None = None
    type: str = "str"
    default: Any = None
    value_signature: str = "value"
    validators: list[RawValidator] = Field(default_factory=list)

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        if value not in TYPE_MAP:
            valid = ", ".join(TYPE_MAP)
            raise ValueError(f"Unknown type '{value}'. Must be one of: {valid}")
        return value

    @model_validator(mode="after")
    def validate_flag_fields(self) -> RawOption:
        if self.kind == "flag" and self.validators:
            raise ValueError("Flags cannot declare validators")
        if self.kind == "flag" and self.default not in (None, True, False):
            raise ValueError("Flag defaults must be true or false")
        return self

    def to_option(self) -> Option:
        if self.kind == "flag":
            return Flag(
                *self.keys, help=self.help, dest=self.dest, default=bool(self.default)
            )
        kwargs: dict[str, Any] = {
            "type": TYPE_MAP[self.type],
            "validators": [raw.to_validator() for raw in self.validators],
            "help": self.help,
            "dest": self.dest,
            "value_signature": self.value_signature,
        }
        if self.kind == "collected_key":
            return CollectedKey(*self.keys, default=self.default, **kwargs)
        return Key(*self.keys, default=self.default, **kwargs)


class RawParameter(BaseModel):
    """Raw positional parameter model."""

    name: str
    kind: Literal["required", "optional", "collected"] = "required"
    help: str = ""
    dest: str | None = None
    required: bool = False

    def to_parameter(self) -> Parameter:
        if self.kind == "optional":
            return OptionalParameter(self.name, help=self.help, dest=self.dest)
        if self.kind == "collected":
            return CollectedParameter(
                self.name, help=self.help, dest=self.dest, required=self.required
            )
        return Parameter(self.name, help=self.help, dest=self.dest)


class RawOptionGroup(BaseModel):
    """Raw option group model; members are option dests."""

    restriction: Restriction
    members: list[str]
    name: str | None = None

    @field_validator("restriction", mode="before")
    @classmethod
    def validate_restriction(cls, value: Any) -> Restriction:
        return Restriction(value)

    def to_group(self, options: dict[str, Option], owner: str) -> OptionGroup:
        missing = [member for member in self.members if member not in options]
        if missing:
            raise DeclarationError(
                f"Option group in '{owner}' refers to unknown options: {', '.join(missing)}"
            )
        return OptionGroup(
            [options[member] for member in self.members],
            self.restriction,
            name=self.name,
        )


class RawCommand(BaseModel):
    """Raw command model for optbind configuration."""

    name: str
    short_description: str = ""
    help_text: str = ""
    aliases: list[str] = Field(default_factory=list)
    action: str | None = None
    options: list[RawOption] = Field(default_factory=list)
    parameters: list[RawParameter] = Field(default_factory=list)
    option_groups: list[RawOptionGroup] = Field(default_factory=list)
    help_flag: bool = True

    def to_command(self) -> Command:
        command = Command(
            self.name,
            short_description=self.short_description,
            aliases=self.aliases,
            execute=import_action(self.action) if self.action else None,
            help_flag=self.help_flag,
            help_text=self.help_text,
        )
        for raw_option in self.options:
            command.add_option(raw_option.to_option())
        for raw_parameter in self.parameters:
            command.add_parameter(raw_parameter.to_parameter())
        by_dest = {option.dest: option for option in command.options}
        for raw_group in self.option_groups:
            command.add_option_group(raw_group.to_group(by_dest, self.name))
        return command


class RawGroup(BaseModel):
    """Raw nested command group, declared inline or in a separate file."""

    name: str
    short_description: str = ""
    aliases: list[str] = Field(default_factory=list)
    config: str | None = None
    commands: list[RawCommand] = Field(default_factory=list)
    groups: list[RawGroup] = Field(default_factory=list)
    global_options: list[RawOption] = Field(default_factory=list)
    option_groups: list[RawOptionGroup] = Field(default_factory=list)

    def to_group(self, parent_path: Path | None = None, depth: int = 0) -> CommandGroup:
        if depth > MAX_GROUP_DEPTH:
            raise ValueError(
                f"Maximum group depth exceeded ({MAX_GROUP_DEPTH} levels deep)"
            )
        source: RawGroup = self
        if self.config:
            config_path = Path(self.config)
            if parent_path:
                config_path = (parent_path.parent / config_path).resolve()
            source = RawGroup(**{**_read_config(config_path), "name": self.name})
            parent_path = config_path
        group = CommandGroup(
            self.name,
            short_description=self.short_description or source.short_description,
            aliases=self.aliases,
        )
        _populate_group(group, source, parent_path, depth)
        return group


RawGroup.model_rebuild()


def _populate_group(
    group: CommandGroup,
    raw: RawGroup | CLIConfig,
    parent_path: Path | None,
    depth: int,
) -> None:
    for raw_option in raw.global_options:
        group.add_global_option(raw_option.to_option())
    group.add_commands(raw_command.to_command() for raw_command in raw.commands)
    for raw_group in raw.groups:
        group.add_command(raw_group.to_group(parent_path, depth + 1))
    by_dest = {option.dest: option for option in group.global_options}
    for raw_option_group in raw.option_groups:
        group.add_option_group(raw_option_group.to_group(by_dest, group.name))


class CLIConfig(BaseModel):
    """Top-level optbind configuration model."""

    name: str
    version: str | None = None
    description: str = ""
    unrecognized_behavior: UnrecognizedOptionsPrintingBehavior = (
        UnrecognizedOptionsPrintingBehavior.PRINT_ALL
    )
    fail_on_unrecognized: bool = True
    split_options: bool = True
    global_options: list[RawOption] = Field(default_factory=list)
    option_groups: list[RawOptionGroup] = Field(default_factory=list)
    commands: list[RawCommand] = Field(default_factory=list)
    groups: list[RawGroup] = Field(default_factory=list)

    @field_validator("unrecognized_behavior", mode="before")
    @classmethod
    def validate_behavior(cls, value: Any) -> UnrecognizedOptionsPrintingBehavior:
        return UnrecognizedOptionsPrintingBehavior(value)

    @model_validator(mode="after")
    def validate_has_commands(self) -> CLIConfig:
        if not self.commands and not self.groups:
            raise ValueError("Configuration must declare at least one command or group")
        return self

    def to_cli(self, source_path: Path | None = None) -> CLI:
        cli = CLI(
            self.name,
            version=self.version,
            description=self.description,
            unrecognized_behavior=self.unrecognized_behavior,
            fail_on_unrecognized=self.fail_on_unrecognized,
            split_options=self.split_options,
        )
        _populate_group(cli, self, source_path, 0)
        return cli


def _read_config(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        if suffix in (".yaml", ".yml"):
            raw_config = yaml.safe_load(config_file)
        elif suffix == ".toml":
            raw_config = toml.load(config_file)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if not isinstance(raw_config, dict):
        raise ValueError(
            "Configuration file must contain a dictionary.\n"
            "Example:\n"
            "name: 'tester'\n"
            "commands:\n"
            "  - name: 'run'\n"
            "    parameters:\n"
            "      - name: 'executable'"
        )
    return raw_config


def loader(file_path: Path | str) -> CLI:
    """
    Load an optbind CLI from a YAML or TOML file.

    Args:
        file_path (Path | str): Path to the config file.

    Returns:
        CLI: The declared command-line interface.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file format is unsupported or its content is invalid.
        DeclarationError: If the declarations conflict with each other.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    raw_config = _read_config(path)
    logger.debug("Loaded config from %s", path)
    return CLIConfig(**raw_config).to_cli(path)


def find_optbind_config() -> Path | None:
    candidates = [
        Path.cwd() / "optbind.yaml",
        Path.cwd() / "optbind.toml",
        Path.cwd() / ".optbind.yaml",
        Path.cwd() / ".optbind.toml",
        Path(os.environ.get("OPTBIND_CONFIG", "optbind.yaml")),
        Path.home() / ".config" / "optbind" / "optbind.yaml",
        Path.home() / ".config" / "optbind" / "optbind.toml",
    ]
    return next((path for path in candidates if path.is_file()), None)
