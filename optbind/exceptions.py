# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by optbind.

Registration problems (a malformed declaration, a duplicate key) are raised as
soon as the declaration is added. Parse problems are raised at the point the
offending token is seen and abort the parse. Every parse error carries the
structured data a driver needs to render a precise message without
re-parsing: the offending token, key or declaration.

Exception Hierarchy:
- OptbindError
    ├── DeclarationError
    ├── CommandAlreadyExistsError
    └── ParseError
        ├── OptionError
        │   ├── UnrecognizedOptionError
        │   ├── ExpectedValueAfterKeyError
        │   ├── InvalidKeyValueError
        │   └── OptionGroupMisuseError
        ├── ParameterError
        │   ├── MissingParameterError
        │   └── UnexpectedArgumentError
        └── RoutingError
            └── CommandNotFoundError

`InvalidKeyValueError.reason` is either a `ConversionFailure` or a
`ValidationFailure`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from optbind.parser.option import Key, Option
    from optbind.parser.option_group import OptionGroup
    from optbind.parser.parameter import Parameter
    from optbind.validators import Validator


class OptbindError(Exception):
    """Base exception for optbind."""


class DeclarationError(OptbindError):
    """Raised when an option, parameter or group is declared incorrectly."""


class CommandAlreadyExistsError(OptbindError):
    """Raised when a command name or alias is registered twice in a group."""


@dataclass(frozen=True)
class ConversionFailure:
    """The raw token could not be converted to the key's type."""

    value: str
    type_name: str
    detail: str = ""

    def describe(self) -> str:
        return f"'{self.value}' is not a valid {self.type_name}"


@dataclass(frozen=True)
class ValidationFailure:
    """The converted value was rejected by one of the key's validators."""

    value: Any
    validator: Validator

    @property
    def message(self) -> str:
        return self.validator.message

    def describe(self) -> str:
        return self.validator.message


class ParseError(OptbindError):
    """Raised when command-line tokens cannot be bound to a command."""


class OptionError(ParseError):
    """Raised for problems with option tokens or option values."""


class UnrecognizedOptionError(OptionError):
    """An option-shaped token matched no declared flag or key.

    `index` is the position of the token in the list handed to the parser.
    """

    def __init__(self, token: str, index: int | None = None):
        self.token = token
        self.index = index
        super().__init__(f"Unrecognized option: {token}")


class ExpectedValueAfterKeyError(OptionError):
    """A key was the last token, or was followed by another option."""

    def __init__(self, key: str, option: Option | None = None):
        self.key = key
        self.option = option
        super().__init__(f"Expected a value to follow: {key}")


class InvalidKeyValueError(OptionError):
    """A key's value failed conversion or validation."""

    def __init__(
        self,
        option: Key,
        key: str,
        reason: ConversionFailure | ValidationFailure,
    ):
        self.option = option
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid value passed to '{key}': {reason.describe()}")

    @property
    def is_conversion_error(self) -> bool:
        return isinstance(self.reason, ConversionFailure)

    @property
    def is_validation_error(self) -> bool:
        return isinstance(self.reason, ValidationFailure)


class OptionGroupMisuseError(OptionError):
    """An option group's restriction was violated."""

    def __init__(self, group: OptionGroup):
        self.group = group
        super().__init__(group.message)


class ParameterError(ParseError):
    """Raised for problems with positional tokens."""


class MissingParameterError(ParameterError):
    """A required positional parameter was never bound."""

    def __init__(self, parameter: Parameter):
        self.parameter = parameter
        super().__init__(f"Missing required parameter: {parameter.signature}")


class UnexpectedArgumentError(ParameterError):
    """More positional tokens arrived than the command has slots for."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unexpected argument: {token}")


class RoutingError(ParseError):
    """Raised when the tokens do not select a command."""


class CommandNotFoundError(RoutingError):
    """No command in the group matches the given name.

    `name` is None when the tokens ran out before a command was named.
    """

    def __init__(self, name: str | None, group: Any = None, path: list[str] | None = None):
        self.name = name
        self.group = group
        self.path: list[str] = list(path or [])
        if name is None:
            super().__init__("No command given")
        else:
            super().__init__(f"Command not found: {name}")
