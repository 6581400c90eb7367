# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the option declarations matched by exact key during a parse.

- `Flag`: A boolean toggle. Presence binds the opposite of its default, so
  `Flag("-q", default=True)` is an inverted flag that turns off when passed.
- `Key`: Consumes exactly one following token, converts it with `type` and runs
  each validator in order.
- `CollectedKey`: Like `Key`, but every occurrence under any alias appends to
  an ordered list.

Each option knows how to consume itself from an `ArgumentList` into a
`Bindings` map; the command resolver and the scanner share that logic.

Example:
    alpha = Flag("-a", "--alpha", help="Enable alpha")
    times = Key("-t", "--times", type=int, validators=[greater_than(0)])
    files = CollectedKey("-f", "--file")
"""
from __future__ import annotations

from typing import Any, Iterable

from optbind.exceptions import (
    ConversionFailure,
    DeclarationError,
    ExpectedValueAfterKeyError,
    InvalidKeyValueError,
    ValidationFailure,
)
from optbind.logger import logger
from optbind.parser.arguments import ArgumentList
from optbind.parser.parser_types import Bindings, Declaration
from optbind.parser.utils import (
    coerce_value,
    dest_from_keys,
    is_negative_number,
    is_option_shaped,
    type_name,
    validate_keys,
)
from optbind.validators import Validator


class Option(Declaration):
    """
    Base class for declarations identified by one or more exact keys.

    Attributes:
        keys (tuple[str, ...]): Short and long keys, e.g. `-v`, `--verbose`.
        dest (str): Destination name used in `ParseResult.as_dict()`.
        help (str): Help text for usage rendering.
    """

    def __init__(self, *keys: str, help: str = "", dest: str | None = None) -> None:
        super().__init__()
        validate_keys(keys)
        self.keys: tuple[str, ...] = tuple(keys)
        self.help: str = help
        self.dest: str = dest_from_keys(self.keys, dest)

    @property
    def identifier(self) -> str:
        return ", ".join(self.keys)

    @property
    def usage_label(self) -> str:
        return self.identifier

    def matches(self, token: str) -> bool:
        return token in self.keys

    def is_present(self, bindings: Bindings) -> bool:
        """True if this option ended the parse in a non-default state."""
        return bindings.is_bound(self)

    def consume(self, key: str, arguments: ArgumentList, bindings: Bindings) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(key) for key in self.keys)})"


class Flag(Option):
    """A boolean option that consumes no value token."""

    def __init__(
        self,
        *keys: str,
        help: str = "",
        dest: str | None = None,
        default: bool = False,
    ) -> None:
        super().__init__(*keys, help=help, dest=dest)
        if not isinstance(default, bool):
            raise DeclarationError(f"Flag default must be a bool, got {default!r}")
        self.default: bool = default

    @property
    def default_value(self) -> bool:
        return self.default

    @property
    def toggled(self) -> bool:
        return not self.default

    def consume(self, key: str, arguments: ArgumentList, bindings: Bindings) -> None:
        bindings.bind(self, self.toggled)
        logger.debug("Flag %s set to %s", key, self.toggled)


class Key(Option):
    """
    An option that consumes exactly one following token as its value.

    Attributes:
        type (Any): Conversion target or callable applied to the raw token.
        validators (tuple[Validator, ...]): Checked in order after conversion.
        default (Any): Value reported when the key is not passed.
        value_signature (str): Placeholder shown in usage, e.g. `<value>`.
    """

    def __init__(
        self,
        *keys: str,
        type: Any = str,
        validators: Iterable[Validator] | None = None,
        help: str = "",
        dest: str | None = None,
        default: Any = None,
        value_signature: str = "value",
    ) -> None:
        super().__init__(*keys, help=help, dest=dest)
        if not callable(type):
            raise DeclarationError(f"type for {self.identifier} must be callable")
        self.type: Any = type
        self.validators: tuple[Validator, ...] = tuple(validators or ())
        for validator in self.validators:
            if not isinstance(validator, Validator):
                raise DeclarationError(
                    f"Validators for {self.identifier} must be Validator instances"
                )
        self.default: Any = default
        self.value_signature: str = value_signature

    @property
    def default_value(self) -> Any:
        return self.default

    @property
    def usage_label(self) -> str:
        return f"{self.identifier} <{self.value_signature}>"

    def convert(self, raw: str) -> Any:
        """Convert a raw token; any exception raised means the token is invalid."""
        return coerce_value(raw, self.type)

    def first_failing_validator(self, value: Any) -> Validator | None:
        return next((validator for validator in self.validators if not validator(value)), None)

    def read_value(self, key: str, arguments: ArgumentList) -> Any:
        """Pop, convert and validate the token that follows `key`."""
        raw = arguments.peek()
        if raw is None or (is_option_shaped(raw) and not is_negative_number(raw)):
            raise ExpectedValueAfterKeyError(key, self)
        arguments.pop()
        try:
            value = self.convert(raw)
        except Exception as error:
            raise InvalidKeyValueError(
                self, key, ConversionFailure(raw, type_name(self.type), str(error))
            ) from error
        validator = self.first_failing_validator(value)
        if validator is not None:
            raise InvalidKeyValueError(self, key, ValidationFailure(value, validator))
        return value

    def consume(self, key: str, arguments: ArgumentList, bindings: Bindings) -> None:
        value = self.read_value(key, arguments)
        bindings.bind(self, value)
        logger.debug("Key %s bound to %r", key, value)


class CollectedKey(Key):
    """A key whose values accumulate, in order, across repeated occurrences."""

    def __init__(
        self,
        *keys: str,
        type: Any = str,
        validators: Iterable[Validator] | None = None,
        help: str = "",
        dest: str | None = None,
        default: list[Any] | None = None,
        value_signature: str = "value",
    ) -> None:
        super().__init__(
            *keys,
            type=type,
            validators=validators,
            help=help,
            dest=dest,
            default=list(default or []),
            value_signature=value_signature,
        )

    @property
    def collects(self) -> bool:
        return True

    @property
    def usage_label(self) -> str:
        return f"{self.identifier} <{self.value_signature}> ..."

    def consume(self, key: str, arguments: ArgumentList, bindings: Bindings) -> None:
        value = self.read_value(key, arguments)
        bindings.append(self, value)
        logger.debug("Collected key %s appended %r", key, value)
