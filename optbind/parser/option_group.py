# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `OptionGroup`, a cardinality constraint over sibling options.

Groups are evaluated once, after a command's tokens have been scanned
successfully, by counting how many members ended the parse present (a flag
that was toggled, a key that received a value).

Example:
    group = OptionGroup.exactly_one(json_flag, yaml_flag)
    Restriction("at-most-one")  → Restriction.AT_MOST_ONE
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable

from optbind.exceptions import DeclarationError
from optbind.parser.option import Option
from optbind.parser.parser_types import Bindings


class Restriction(Enum):
    """How many members of an option group may be present."""

    EXACTLY_ONE = "exactly_one"
    AT_MOST_ONE = "at_most_one"
    AT_LEAST_ONE = "at_least_one"

    @classmethod
    def _missing_(cls, value: object) -> Restriction:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if member.value == normalized:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def allows(self, count: int) -> bool:
        if self is Restriction.EXACTLY_ONE:
            return count == 1
        if self is Restriction.AT_MOST_ONE:
            return count <= 1
        return count >= 1

    def __str__(self) -> str:
        return self.value


_MESSAGES = {
    Restriction.EXACTLY_ONE: "Must pass exactly one of the following",
    Restriction.AT_MOST_ONE: "Must not pass more than one of the following",
    Restriction.AT_LEAST_ONE: "Must pass at least one of the following",
}


class OptionGroup:
    """A restriction over a fixed set of options belonging to one command."""

    def __init__(
        self,
        options: Iterable[Option],
        restriction: Restriction | str,
        name: str | None = None,
    ) -> None:
        self.options: tuple[Option, ...] = tuple(options)
        if len(self.options) < 2:
            raise DeclarationError("An option group needs at least two options")
        for option in self.options:
            if not isinstance(option, Option):
                raise DeclarationError(f"{option!r} is not an option")
        if len({option.id for option in self.options}) != len(self.options):
            raise DeclarationError("An option group cannot list an option twice")
        if not isinstance(restriction, Restriction):
            try:
                restriction = Restriction(restriction)
            except ValueError as error:
                raise DeclarationError(str(error)) from error
        self.restriction: Restriction = restriction
        self.name: str = name or "|".join(option.dest for option in self.options)

    @classmethod
    def exactly_one(cls, *options: Option, name: str | None = None) -> OptionGroup:
        return cls(options, Restriction.EXACTLY_ONE, name=name)

    @classmethod
    def at_most_one(cls, *options: Option, name: str | None = None) -> OptionGroup:
        return cls(options, Restriction.AT_MOST_ONE, name=name)

    @classmethod
    def at_least_one(cls, *options: Option, name: str | None = None) -> OptionGroup:
        return cls(options, Restriction.AT_LEAST_ONE, name=name)

    def count(self, bindings: Bindings) -> int:
        return sum(1 for option in self.options if option.is_present(bindings))

    def check(self, bindings: Bindings) -> bool:
        return self.restriction.allows(self.count(bindings))

    @property
    def message(self) -> str:
        keys = " ".join(option.keys[0] for option in self.options)
        return f"{_MESSAGES[self.restriction]}: {keys}"

    def __repr__(self) -> str:
        return f"OptionGroup({self.name!r}, {self.restriction})"
