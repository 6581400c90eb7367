# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Value validators for keyed options.

A `Validator` pairs a predicate with the human-readable message reported when
the predicate rejects a converted value. Keys run their validators in declared
order after conversion succeeds; the first rejection aborts the parse with an
`InvalidKeyValueError` carrying that validator.

Included Validators:
- allowing: The value must be one of a fixed set.
- rejecting: The value must not be one of a fixed set.
- greater_than / less_than / within: Numeric bounds.
- contains: The value must contain a substring.
- matching: The value must fully match a regular expression.
- custom: Any predicate with a caller-supplied message.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Validator:
    """A predicate over a converted value plus the message shown on rejection."""

    message: str
    check: Callable[[Any], bool]

    def __call__(self, value: Any) -> bool:
        return bool(self.check(value))

    def validate(self, value: Any) -> bool:
        return self(value)


def _join(values: tuple[Any, ...]) -> str:
    return ", ".join(str(value) for value in values)


def custom(message: str, check: Callable[[Any], bool]) -> Validator:
    """Validator for an arbitrary predicate."""
    if not callable(check):
        raise TypeError(f"{check} is not callable")
    return Validator(message=message, check=check)


def allowing(*values: Any, message: str | None = None) -> Validator:
    """Validator accepting only the given values."""
    if message is None:
        message = f"must be one of: {_join(values)}"
    return Validator(message=message, check=lambda value: value in values)


def rejecting(*values: Any, message: str | None = None) -> Validator:
    """Validator refusing the given values."""
    if message is None:
        message = f"must not be: {_join(values)}"
    return Validator(message=message, check=lambda value: value not in values)


def greater_than(bound: Any, message: str | None = None) -> Validator:
    if message is None:
        message = f"must be greater than {bound}"
    return Validator(message=message, check=lambda value: value > bound)


def less_than(bound: Any, message: str | None = None) -> Validator:
    if message is None:
        message = f"must be less than {bound}"
    return Validator(message=message, check=lambda value: value < bound)


def within(minimum: Any, maximum: Any, message: str | None = None) -> Validator:
    """Validator for an inclusive range."""
    if minimum > maximum:
        raise ValueError(f"Invalid range: {minimum} > {maximum}")
    if message is None:
        message = f"must be between {minimum} and {maximum}"
    return Validator(message=message, check=lambda value: minimum <= value <= maximum)


def contains(text: str, message: str | None = None) -> Validator:
    if message is None:
        message = f"must contain '{text}'"
    return Validator(message=message, check=lambda value: text in str(value))


def matching(pattern: str | re.Pattern[str], message: str | None = None) -> Validator:
    """Validator requiring the whole value to match `pattern`."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    if message is None:
        message = f"must match {compiled.pattern}"
    return Validator(
        message=message, check=lambda value: compiled.fullmatch(str(value)) is not None
    )
