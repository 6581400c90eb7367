# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Value coercion and declaration-naming helpers for optbind's parser.

This module provides the conversion functions keys use to turn a raw token into
a typed value, including `Enum`, `bool`, `datetime`, `Literal` and union types,
and the helpers that validate option keys and derive destination names.

Functions:
- coerce_bool: Convert a string to a boolean.
- coerce_enum: Convert a string or raw value to an Enum instance.
- coerce_value: General-purpose coercion to a target type.
- type_name: Human readable name of a conversion target.
- validate_keys: Check that option keys have a legal shape.
- dest_from_keys: Derive a destination name from option keys.
"""
import re
import types
from datetime import datetime
from enum import EnumMeta
from typing import Any, Literal, Union, get_args, get_origin

from dateutil import parser as date_parser

from optbind.exceptions import DeclarationError

_NEGATIVE_NUMBER = re.compile(r"^-\d+(\.\d+)?$")


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts 'true', 'yes', '1', 'on' and 'false', 'no', '0', 'off' in any case.

    Raises:
        ValueError: If the text is not a recognized boolean.
    """
    if isinstance(value, bool):
        return value
    value = value.strip().lower()
    if value in {"true", "t", "1", "yes", "y", "on"}:
        return True
    elif value in {"false", "f", "0", "no", "n", "off"}:
        return False
    raise ValueError(f"'{value}' is not a boolean")


def coerce_enum(value: Any, enum_type: EnumMeta) -> Any:
    """
    Convert a raw value or string to an Enum instance.

    Tries to resolve by name, then by value coerced to the members' base type.

    Raises:
        ValueError: If the value cannot be resolved to a valid Enum member.
    """
    if isinstance(value, enum_type):
        return value

    if isinstance(value, str):
        try:
            return enum_type[value]
        except KeyError:
            pass

    base_type = type(next(iter(enum_type)).value)
    try:
        coerced_value = base_type(value)
        return enum_type(coerced_value)
    except (ValueError, TypeError):
        values = [str(enum.value) for enum in enum_type]
        raise ValueError(f"'{value}' should be one of {{{', '.join(values)}}}") from None


def coerce_value(value: str, target_type: Any) -> Any:
    """
    Attempt to convert a string to the given target type.

    Handles Union, Literal, Enum, bool and datetime specially. Any other target
    is treated as a callable taking the raw string.

    Raises:
        ValueError: If conversion fails or the value is invalid.
    """
    origin = get_origin(target_type)
    args = get_args(target_type)

    if origin is Literal:
        if value not in args:
            raise ValueError(
                f"Value '{value}' is not a valid literal for type {target_type}"
            )
        return value

    if isinstance(target_type, types.UnionType) or origin is Union:
        for arg in args:
            if arg is type(None):
                continue
            try:
                return coerce_value(value, arg)
            except Exception:
                continue
        raise ValueError(f"Value '{value}' could not be coerced to any of {args}")

    if isinstance(target_type, EnumMeta):
        return coerce_enum(value, target_type)

    if target_type is bool:
        return coerce_bool(value)

    if target_type is datetime:
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError) as error:
            raise ValueError(f"Value '{value}' could not be parsed as a datetime") from error

    return target_type(value)


def type_name(target_type: Any) -> str:
    """Return the name used for `target_type` in conversion error messages."""
    origin = get_origin(target_type)
    if origin is Literal:
        return " | ".join(repr(arg) for arg in get_args(target_type))
    if isinstance(target_type, types.UnionType) or origin is Union:
        return " | ".join(type_name(arg) for arg in get_args(target_type))
    return getattr(target_type, "__name__", str(target_type))


def is_option_shaped(token: str) -> bool:
    """True for tokens that look like an option: a dash and at least one more character."""
    return token.startswith("-") and len(token) > 1


def is_negative_number(token: str) -> bool:
    return bool(_NEGATIVE_NUMBER.match(token))


def validate_keys(keys: tuple[str, ...]) -> None:
    """Validate the keys provided for an option."""
    if not keys:
        raise DeclarationError("No keys provided")
    for key in keys:
        if not isinstance(key, str):
            raise DeclarationError(f"Key '{key}' must be a string")
        if not key.startswith("-"):
            raise DeclarationError(f"Key '{key}' must start with '-' or '--'")
        if key.startswith("--") and len(key) < 3:
            raise DeclarationError(f"Key '{key}' must be at least 3 characters long")
        if not key.startswith("--") and len(key) != 2:
            raise DeclarationError(
                f"Key '{key}' must be a single character or start with '--'"
            )
        if any(char.isspace() for char in key):
            raise DeclarationError(f"Key '{key}' must not contain whitespace")
    if len(set(keys)) != len(keys):
        raise DeclarationError(f"Duplicate keys in {keys}")


def validate_dest(dest: str) -> str:
    if not dest.replace("_", "").isalnum():
        raise DeclarationError(
            "dest must be a valid identifier (letters, digits, and underscores only)"
        )
    if dest[0].isdigit():
        raise DeclarationError("dest must not start with a digit")
    return dest


def dest_from_keys(keys: tuple[str, ...], dest: str | None = None) -> str:
    """Convert keys to a destination name, preferring the first long key."""
    if dest:
        return validate_dest(dest)
    derived = None
    for key in keys:
        if key.startswith("--"):
            derived = key.lstrip("-").replace("-", "_").lower()
            break
        elif derived is None:
            derived = key.lstrip("-").replace("-", "_").lower()
    assert derived is not None, "dest should not be None"
    return validate_dest(derived)


def dest_from_name(name: str, dest: str | None = None) -> str:
    """Convert a positional parameter's name to a destination name."""
    if not name or not isinstance(name, str):
        raise DeclarationError("Parameters must have a non-empty name")
    if name.startswith("-"):
        raise DeclarationError(f"Parameter name '{name}' must not start with '-'")
    return validate_dest(dest or name.replace("-", "_").lower())
