# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Shared declaration base, scanner modes and the per-parse binding map.

Contents:
- `Declaration`: Base for every option and parameter. Assigns the stable `id`
  errors and bindings are keyed on.
- `ScanMode`: The scanner's two states, scanning options or locked onto the
  collected parameter.
- `Bindings`: The values one parse bound, keyed by declaration id. Declarations
  are never mutated by a parse, so the same command can be parsed repeatedly.
"""
from __future__ import annotations

import itertools
from copy import deepcopy
from enum import Enum
from typing import Any, Iterator

_declaration_ids = itertools.count(1)


class Declaration:
    """Base class for options and parameters."""

    dest: str
    help: str

    def __init__(self) -> None:
        self.id: int = next(_declaration_ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Declaration):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def default_value(self) -> Any:
        """Value reported for this declaration when the parse did not bind it."""
        return None

    @property
    def collects(self) -> bool:
        return False


class ScanMode(Enum):
    """Scanner state for the remainder of a command's tokens."""

    SCANNING = "scanning"
    LOCKED = "locked"

    def __str__(self) -> str:
        return self.value


class Bindings:
    """Values bound by a single parse, keyed by declaration id."""

    def __init__(self) -> None:
        self._values: dict[int, Any] = {}
        self._declarations: dict[int, Declaration] = {}

    def bind(self, declaration: Declaration, value: Any) -> None:
        self._values[declaration.id] = value
        self._declarations[declaration.id] = declaration

    def append(self, declaration: Declaration, value: Any) -> None:
        """Append to a collecting declaration's list, creating it on first use."""
        if declaration.id not in self._values:
            self.bind(declaration, [])
        self._values[declaration.id].append(value)

    def is_bound(self, declaration: Declaration) -> bool:
        return declaration.id in self._values

    def get(self, declaration: Declaration) -> Any:
        """Return the bound value, or a copy of the declaration's default."""
        if declaration.id in self._values:
            return self._values[declaration.id]
        return deepcopy(declaration.default_value)

    def __getitem__(self, declaration: Declaration) -> Any:
        return self.get(declaration)

    def __contains__(self, declaration: object) -> bool:
        return isinstance(declaration, Declaration) and self.is_bound(declaration)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Declaration]:
        return iter(list(self._declarations.values()))

    def items(self) -> list[tuple[Declaration, Any]]:
        return [
            (self._declarations[declaration_id], value)
            for declaration_id, value in self._values.items()
        ]

    def as_dict(self) -> dict[str, Any]:
        """Map each bound declaration's dest to its value."""
        return {declaration.dest: value for declaration, value in self.items()}

    def __repr__(self) -> str:
        return f"Bindings({self.as_dict()!r})"
