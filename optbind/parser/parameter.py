# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines positional parameter declarations.

Parameters are bound by position, not by name, in the order a command declares
them: every required `Parameter` first, then `OptionalParameter`s, then at most
one `CollectedParameter` which must come last. Once the scanner reaches the
collected parameter it claims every remaining token verbatim.
"""
from __future__ import annotations

from typing import Any

from optbind.parser.parser_types import Declaration
from optbind.parser.utils import dest_from_name


class Parameter(Declaration):
    """A required positional parameter."""

    required: bool = True

    def __init__(self, name: str, help: str = "", dest: str | None = None) -> None:
        super().__init__()
        self.dest: str = dest_from_name(name, dest)
        self.name: str = name
        self.help: str = help

    @property
    def signature(self) -> str:
        return f"<{self.name}>"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class OptionalParameter(Parameter):
    """A positional parameter that may remain unbound."""

    required = False

    @property
    def signature(self) -> str:
        return f"[<{self.name}>]"


class CollectedParameter(Parameter):
    """
    The terminal positional parameter; absorbs every remaining token.

    By default it may collect nothing. With `required=True` at least one token
    must reach it.
    """

    def __init__(
        self,
        name: str,
        help: str = "",
        dest: str | None = None,
        required: bool = False,
    ) -> None:
        super().__init__(name, help=help, dest=dest)
        self.required = required

    @property
    def collects(self) -> bool:
        return True

    @property
    def default_value(self) -> Any:
        return []

    @property
    def signature(self) -> str:
        if self.required:
            return f"<{self.name}> ..."
        return f"[<{self.name}>] ..."


class OptionalCollectedParameter(CollectedParameter):
    """A collected parameter that may be empty."""

    def __init__(self, name: str, help: str = "", dest: str | None = None) -> None:
        super().__init__(name, help=help, dest=dest, required=False)
