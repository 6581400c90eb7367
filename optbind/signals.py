# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines flow control signals raised while binding command-line tokens.

Signals are not errors. They interrupt a parse to hand control back to the
driver (for example to print usage) and inherit from `BaseException` so they
bypass standard `except Exception` blocks.

Signals:
- HelpSignal: A help flag was seen for a command or command group.
- VersionSignal: The CLI's version flag was seen.
"""
from __future__ import annotations

from typing import Any


class FlowSignal(BaseException):
    """Base class for all flow control signals in optbind."""


class HelpSignal(FlowSignal):
    """Raised when a help flag is encountered.

    Attributes:
        target: The `Command` or `CommandGroup` whose help was requested.
        path (list[str]): Names used to route to the target.
    """

    def __init__(
        self,
        target: Any = None,
        path: list[str] | None = None,
        message: str = "Help signal received.",
    ):
        super().__init__(message)
        self.target = target
        self.path: list[str] = list(path or [])


class VersionSignal(FlowSignal):
    """Raised when the root group's `--version` flag is encountered."""

    def __init__(self, message: str = "Version signal received."):
        super().__init__(message)
