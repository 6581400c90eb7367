# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgumentList`, the token cursor every stage of a parse reads from.

The list holds the tokens that have not been consumed yet. Reading from the
front is destructive; a token can be handed back with `push_front` so the next
reader sees it again. Consumed tokens are never revisited.
"""
from __future__ import annotations

import shlex
from collections import deque
from typing import Iterable, Iterator


class ArgumentList:
    """Mutable, front-consumed sequence of command-line tokens."""

    def __init__(self, tokens: Iterable[str] | None = None) -> None:
        self._tokens: deque[str] = deque(tokens or [])
        for token in self._tokens:
            if not isinstance(token, str):
                raise TypeError(f"Tokens must be strings, got {type(token).__name__}")

    @classmethod
    def from_string(cls, line: str) -> ArgumentList:
        """Split a command line the way a POSIX shell would."""
        return cls(shlex.split(line))

    def peek(self) -> str | None:
        """Return the next token without consuming it."""
        return self._tokens[0] if self._tokens else None

    def pop(self) -> str | None:
        """Consume and return the next token, or None at the end of the stream."""
        return self._tokens.popleft() if self._tokens else None

    def push_front(self, token: str) -> None:
        """Put a token back so it is read next."""
        self._tokens.appendleft(token)

    def has_next(self) -> bool:
        return bool(self._tokens)

    def remaining(self) -> list[str]:
        """Return the unconsumed tokens without consuming them."""
        return list(self._tokens)

    def replace_remaining(self, tokens: Iterable[str]) -> None:
        """Swap the unconsumed tokens for `tokens`."""
        self._tokens = deque(tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tokens))

    def __bool__(self) -> bool:
        return self.has_next()

    def __str__(self) -> str:
        return shlex.join(self._tokens)

    def __repr__(self) -> str:
        return f"ArgumentList({list(self._tokens)!r})"
