# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
POSIX-style bundling of single-letter flags.

`OptionSplitter` rewrites a combined short-flag token such as `-abc` into the
separate tokens `-a -b -c`, in place, before any routing or scanning happens,
so the scanner only ever sees atomic option tokens. Long options, single
letter options, a bare `-` and tokens that are not all letters (`-12`,
`-a=b`) are left untouched.
"""
from __future__ import annotations

import re
from typing import Iterable

from optbind.logger import logger
from optbind.parser.arguments import ArgumentList

_COMBINED_SHORT_FLAGS = re.compile(r"^-[A-Za-z]{2,}$")


def expand_combined_flags(token: str) -> list[str]:
    """Expand `-abc` into `['-a', '-b', '-c']`; other tokens come back alone."""
    if _COMBINED_SHORT_FLAGS.match(token):
        return [f"-{char}" for char in token[1:]]
    return [token]


def split_combined_flags(tokens: Iterable[str]) -> list[str]:
    expanded: list[str] = []
    for token in tokens:
        expanded.extend(expand_combined_flags(token))
    return expanded


class OptionSplitter:
    """Pre-pass that splits combined short flags in an `ArgumentList`."""

    def manipulate(self, arguments: ArgumentList) -> None:
        tokens = arguments.remaining()
        expanded = split_combined_flags(tokens)
        if len(expanded) != len(tokens):
            logger.debug("Split combined flags: %s -> %s", tokens, expanded)
            arguments.replace_remaining(expanded)
