"""
Optbind CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .cli import CLI, UnrecognizedOptionsPrintingBehavior
from .command import Command, CommandGroup
from .parser import (
    ArgumentList,
    CollectedKey,
    CollectedParameter,
    Flag,
    Key,
    OptionalCollectedParameter,
    OptionalParameter,
    OptionGroup,
    OptionSplitter,
    Parameter,
    ParseResult,
    Parser,
    Restriction,
)

logger = logging.getLogger("optbind")


__all__ = [
    "ArgumentList",
    "CLI",
    "CollectedKey",
    "CollectedParameter",
    "Command",
    "CommandGroup",
    "Flag",
    "Key",
    "OptionGroup",
    "OptionSplitter",
    "OptionalCollectedParameter",
    "OptionalParameter",
    "Parameter",
    "ParseResult",
    "Parser",
    "Restriction",
    "UnrecognizedOptionsPrintingBehavior",
]
