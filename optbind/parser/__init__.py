"""
Optbind CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .arguments import ArgumentList
from .normalizer import OptionSplitter, split_combined_flags
from .option import CollectedKey, Flag, Key, Option
from .option_group import OptionGroup, Restriction
from .parameter import (
    CollectedParameter,
    OptionalCollectedParameter,
    OptionalParameter,
    Parameter,
)
from .parser_types import Bindings, ScanMode
from .resolver import CommandResolver, RoutingResult
from .parser import Parser, ParseResult, Scanner

__all__ = [
    "ArgumentList",
    "Bindings",
    "CollectedKey",
    "CollectedParameter",
    "CommandResolver",
    "Flag",
    "Key",
    "Option",
    "OptionGroup",
    "OptionSplitter",
    "OptionalCollectedParameter",
    "OptionalParameter",
    "Parameter",
    "ParseResult",
    "Parser",
    "Restriction",
    "RoutingResult",
    "ScanMode",
    "Scanner",
    "split_combined_flags",
]
