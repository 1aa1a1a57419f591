"""
dataclass_clibind - Derive argparse flags from dataclass field metadata and bind parsed values back.

This package generates command-line flags (names, aliases, defaults, help text,
required-ness) from the ``metadata`` of dataclass fields, including nested
dataclasses with name prefixes, and populates dataclass instances from the
parsed flag values: booleans, integers, floats, strings, durations,
timestamps, UUIDs and lists of those.
"""

from .binder import bind, build, safe_bind, safe_build
from .command import command_with_binding, run_command, with_binding
from .convert import NIL_UUID, ZERO_TIME
from .errors import (
    CliBindError,
    FlagParseError,
    InvalidDestinationError,
    UnsupportedTypeError,
)
from .flags import FlagSpec, add_flags, flags_from_dataclass
from .metadata import UInt, ValueKind
from .parser import DataclassFlagParser
from .source import FlagSource

__version__ = "1.0.0"
__all__ = [
    "CliBindError",
    "DataclassFlagParser",
    "FlagParseError",
    "FlagSource",
    "FlagSpec",
    "InvalidDestinationError",
    "NIL_UUID",
    "UInt",
    "UnsupportedTypeError",
    "ValueKind",
    "ZERO_TIME",
    "add_flags",
    "bind",
    "build",
    "command_with_binding",
    "flags_from_dataclass",
    "run_command",
    "safe_bind",
    "safe_build",
    "with_binding",
]
