"""
Exceptions raised while generating flags from, or binding flags into, a dataclass.

All errors derive from CliBindError so callers can catch everything this
package raises in one place. Each concrete error also derives from the
builtin exception it refines (TypeError or ValueError), so code written
against plain argparse-style error handling keeps working.
"""

from typing import Any, Optional


class CliBindError(Exception):
    """Base exception for all dataclass_clibind errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidDestinationError(CliBindError, TypeError):
    """The bind target is not a dataclass instance that can be written to."""


class UnsupportedTypeError(CliBindError, TypeError):
    """
    A field's declared shape cannot be represented as a flag.

    Raised for nested sequences, sequences of dataclasses, embedded
    dataclasses that also declare a primary flag name, and annotations
    with no flag counterpart.
    """

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Field '{field}': {reason}")
        self.field = field
        self.reason = reason

    def nested_in(self, parent: str) -> "UnsupportedTypeError":
        return UnsupportedTypeError(f"{parent}.{self.field}", self.reason)


class FlagParseError(CliBindError, ValueError):
    """A flag's string value could not be converted to the field's type."""

    def __init__(
        self,
        field: str,
        flag: str,
        value: Any,
        reason: Optional[str] = None,
    ) -> None:
        message = f"Field '{field}' (flag '{flag}'): cannot parse {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.field = field
        self.flag = flag
        self.value = value
        self.reason = reason

    def nested_in(self, parent: str) -> "FlagParseError":
        """Return a copy of this error with the field path prefixed by ``parent``."""
        return FlagParseError(f"{parent}.{self.field}", self.flag, self.value, self.reason)
