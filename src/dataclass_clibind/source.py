"""
Read access to parsed flag values, keyed by flag name.

argparse does not remember whether a value came from the command line or
from the default. The tracking actions below record the destination of every
flag that was actually given, so FlagSource can answer ``is_set``.
"""

import argparse
from typing import Any, Sequence, Union

from .metadata import split_csv

# Prefix of the namespace attributes marking explicitly given flag destinations.
# One attribute per flag, so a sub-command namespace copied onto its parent
# adds its markers instead of replacing the parent's.
EXPLICIT_FLAG_PREFIX = "_cli_explicit:"


def _marker(dest: str) -> str:
    return EXPLICIT_FLAG_PREFIX + dest


def mark_explicit(namespace: argparse.Namespace, dest: str) -> None:
    setattr(namespace, _marker(dest), True)


def is_explicit(namespace: argparse.Namespace, dest: str) -> bool:
    return bool(getattr(namespace, _marker(dest), False))


def explicit_flags(namespace: argparse.Namespace) -> set[str]:
    """Destinations of every flag given on the command line."""
    return {
        key[len(EXPLICIT_FLAG_PREFIX):]
        for key in vars(namespace)
        if key.startswith(EXPLICIT_FLAG_PREFIX)
    }


class TrackingStoreAction(argparse.Action):
    """Store a single value and remember that the flag was given."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Union[str, None] = None,
    ) -> None:
        setattr(namespace, self.dest, values)
        mark_explicit(namespace, self.dest)


class TrackingAppendAction(argparse.Action):
    """
    Collect a repeated string flag.

    Each occurrence may carry several comma-separated values. The first
    occurrence replaces the default rather than appending to it.
    """

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Union[str, None] = None,
    ) -> None:
        if is_explicit(namespace, self.dest):
            items = list(getattr(namespace, self.dest, None) or [])
        else:
            items = []
        if isinstance(values, str):
            items.extend(split_csv(values))
        elif values is not None:
            for value in values:
                items.extend(split_csv(value))
        setattr(namespace, self.dest, items)
        mark_explicit(namespace, self.dest)


class FlagSource:
    """
    Typed accessors over a parsed argparse.Namespace.

    Values for flags that were never defined read as the zero value of the
    requested type.
    """

    def __init__(self, namespace: argparse.Namespace) -> None:
        self.namespace = namespace

    def is_set(self, name: str) -> bool:
        """True if the flag was given on the command line, not just defaulted."""
        return is_explicit(self.namespace, name)

    def _get(self, name: str, zero: Any) -> Any:
        value = getattr(self.namespace, name, None)
        return zero if value is None else value

    def get_bool(self, name: str) -> bool:
        return bool(self._get(name, False))

    def get_int(self, name: str) -> int:
        return int(self._get(name, 0))

    def get_uint(self, name: str) -> int:
        return int(self._get(name, 0))

    def get_float(self, name: str) -> float:
        return float(self._get(name, 0.0))

    def get_string(self, name: str) -> str:
        return str(self._get(name, ""))

    def get_string_list(self, name: str) -> list[str]:
        value = self._get(name, [])
        if isinstance(value, str):
            return split_csv(value)
        return [str(item) for item in value]
