"""
String converters for the value kinds that argparse does not handle natively.

Durations use the compact unit syntax (``"1h30m"``, ``"250ms"``, ``"-1.5h"``),
timestamps default to RFC 3339, identifiers are UUIDs. The converters raise
argparse.ArgumentTypeError so they can double as argparse ``type=`` callables.
"""

import argparse
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

# Zero values for kinds whose Python type has no natural "empty" instance.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
NIL_UUID = uuid.UUID(int=0)

_DURATION_UNIT_MICROSECONDS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,  # U+00B5 micro sign
    "μs": 1.0,  # U+03BC greek mu
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

# "ms" must be tried before "m" and "s".
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

# YYYY-MM-DDThh:mm:ss[.frac](Z|+hh:mm|-hh:mm), as time.RFC3339 accepts it.
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def strict_bool(value: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Only accepts 'True', 'true', 'False', 'false', '1', '0' as valid values.
    Raises argparse.ArgumentTypeError for any other string.
    """
    if value in ("True", "true", "1"):
        return True
    elif value in ("False", "false", "0"):
        return False
    else:
        raise argparse.ArgumentTypeError(
            f"Invalid boolean value: '{value}'. Must be one of: True, true, False, false, 1, 0"
        )


def unsigned_int(value: str) -> int:
    """Parse a base-10 integer that must not be negative."""
    try:
        number = int(value, 10)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid unsigned integer: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(
            f"Invalid unsigned integer: '{value}' is negative"
        )
    return number


def signed_int(value: str) -> int:
    """Parse a base-10 integer."""
    try:
        return int(value, 10)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid integer: '{value}'")


def parse_float(value: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid float: '{value}'")


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration such as "300ms", "-1.5h" or "2h45m".

    A duration is an optionally signed sequence of decimal numbers, each with
    an optional fraction and a unit suffix. Valid units are "ns", "us" (or
    "µs"), "ms", "s", "m", "h". A bare "0" is accepted without a unit.
    Sub-microsecond precision is rounded away.
    """
    s = value
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise argparse.ArgumentTypeError(f"Invalid duration: '{value}'")

    total = 0.0
    pos = 0
    while pos < len(s):
        match = _DURATION_PART.match(s, pos)
        if match is None:
            raise argparse.ArgumentTypeError(
                f"Invalid duration: '{value}' (expected a number followed by one of "
                "ns, us, ms, s, m, h)"
            )
        number, unit = match.groups()
        total += float(number) * _DURATION_UNIT_MICROSECONDS[unit]
        pos = match.end()

    if negative:
        total = -total
    return timedelta(microseconds=total)


def parse_timestamp(value: str, layout: Optional[str] = None) -> datetime:
    """
    Parse a timestamp using a strptime layout, or RFC 3339 when no layout is given.

    RFC 3339 input must carry a UTC offset ("Z" or "+hh:mm").
    """
    if layout:
        try:
            return datetime.strptime(value, layout)
        except ValueError as e:
            raise argparse.ArgumentTypeError(
                f"Invalid timestamp: '{value}' does not match layout '{layout}' ({e})"
            )

    match = _RFC3339.fullmatch(value)
    if match is None:
        raise argparse.ArgumentTypeError(f"Invalid RFC 3339 timestamp: '{value}'")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    try:
        if offset in ("Z", "z"):
            tz = timezone.utc
        else:
            sign = -1 if offset[0] == "-" else 1
            tz = timezone(sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6])))
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            # sub-microsecond digits are truncated
            int((fraction or "").ljust(6, "0")[:6]),
            tzinfo=tz,
        )
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Invalid RFC 3339 timestamp: '{value}' ({e})"
        )


def parse_identifier(value: str) -> uuid.UUID:
    """Parse a UUID in canonical, braced, URN or hex-only form."""
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid UUID: '{value}'")
