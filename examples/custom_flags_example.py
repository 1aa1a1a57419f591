#!/usr/bin/env python3
"""
Example demonstrating how to register and read custom flags alongside
dataclass-generated flags using DataclassFlagParser.

This example shows two ways to add flags:
- Pass `flags=` to the constructor for upfront flags
- Call `add_flag(...)` to add additional flags later

It also prints how `parser.parse()` returns dataclass instances and custom flags
as top-level dictionary keys, and how `safe_parse()` reports binding errors.
"""

from dataclasses import dataclass, field
from datetime import datetime

from dataclass_clibind import DataclassFlagParser


@dataclass
class AppConfig:
    name: str = field(
        default="", metadata={"cli": "name", "cli_default": "example", "help": "Application name"}
    )
    repeats: int = field(
        default=0, metadata={"cli": "repeats,r", "cli_default": "1", "help": "Number of repeats"}
    )
    since: datetime = field(
        default=datetime(2000, 1, 1),
        metadata={"cli": "since,omitempty", "cli_time_layout": "%Y-%m-%d", "help": "Start date"},
    )


if __name__ == "__main__":
    # Flags passed in the constructor (mixed tuple/dict styles supported)
    constructor_flags = [
        ("--log", {"type": str, "help": "Path to log file"}),
        {"names": "--quiet", "kwargs": {"action": "store_true", "help": "Quiet mode"}},
    ]

    parser = DataclassFlagParser(AppConfig, flags=constructor_flags)

    # Add an extra flag after construction
    parser.add_flag(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )

    # Simulate parsing arguments (replace with `None` to use CLI args)
    args = [
        "--log",
        "/tmp/app.log",
        "--quiet",
        "--verbose",
        "--name",
        "demo",
        "-r",
        "3",
        "--since",
        "2024-05-01",
    ]

    result = parser.parse(args)

    # Dataclass instances are returned under their class name keys
    cfg = result["AppConfig"]
    print("Dataclass result:")
    print(f"  name: {cfg.name}")
    print(f"  repeats: {cfg.repeats}")
    print(f"  since: {cfg.since:%Y-%m-%d}")

    # Custom flags are returned as explicit top-level keys
    print("Custom flags:")
    print(f"  log: {result.get('log')}")
    print(f"  quiet: {result.get('quiet')}")
    print(f"  verbose: {result.get('verbose')}")

    # A value that does not match the time layout is reported, not raised
    outcome = parser.safe_parse(["--since", "May 1st"])
    print("safe_parse with a bad date:")
    print(f"  {outcome}")
