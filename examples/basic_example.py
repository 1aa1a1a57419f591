#!/usr/bin/env python3
"""
Example script demonstrating the usage of DataclassFlagParser.

This script shows how to describe flags with field metadata, including a
nested dataclass whose flags get a name prefix, and how the parsed values
come back as populated dataclass instances.

Try:
    python basic_example.py --name sim-1 -t 30.5 --db-timeout 2m30s --tags a,b
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from dataclass_clibind import DataclassFlagParser, UInt


@dataclass
class DatabaseConfig:
    """Connection settings, exposed as --db-* flags."""

    url: str = field(
        default="",
        metadata={"cli": "url", "cli_default": "sqlite:///tmp/sim.db", "help": "Database URL"},
    )
    timeout: timedelta = field(
        default=timedelta(0),
        metadata={"cli": "timeout", "cli_default": "30s", "help": "Connection timeout"},
    )


@dataclass
class SimulationConfig:
    """Configuration for simulation parameters."""

    name: str = field(default="", metadata={"cli": "name,n", "help": "Name of the simulation"})
    temperature: float = field(
        default=0.0,
        metadata={"cli": "temperature,t", "cli_default": "27.0", "help": "Temperature in Celsius"},
    )
    num_simulations: UInt = field(
        default=UInt(0),
        metadata={"cli": "num-simulations", "cli_default": "100", "help": "Number of simulations to run"},
    )
    tags: list[str] = field(
        default_factory=list, metadata={"cli": "tags,omitempty", "help": "Labels for the run"}
    )
    verbose: bool = field(
        default=False, metadata={"cli": "verbose,v,omitempty", "help": "Enable verbose output"}
    )
    database: DatabaseConfig = field(
        default_factory=DatabaseConfig, metadata={"cli_prefix": "db-"}
    )


def main() -> None:
    """Main function demonstrating the parser."""
    parser = DataclassFlagParser(SimulationConfig, description="Run a simulation")

    print("DataclassFlagParser Example")
    print("=" * 50)
    print()

    result = parser.parse()
    config = result["SimulationConfig"]
    if config.verbose:
        logging.basicConfig(level=logging.DEBUG)

    print("Parsed Configuration:")
    print("-" * 30)
    print(f"Simulation Name: {config.name}")
    print(f"Temperature: {config.temperature}°C")
    print(f"Number of Simulations: {config.num_simulations}")
    print(f"Tags: {', '.join(config.tags) or '-'}")
    print(f"Verbose: {config.verbose}")
    print()
    print(f"Database URL: {config.database.url}")
    print(f"Database Timeout: {config.database.timeout.total_seconds()}s")


if __name__ == "__main__":
    main()
