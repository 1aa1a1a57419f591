#!/usr/bin/env python3
"""
Example showing sub-commands whose handlers receive a populated dataclass.

Try:
    python command_example.py serve --port 9000
    python command_example.py migrate --steps 3 --dry-run
"""

import argparse
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional
from uuid import UUID

from dataclass_clibind import command_with_binding, run_command


@dataclass
class ServeConfig:
    host: str = field(default="", metadata={"cli": "host", "cli_default": "127.0.0.1", "help": "Bind address"})
    port: int = field(default=0, metadata={"cli": "port,p", "cli_default": "8000", "help": "Listen port"})
    grace: timedelta = field(
        default=timedelta(0),
        metadata={"cli": "grace", "cli_default": "10s", "help": "Shutdown grace period"},
    )


@dataclass
class MigrateConfig:
    steps: int = field(default=0, metadata={"cli": "steps", "cli_default": "1", "help": "Migrations to apply"})
    dry_run: bool = field(default=False, metadata={"cli": "dry-run,omitempty", "help": "Only print the plan"})
    run_id: Optional[UUID] = field(default=None, metadata={"cli": "run-id,omitempty", "help": "Resume a run"})


def serve(cfg: ServeConfig) -> int:
    print(f"serving on {cfg.host}:{cfg.port} (grace {cfg.grace})")
    return 0


def migrate(cfg: MigrateConfig) -> int:
    mode = "planning" if cfg.dry_run else "applying"
    print(f"{mode} {cfg.steps} migration(s), run {cfg.run_id or 'new'}")
    return 0


def main() -> int:
    root = argparse.ArgumentParser(prog="app", description="Sub-command example")
    subparsers = root.add_subparsers(title="commands")
    command_with_binding("serve", ServeConfig, serve, subparsers=subparsers, help="Run the server")
    command_with_binding("migrate", MigrateConfig, migrate, subparsers=subparsers, help="Apply migrations")
    return run_command(root)


if __name__ == "__main__":
    sys.exit(main())
