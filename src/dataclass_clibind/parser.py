"""
DataclassFlagParser - an argparse parser whose flags come from dataclasses.

This module ties flag generation and value binding together: the flags of
every given dataclass are registered on one argparse.ArgumentParser, and
parse() returns populated dataclass instances.
"""

import argparse
import logging
from typing import Any, Optional, Type

from result import Err, Ok, Result

from .binder import AssignObserver, build
from .errors import CliBindError
from .flags import add_flags
from .source import EXPLICIT_FLAG_PREFIX, FlagSource

logger = logging.getLogger(__name__)


class DataclassFlagParser:
    """
    A command-line parser that generates its flags from dataclass field metadata.

    Flag names, aliases, defaults and help text are read from the ``cli``,
    ``cli_default`` and ``help`` metadata keys of each field. All dataclasses
    share one flat flag namespace; nested dataclasses contribute flags through
    ``cli_prefix`` or ``cli_embed``.

    Example:
        @dataclass
        class Config:
            name: str = field(default="", metadata={"cli": "name,n", "cli_default": "guest"})
            count: int = field(default=0, metadata={"cli": "count", "cli_default": "3"})

        parser = DataclassFlagParser(Config)
        result = parser.parse(["--count", "7"])
        config = result["Config"]  # Config(name="guest", count=7)
    """

    def __init__(
        self,
        *dataclass_types: Type[Any],
        flags: Optional[list] = None,
        **parser_kwargs: Any,
    ) -> None:
        """
        Initialize the DataclassFlagParser with one or more dataclass types.

        Args:
            *dataclass_types: One or more dataclass types to generate flags from.
            flags: Extra hand-written flags, added before the dataclass flags.
                Each item is either (names, kwargs) or {'names': ..., 'kwargs': {...}}.
            **parser_kwargs: Passed to argparse.ArgumentParser.
        """
        self.dataclass_types: tuple[Type[Any], ...] = dataclass_types
        self.parser: argparse.ArgumentParser = argparse.ArgumentParser(**parser_kwargs)
        self._dataclass_flag_names: set[str] = set()

        if flags:
            for item in flags:
                if isinstance(item, dict) and "names" in item:
                    names = item["names"]
                    kwargs = item.get("kwargs", {})
                elif isinstance(item, (list, tuple)) and len(item) == 2:
                    names, kwargs = item
                else:
                    raise ValueError(
                        "Each flag must be (names, kwargs) tuple or {'names': ..., 'kwargs': ...} dict"
                    )

                # Normalize single name to tuple for add_argument
                if isinstance(names, str):
                    names = (names,)

                self.add_flag(*names, **(kwargs or {}))

        self._add_dataclass_arguments()

    def add_flag(self, *names: str, **kwargs: Any) -> None:
        """
        Add an individual command-line flag/argument to the parser.

        Example:
            parser.add_flag('--verbose', '-v', action='store_true', help='Enable verbose')

        Args:
            *names: One or more option strings (e.g. '--foo' or '-f', '--foo').
            **kwargs: Keyword arguments passed through to argparse.ArgumentParser.add_argument.
        """
        for n in names:
            if n in self.parser._option_string_actions:
                raise ValueError(f"Flag name conflict: {n}")

        self.parser.add_argument(*names, **kwargs)

    def _add_dataclass_arguments(self) -> None:
        for cls in self.dataclass_types:
            for flag in add_flags(self.parser, cls):
                self._dataclass_flag_names.add(flag.name)
            logger.debug("Added flags for %s", cls.__name__)

    def parse(
        self,
        args: Optional[list[str]] = None,
        on_assign: Optional[AssignObserver] = None,
    ) -> dict[str, Any]:
        """
        Parse command-line arguments and return populated dataclass instances.

        Args:
            args (Optional[list[str]]): Arguments to parse. If None, uses sys.argv.
            on_assign: Optional observer called with (flag name, value) for
                every assigned field.

        Returns:
            dict[str, Any]: Dataclass names mapped to their bound instances,
            plus the values of any hand-written flags under their dest names.

        Raises:
            SystemExit: If argparse rejects the arguments, e.g. a required flag is missing.
            CliBindError: If a flag value cannot be bound to its field.
        """
        namespace = self.parser.parse_args(args)
        source = FlagSource(namespace)

        result: dict[str, Any] = {}
        for cls in self.dataclass_types:
            result[cls.__name__] = build(source, cls, on_assign)

        # Add custom flags (not associated with dataclass fields)
        for key, value in vars(namespace).items():
            if key in self._dataclass_flag_names or key.startswith(EXPLICIT_FLAG_PREFIX):
                continue
            result[key] = value
        return result

    def safe_parse(
        self,
        args: Optional[list[str]] = None,
        on_assign: Optional[AssignObserver] = None,
    ) -> Result[dict[str, Any], str]:
        """
        Parse like parse(), returning Err with the error message instead of raising.

        Returns:
            Result[dict[str, Any], str]:
                - Ok with the dict parse() would return,
                - Err with the message of the binding error.
        """
        try:
            return Ok(self.parse(args, on_assign))
        except CliBindError as e:
            return Err(str(e))
