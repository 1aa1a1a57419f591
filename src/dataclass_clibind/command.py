"""
Bind-then-invoke helpers for argparse commands.

    def serve(cfg: ServerConfig) -> int:
        ...

    root = argparse.ArgumentParser(prog="app")
    subparsers = root.add_subparsers()
    command_with_binding("serve", ServerConfig, serve, subparsers=subparsers)
    run_command(root, ["serve", "--port", "8080"])
"""

import argparse
from typing import Any, Callable, Optional, Sequence, Type, TypeVar

from .binder import build
from .flags import add_flags

T = TypeVar("T")
R = TypeVar("R")

# Namespace attribute holding the bound action of the selected command.
ACTION_ATTR = "_cli_bound_action"


def with_binding(
    dataclass_type: Type[T], fn: Callable[[T], R]
) -> Callable[[argparse.Namespace], R]:
    """
    Wrap a typed handler so it receives a populated dataclass instead of a namespace.

    The returned action builds ``dataclass_type`` from the parsed namespace and
    calls ``fn`` with it. Binding errors propagate unchanged.
    """

    def action(namespace: argparse.Namespace) -> R:
        cfg = build(namespace, dataclass_type)
        return fn(cfg)

    return action


def command_with_binding(
    name: str,
    dataclass_type: Type[T],
    fn: Callable[[T], Any],
    subparsers: Optional["argparse._SubParsersAction[argparse.ArgumentParser]"] = None,
    **parser_kwargs: Any,
) -> argparse.ArgumentParser:
    """
    Create a command whose flags come from ``dataclass_type`` and whose action
    is with_binding(dataclass_type, fn).

    Args:
        name: Command name (program name, or sub-command name).
        dataclass_type: Dataclass describing the command's flags.
        fn: Handler invoked with the bound dataclass.
        subparsers: If given, the command is added as a sub-command of it;
            otherwise a new top-level ArgumentParser is created.
        **parser_kwargs: Passed to ArgumentParser / add_parser.

    Returns:
        argparse.ArgumentParser: The command's parser.
    """
    if subparsers is None:
        parser = argparse.ArgumentParser(prog=name, **parser_kwargs)
    else:
        parser = subparsers.add_parser(name, **parser_kwargs)
    add_flags(parser, dataclass_type)
    parser.set_defaults(**{ACTION_ATTR: with_binding(dataclass_type, fn)})
    return parser


def run_command(
    parser: argparse.ArgumentParser, args: Optional[Sequence[str]] = None
) -> Any:
    """
    Parse ``args`` and invoke the bound action of the selected command.

    Returns whatever the handler returns.
    """
    namespace = parser.parse_args(args)
    action = getattr(namespace, ACTION_ATTR, None)
    if action is None:
        parser.error("no command given")
    return action(namespace)
