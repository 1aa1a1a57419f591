"""
Flag generation: one argparse flag per leaf field of a dataclass.

Example:
    @dataclass
    class Config:
        name: str = field(default="", metadata={"cli": "name,n", "cli_default": "guest"})
        count: int = field(default=0, metadata={"cli": "count", "cli_default": "3"})

    parser = argparse.ArgumentParser()
    add_flags(parser, Config)
    # --name/-n (default "guest"), --count (default 3)
"""

import argparse
import dataclasses
import logging
from typing import Any, Callable

from .convert import parse_float, signed_int, strict_bool, unsigned_int
from .errors import UnsupportedTypeError
from .metadata import (
    FieldDescriptor,
    ValueKind,
    describe_field,
    iter_fields,
    nested_type,
    split_csv,
)
from .source import TrackingAppendAction, TrackingStoreAction

logger = logging.getLogger(__name__)

# Kinds whose flags carry their raw string; conversion happens at bind time.
_STRING_FLAG_METAVARS = {
    ValueKind.STRING: "STRING",
    ValueKind.DURATION: "DURATION",
    ValueKind.TIMESTAMP: "TIMESTAMP",
    ValueKind.IDENTIFIER: "UUID",
}

_NUMERIC_FLAG_TYPES: dict[ValueKind, tuple[str, Callable[[str], Any], Any]] = {
    ValueKind.INT: ("INT", signed_int, 0),
    ValueKind.UINT: ("UINT", unsigned_int, 0),
    ValueKind.FLOAT: ("FLOAT", parse_float, 0.0),
}


def _option_string(name: str) -> str:
    return f"-{name}" if len(name) == 1 else f"--{name}"


@dataclasses.dataclass
class FlagSpec:
    """A generated flag, ready to be registered on an argparse parser."""

    name: str
    aliases: list[str]
    kind: ValueKind
    required: bool
    default: Any
    usage: str = ""
    default_text: str = ""

    def option_strings(self) -> list[str]:
        return [_option_string(n) for n in (self.name, *self.aliases)]

    def _format_help(self) -> str:
        """Append default value info to the usage text, escaped for argparse."""
        help_text = self.usage
        if self.default_text:
            default_suffix = f"(default: {self.default_text})"
            help_text = f"{help_text} {default_suffix}" if help_text else default_suffix
        return help_text.replace("%", "%%")

    def argparse_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ArgumentParser.add_argument."""
        kwargs: dict[str, Any] = {
            "dest": self.name,
            "default": self.default,
            "required": self.required,
            "help": self._format_help(),
        }

        if self.kind is ValueKind.BOOL:
            # "--flag" alone means true; "--flag false" is accepted too
            kwargs.update(
                action=TrackingStoreAction,
                nargs="?",
                const=True,
                type=strict_bool,
                metavar="BOOL",
            )
        elif self.kind in _NUMERIC_FLAG_TYPES:
            metavar, parser_type, _ = _NUMERIC_FLAG_TYPES[self.kind]
            kwargs.update(action=TrackingStoreAction, type=parser_type, metavar=metavar)
        elif self.kind in _STRING_FLAG_METAVARS:
            kwargs.update(
                action=TrackingStoreAction,
                type=str,
                metavar=_STRING_FLAG_METAVARS[self.kind],
            )
        elif self.kind is ValueKind.SEQUENCE:
            kwargs.update(action=TrackingAppendAction, type=str, metavar="LIST")
        else:
            raise UnsupportedTypeError(self.name, f"no flag for kind {self.kind.value}")
        return kwargs

    def add_to(self, parser: argparse.ArgumentParser) -> argparse.Action:
        return parser.add_argument(*self.option_strings(), **self.argparse_kwargs())


def _lenient_default(
    flag_name: str, raw: str, parse: Callable[[str], Any], zero: Any
) -> Any:
    """Parse a default string, degrading to the zero value when it is malformed."""
    if raw == "":
        return zero
    try:
        return parse(raw)
    except argparse.ArgumentTypeError as e:
        logger.warning(
            "Malformed default %r for flag %s, using %r instead (%s)",
            raw,
            flag_name,
            zero,
            e,
        )
        return zero


def _flag_for_field(descriptor: FieldDescriptor, prefix: str) -> FlagSpec:
    name, aliases = descriptor.resolve_names(prefix)
    raw = descriptor.default
    kind = descriptor.kind

    if kind is ValueKind.BOOL:
        default: Any = _lenient_default(name, raw, strict_bool, False)
    elif kind in _NUMERIC_FLAG_TYPES:
        _, parser_type, zero = _NUMERIC_FLAG_TYPES[kind]
        default = _lenient_default(name, raw, parser_type, zero)
    elif kind is ValueKind.SEQUENCE:
        default = split_csv(raw)
    else:
        default = raw

    flag = FlagSpec(
        name=name,
        aliases=aliases,
        kind=kind,
        required=descriptor.required,
        default=default,
        usage=descriptor.usage,
        default_text=raw,
    )
    logger.debug("Generated flag %s (%s)", name, kind.value)
    return flag


def _gen_flags_for_class(cls: type, prefix: str, out: list[FlagSpec]) -> None:
    for field, annotation in iter_fields(cls):
        descriptor = describe_field(field, annotation)

        if descriptor.kind is not ValueKind.NESTED:
            out.append(_flag_for_field(descriptor, prefix))
            continue

        nested_prefix = descriptor.nested_prefix(prefix)
        if nested_prefix is None:
            logger.debug(
                "Nested field %s.%s has no cli_prefix and is not embedded; no flags generated",
                cls.__name__,
                field.name,
            )
            continue
        try:
            _gen_flags_for_class(nested_type(descriptor), nested_prefix, out)
        except UnsupportedTypeError as e:
            raise e.nested_in(field.name) from e


def flags_from_dataclass(dataclass_type: Any) -> list[FlagSpec]:
    """
    Generate one FlagSpec per leaf field of a dataclass.

    Args:
        dataclass_type: A dataclass type or an instance of one.

    Returns:
        list[FlagSpec]: The flags in field declaration order, nested
        dataclasses expanded in place.

    Raises:
        UnsupportedTypeError: If the argument is not a dataclass or one of its
            fields cannot be represented as a flag.
    """
    cls = dataclass_type if isinstance(dataclass_type, type) else type(dataclass_type)
    if not dataclasses.is_dataclass(cls):
        raise UnsupportedTypeError(
            getattr(cls, "__name__", repr(cls)), "flags can only be generated from a dataclass"
        )
    flags: list[FlagSpec] = []
    _gen_flags_for_class(cls, "", flags)
    return flags


def add_flags(parser: argparse.ArgumentParser, dataclass_type: Any) -> list[FlagSpec]:
    """
    Register the flags of a dataclass on an argparse parser.

    Returns the FlagSpecs that were added.
    """
    flags = flags_from_dataclass(dataclass_type)
    for flag in flags:
        flag.add_to(parser)
    return flags
