"""
Field metadata interpretation shared by flag generation and binding.

A dataclass field describes its flag through ``dataclasses.field(metadata=...)``:

    @dataclass
    class Config:
        name: str = field(
            default="",
            metadata={"cli": "name,n", "cli_default": "guest", "help": "User name"},
        )

Recognized keys:
    cli              "name,alias,...,omitempty": primary name, aliases and the
                     reserved ``omitempty`` token.
    cli_default      Default value in string form.
    help             Usage text.
    cli_time_layout  strptime layout for timestamp fields (default RFC 3339).
    cli_prefix       Name prefix for the flags of a nested dataclass field.
    cli_embed        Flatten a nested dataclass field into its parent's flags.
"""

import dataclasses
import enum
import logging
import types
import typing
import uuid
from datetime import datetime, timedelta
from typing import Any, Iterator, NewType, Optional, Union

from .convert import NIL_UUID, ZERO_TIME
from .errors import UnsupportedTypeError

logger = logging.getLogger(__name__)

CLI_METADATA_NAME = "cli"
CLI_METADATA_DEFAULT = "cli_default"
CLI_METADATA_USAGE = "help"
CLI_METADATA_TIME_LAYOUT = "cli_time_layout"
CLI_METADATA_PREFIX = "cli_prefix"
CLI_METADATA_EMBED = "cli_embed"

OMIT_EMPTY = "omitempty"

# Marker annotation for fields that only accept non-negative integers.
UInt = NewType("UInt", int)


class ValueKind(enum.Enum):
    """The closed set of value kinds a field can map to."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    IDENTIFIER = "identifier"
    SEQUENCE = "sequence"
    NESTED = "nested"


_SCALAR_KINDS: dict[Any, ValueKind] = {
    bool: ValueKind.BOOL,
    int: ValueKind.INT,
    UInt: ValueKind.UINT,
    float: ValueKind.FLOAT,
    str: ValueKind.STRING,
    timedelta: ValueKind.DURATION,
    datetime: ValueKind.TIMESTAMP,
    uuid.UUID: ValueKind.IDENTIFIER,
}

_KIND_ZERO: dict[ValueKind, Any] = {
    ValueKind.BOOL: False,
    ValueKind.INT: 0,
    ValueKind.UINT: 0,
    ValueKind.FLOAT: 0.0,
    ValueKind.STRING: "",
    ValueKind.DURATION: timedelta(0),
    ValueKind.TIMESTAMP: ZERO_TIME,
    ValueKind.IDENTIFIER: NIL_UUID,
}


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """Canonical view of one dataclass field, derived on every traversal."""

    attr: str
    name: str
    aliases: tuple[str, ...]
    omit_empty: bool
    default: str
    usage: str
    time_layout: Optional[str]
    prefix: str
    embedded: bool
    declared: bool
    kind: ValueKind
    element_kind: Optional[ValueKind]
    annotation: Any
    optional: bool

    @property
    def required(self) -> bool:
        return not self.omit_empty and self.default == ""

    def resolve_names(self, prefix: str) -> tuple[str, list[str]]:
        """
        Apply an accumulated prefix to the primary name and the long aliases.

        Single-character aliases are short forms and stay unprefixed.
        """
        name = prefix + self.name
        aliases = [prefix + a if len(a) > 1 else a for a in self.aliases]
        return name, aliases

    def nested_prefix(self, prefix: str) -> Optional[str]:
        """
        Prefix to descend into a nested dataclass with.

        Returns None when the nested field contributes no flags at all, which
        is the case for a named (not embedded) field without ``cli_prefix``.
        """
        if self.prefix:
            return prefix + self.prefix
        if self.embedded:
            return prefix
        return None


def get_optional_inner_type(type_hint: Any) -> Optional[Any]:
    """
    If type_hint is Optional[T] (i.e., Union[T, None] or T | None), return T.
    Otherwise, return None.
    """
    origin = typing.get_origin(type_hint)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(type_hint)
        # Optional[T] is Union[T, None], so we check for exactly two args with one being NoneType
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]
    return None


def is_struct_like(type_hint: Any) -> bool:
    """True for dataclass types, which are walked field by field rather than read as one flag."""
    inner = get_optional_inner_type(type_hint)
    if inner is not None:
        type_hint = inner
    return isinstance(type_hint, type) and dataclasses.is_dataclass(type_hint)


def _scalar_kind(type_hint: Any) -> Optional[ValueKind]:
    try:
        return _SCALAR_KINDS.get(type_hint)
    except TypeError:
        # unhashable annotation
        return None


def _is_list(type_hint: Any) -> bool:
    return type_hint is list or typing.get_origin(type_hint) is list


def classify(type_hint: Any, field_name: str) -> tuple[ValueKind, Optional[ValueKind]]:
    """
    Classify an annotation into (kind, element_kind).

    element_kind is only set for SEQUENCE. Optional[T] classifies as T.

    Raises:
        UnsupportedTypeError: for nested sequences, sequences of dataclasses
            and annotations with no flag counterpart.
    """
    inner = get_optional_inner_type(type_hint)
    if inner is not None:
        type_hint = inner

    kind = _scalar_kind(type_hint)
    if kind is not None:
        return kind, None

    if is_struct_like(type_hint):
        return ValueKind.NESTED, None

    if _is_list(type_hint):
        args = typing.get_args(type_hint)
        elem_type = args[0] if args else str
        if _is_list(elem_type):
            raise UnsupportedTypeError(
                field_name, "sequences of sequences are not supported"
            )
        if is_struct_like(elem_type):
            raise UnsupportedTypeError(
                field_name, "sequences of dataclasses are not supported"
            )
        elem_kind = _scalar_kind(elem_type)
        if elem_kind is None:
            raise UnsupportedTypeError(
                field_name, f"unsupported sequence element type {elem_type!r}"
            )
        return ValueKind.SEQUENCE, elem_kind

    raise UnsupportedTypeError(field_name, f"unsupported type {type_hint!r}")


def split_csv(s: str) -> list[str]:
    """Split a comma-separated string, trimming whitespace around each element."""
    if s == "":
        return []
    return [part.strip() for part in s.split(",")]


def parse_names_with_options(tag: str) -> tuple[str, list[str], bool]:
    """
    Parse a ``cli`` metadata value into (name, aliases, omit_empty).

    The first token is the primary name; every further token is an alias,
    except the reserved ``omitempty`` token.
    """
    tag = tag.strip()
    if not tag:
        return "", [], False
    parts = split_csv(tag)
    if not parts or not parts[0]:
        return "", [], False

    aliases = []
    omit_empty = False
    for part in parts[1:]:
        if part == OMIT_EMPTY:
            omit_empty = True
        else:
            aliases.append(part)
    return parts[0], aliases, omit_empty


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, AttributeError, TypeError):
        # Fall back to the raw field annotations
        logger.debug("Could not resolve type hints for %s", cls.__name__)
        return {}


def iter_fields(cls: type) -> Iterator[tuple[dataclasses.Field, Any]]:
    """
    Yield (field, resolved annotation) for the flag-bearing fields of a dataclass.

    Fields excluded from __init__ and underscore-prefixed fields are private
    and never mapped to flags.
    """
    hints = _type_hints(cls)
    for field in dataclasses.fields(cls):
        if not field.init or field.name.startswith("_"):
            continue
        yield field, hints.get(field.name, field.type)


def describe_field(field: dataclasses.Field, annotation: Any) -> FieldDescriptor:
    """Build the FieldDescriptor for one dataclass field."""
    metadata = field.metadata or {}

    name, aliases, omit_empty = parse_names_with_options(
        str(metadata.get(CLI_METADATA_NAME, ""))
    )
    declared = bool(name)
    if not declared:
        name = field.name.lower()

    kind, element_kind = classify(annotation, field.name)
    embedded = bool(metadata.get(CLI_METADATA_EMBED, False))
    if embedded and kind is not ValueKind.NESTED:
        raise UnsupportedTypeError(
            field.name, "cli_embed is only valid on dataclass fields"
        )
    if embedded and declared:
        raise UnsupportedTypeError(
            field.name, "an embedded dataclass cannot declare a cli name"
        )

    return FieldDescriptor(
        attr=field.name,
        name=name,
        aliases=tuple(aliases),
        omit_empty=omit_empty,
        default=str(metadata.get(CLI_METADATA_DEFAULT, "")),
        usage=str(metadata.get(CLI_METADATA_USAGE, "")),
        time_layout=metadata.get(CLI_METADATA_TIME_LAYOUT) or None,
        prefix=str(metadata.get(CLI_METADATA_PREFIX, "")),
        embedded=embedded,
        declared=declared,
        kind=kind,
        element_kind=element_kind,
        annotation=annotation,
        optional=get_optional_inner_type(annotation) is not None,
    )


def nested_type(descriptor: FieldDescriptor) -> type:
    """The dataclass type behind a NESTED descriptor, with Optional unwrapped."""
    return get_optional_inner_type(descriptor.annotation) or descriptor.annotation


def kind_zero(kind: ValueKind) -> Any:
    return _KIND_ZERO[kind]


def has_default(field: dataclasses.Field) -> bool:
    return (
        field.default is not dataclasses.MISSING
        or field.default_factory is not dataclasses.MISSING
    )


def zero_value(type_hint: Any) -> Any:
    """
    The value a field of this type holds when nothing was assigned to it.

    None for Optional[T]; False, 0, 0.0, "", timedelta(0), ZERO_TIME and
    NIL_UUID for scalars; [] for lists; a zero instance for dataclasses.
    """
    if get_optional_inner_type(type_hint) is not None:
        return None
    kind = _scalar_kind(type_hint)
    if kind is not None:
        return _KIND_ZERO[kind]
    if _is_list(type_hint):
        return []
    if is_struct_like(type_hint):
        return construct(type_hint, {})
    return None


def construct(cls: type, values: dict[str, Any]) -> Any:
    """
    Instantiate a dataclass from the given field values.

    Fields missing from ``values`` keep their dataclass default; fields without
    a default receive the zero value of their type.
    """
    kwargs = dict(values)
    hints = _type_hints(cls)
    for field in dataclasses.fields(cls):
        if not field.init or field.name in kwargs or has_default(field):
            continue
        kwargs[field.name] = zero_value(hints.get(field.name, field.type))
    return cls(**kwargs)
