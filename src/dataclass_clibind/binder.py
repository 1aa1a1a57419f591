"""
Value binding: populate a dataclass from parsed flag values.

The binder walks the same fields as the flag generator, with the same name
and prefix resolution, so every generated flag is found again under the same
name. Scalar flags are read as argparse already typed them; durations,
timestamps, identifiers and list elements are converted here.
"""

import argparse
import dataclasses
import logging
from typing import Any, Callable, Optional, Type, TypeVar, Union

from result import Err, Ok, Result

from .convert import (
    parse_duration,
    parse_float,
    parse_identifier,
    parse_timestamp,
    signed_int,
    strict_bool,
    unsigned_int,
)
from .errors import (
    CliBindError,
    FlagParseError,
    InvalidDestinationError,
    UnsupportedTypeError,
)
from .metadata import (
    FieldDescriptor,
    ValueKind,
    construct,
    describe_field,
    iter_fields,
    kind_zero,
    nested_type,
    zero_value,
)
from .source import FlagSource

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Called with (flag name, value) after every field assignment.
AssignObserver = Callable[[str, Any], None]

_ELEMENT_PARSERS: dict[ValueKind, Callable[[str], Any]] = {
    ValueKind.BOOL: strict_bool,
    ValueKind.INT: signed_int,
    ValueKind.UINT: unsigned_int,
    ValueKind.FLOAT: parse_float,
    ValueKind.DURATION: parse_duration,
    ValueKind.IDENTIFIER: parse_identifier,
}

# Kinds for which an empty string means the zero value rather than an error.
_EMPTY_IS_ZERO = {
    ValueKind.STRING,
    ValueKind.DURATION,
    ValueKind.TIMESTAMP,
    ValueKind.IDENTIFIER,
}


def _as_source(source: Union[FlagSource, argparse.Namespace]) -> FlagSource:
    if isinstance(source, FlagSource):
        return source
    return FlagSource(source)


def _convert(
    kind: ValueKind, raw: str, descriptor: FieldDescriptor, flag_name: str
) -> Any:
    """Convert one string to ``kind``, raising FlagParseError on malformed input."""
    if raw == "" and kind in _EMPTY_IS_ZERO:
        return kind_zero(kind)
    if kind is ValueKind.STRING:
        return raw
    try:
        if kind is ValueKind.TIMESTAMP:
            return parse_timestamp(raw, descriptor.time_layout)
        return _ELEMENT_PARSERS[kind](raw)
    except argparse.ArgumentTypeError as e:
        raise FlagParseError(descriptor.attr, flag_name, raw, str(e)) from e


def _read_sequence(
    source: FlagSource, descriptor: FieldDescriptor, flag_name: str
) -> Any:
    element_kind = descriptor.element_kind
    if element_kind is None:
        raise UnsupportedTypeError(descriptor.attr, "sequence without an element kind")
    raw_items = source.get_string_list(flag_name)
    if not raw_items:
        return zero_value(descriptor.annotation)
    return [_convert(element_kind, item, descriptor, flag_name) for item in raw_items]


def _read_value(source: FlagSource, descriptor: FieldDescriptor, flag_name: str) -> Any:
    """Read one flag according to the field's value kind."""
    kind = descriptor.kind

    if kind is ValueKind.BOOL:
        return source.get_bool(flag_name)
    if kind is ValueKind.INT:
        return source.get_int(flag_name)
    if kind is ValueKind.UINT:
        value = source.get_uint(flag_name)
        if value < 0:
            raise FlagParseError(
                descriptor.attr, flag_name, value, "unsigned value is negative"
            )
        return value
    if kind is ValueKind.FLOAT:
        return source.get_float(flag_name)
    if kind is ValueKind.STRING:
        return source.get_string(flag_name)
    if kind in (ValueKind.DURATION, ValueKind.TIMESTAMP, ValueKind.IDENTIFIER):
        raw = source.get_string(flag_name)
        if raw == "" and descriptor.optional:
            return None
        return _convert(kind, raw, descriptor, flag_name)
    if kind is ValueKind.SEQUENCE:
        return _read_sequence(source, descriptor, flag_name)

    raise UnsupportedTypeError(descriptor.attr, f"cannot read kind {kind.value}")


def _bind_class(
    source: FlagSource,
    cls: type,
    prefix: str,
    on_assign: Optional[AssignObserver],
) -> Optional[dict[str, Any]]:
    """
    Collect the field values of ``cls`` from the flag source.

    Returns None when no field was assigned at all, so the caller can leave
    the corresponding nested field untouched.
    """
    values: dict[str, Any] = {}

    for field, annotation in iter_fields(cls):
        descriptor = describe_field(field, annotation)

        if descriptor.kind is ValueKind.NESTED:
            nested_prefix = descriptor.nested_prefix(prefix)
            if nested_prefix is None:
                continue
            sub_cls = nested_type(descriptor)
            try:
                sub_values = _bind_class(source, sub_cls, nested_prefix, on_assign)
            except (FlagParseError, UnsupportedTypeError) as e:
                raise e.nested_in(field.name) from e
            if sub_values is not None:
                values[field.name] = construct(sub_cls, sub_values)
            continue

        flag_name, _ = descriptor.resolve_names(prefix)
        if descriptor.omit_empty and not source.is_set(flag_name):
            continue

        value = _read_value(source, descriptor, flag_name)
        values[field.name] = value
        logger.debug("set value to %s: %r", flag_name, value)
        if on_assign is not None:
            on_assign(flag_name, value)

    return values or None


def bind(
    source: Union[FlagSource, argparse.Namespace],
    dest: Any,
    on_assign: Optional[AssignObserver] = None,
) -> None:
    """
    Populate a dataclass instance from parsed flag values.

    When at least one field was assigned, every field of ``dest`` is replaced:
    fields that were skipped fall back to their default or zero value. When
    nothing was assigned ``dest`` is left untouched. ``dest`` is only written
    after the whole traversal succeeded.

    Args:
        source: A FlagSource or the argparse.Namespace returned by parse_args.
        dest: The dataclass instance to populate.
        on_assign: Optional observer called with (flag name, value) for every
            assigned field.

    Raises:
        InvalidDestinationError: If dest is not a mutable dataclass instance.
        FlagParseError: If a flag value cannot be converted to its field type.
        UnsupportedTypeError: If a field cannot be represented as a flag.
    """
    if dest is None or isinstance(dest, type) or not dataclasses.is_dataclass(dest):
        raise InvalidDestinationError(
            f"bind: dest must be a dataclass instance, got {dest!r}"
        )
    cls = type(dest)
    if cls.__dataclass_params__.frozen:
        raise InvalidDestinationError(
            f"bind: dest must not be a frozen dataclass ({cls.__name__})"
        )

    values = _bind_class(_as_source(source), cls, "", on_assign)
    if values is None:
        return

    bound = construct(cls, values)
    for field in dataclasses.fields(cls):
        setattr(dest, field.name, getattr(bound, field.name))


def build(
    source: Union[FlagSource, argparse.Namespace],
    dataclass_type: Type[T],
    on_assign: Optional[AssignObserver] = None,
) -> T:
    """
    Construct a new instance of ``dataclass_type`` from parsed flag values.

    Raises the same errors as bind(); InvalidDestinationError when
    ``dataclass_type`` is not a dataclass type.
    """
    if not (isinstance(dataclass_type, type) and dataclasses.is_dataclass(dataclass_type)):
        raise InvalidDestinationError(
            f"build: expected a dataclass type, got {dataclass_type!r}"
        )
    values = _bind_class(_as_source(source), dataclass_type, "", on_assign)
    return construct(dataclass_type, values or {})


def safe_bind(
    source: Union[FlagSource, argparse.Namespace],
    dest: T,
    on_assign: Optional[AssignObserver] = None,
) -> Result[T, str]:
    """
    Like bind(), but return Ok(dest) or Err(message) instead of raising.
    """
    try:
        bind(source, dest, on_assign)
        return Ok(dest)
    except CliBindError as e:
        return Err(str(e))


def safe_build(
    source: Union[FlagSource, argparse.Namespace],
    dataclass_type: Type[T],
    on_assign: Optional[AssignObserver] = None,
) -> Result[T, str]:
    """
    Like build(), but return Ok(instance) or Err(message) instead of raising.
    """
    try:
        return Ok(build(source, dataclass_type, on_assign))
    except CliBindError as e:
        return Err(str(e))
