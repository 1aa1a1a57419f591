import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

import pytest

from dataclass_clibind import NIL_UUID, ZERO_TIME, UInt, UnsupportedTypeError, ValueKind
from dataclass_clibind.metadata import (
    classify,
    construct,
    describe_field,
    iter_fields,
    parse_names_with_options,
    split_csv,
    zero_value,
)


@dataclass
class Tagged:
    name: str = field(
        default="",
        metadata={"cli": "name, n, nick, omitempty", "cli_default": "guest", "help": "User name"},
    )
    MaxWorkers: int = field(default=0)
    when: datetime = field(
        default=ZERO_TIME, metadata={"cli": "when", "cli_time_layout": "%Y-%m-%d"}
    )
    _private: int = field(default=0)
    derived: str = field(default="", init=False)


@dataclass
class Inner:
    value: int = 0


@dataclass
class NoDefaults:
    flag: bool
    count: int
    size: UInt
    ratio: float
    label: str
    timeout: timedelta
    when: datetime
    ident: uuid.UUID
    items: list[str]
    inner: Inner
    maybe: Optional[Inner]


def fields_by_name(cls):
    return {f.name: (f, annotation) for f, annotation in iter_fields(cls)}


class TestParseNamesWithOptions:
    def test_name_aliases_and_omitempty(self):
        assert parse_names_with_options("name,n,nick,omitempty") == (
            "name",
            ["n", "nick"],
            True,
        )

    def test_whitespace_is_trimmed(self):
        assert parse_names_with_options("  count , c ") == ("count", ["c"], False)

    @pytest.mark.parametrize("tag", ["", "   ", ",n,omitempty"])
    def test_missing_primary_name(self, tag):
        assert parse_names_with_options(tag) == ("", [], False)


def test_split_csv():
    assert split_csv("alpha, beta") == ["alpha", "beta"]
    assert split_csv(" one ") == ["one"]
    assert split_csv("") == []


class TestClassify:
    @pytest.mark.parametrize(
        "annotation,kind",
        [
            (bool, ValueKind.BOOL),
            (int, ValueKind.INT),
            (UInt, ValueKind.UINT),
            (float, ValueKind.FLOAT),
            (str, ValueKind.STRING),
            (timedelta, ValueKind.DURATION),
            (datetime, ValueKind.TIMESTAMP),
            (uuid.UUID, ValueKind.IDENTIFIER),
            (Inner, ValueKind.NESTED),
            (Optional[int], ValueKind.INT),
            (Optional[Inner], ValueKind.NESTED),
            (int | None, ValueKind.INT),
        ],
    )
    def test_scalar_and_nested_kinds(self, annotation, kind):
        assert classify(annotation, "f") == (kind, None)

    def test_sequence_kind_carries_element_kind(self):
        assert classify(list[uuid.UUID], "ids") == (
            ValueKind.SEQUENCE,
            ValueKind.IDENTIFIER,
        )
        assert classify(list, "items") == (ValueKind.SEQUENCE, ValueKind.STRING)

    def test_sequence_of_sequences_is_unsupported(self):
        with pytest.raises(UnsupportedTypeError) as excinfo:
            classify(list[list[int]], "matrix")
        assert excinfo.value.field == "matrix"

    def test_sequence_of_dataclasses_is_unsupported(self):
        with pytest.raises(UnsupportedTypeError):
            classify(list[Inner], "inners")

    def test_unknown_type_is_unsupported(self):
        with pytest.raises(UnsupportedTypeError, match="unsupported type"):
            classify(dict[str, int], "mapping")


class TestDescribeField:
    def test_metadata_is_interpreted(self):
        f, annotation = fields_by_name(Tagged)["name"]
        descriptor = describe_field(f, annotation)
        assert descriptor.name == "name"
        assert descriptor.aliases == ("n", "nick")
        assert descriptor.omit_empty is True
        assert descriptor.default == "guest"
        assert descriptor.usage == "User name"
        assert descriptor.declared is True
        assert descriptor.required is False

    def test_name_derived_by_lower_casing(self):
        f, annotation = fields_by_name(Tagged)["MaxWorkers"]
        descriptor = describe_field(f, annotation)
        assert descriptor.name == "maxworkers"
        assert descriptor.declared is False
        assert descriptor.required is True

    def test_time_layout(self):
        f, annotation = fields_by_name(Tagged)["when"]
        assert describe_field(f, annotation).time_layout == "%Y-%m-%d"

    def test_private_and_non_init_fields_are_skipped(self):
        names = set(fields_by_name(Tagged))
        assert names == {"name", "MaxWorkers", "when"}

    def test_prefix_resolution(self):
        f, annotation = fields_by_name(Tagged)["name"]
        descriptor = describe_field(f, annotation)
        assert descriptor.resolve_names("db-") == ("db-name", ["n", "db-nick"])

    def test_embed_on_scalar_is_unsupported(self):
        @dataclass
        class BadEmbed:
            value: int = field(default=0, metadata={"cli_embed": True})

        f, annotation = fields_by_name(BadEmbed)["value"]
        with pytest.raises(UnsupportedTypeError, match="cli_embed"):
            describe_field(f, annotation)


class TestZeroValues:
    def test_zero_value_per_type(self):
        assert zero_value(bool) is False
        assert zero_value(int) == 0
        assert zero_value(UInt) == 0
        assert zero_value(float) == 0.0
        assert zero_value(str) == ""
        assert zero_value(timedelta) == timedelta(0)
        assert zero_value(datetime) == ZERO_TIME
        assert zero_value(uuid.UUID) == NIL_UUID
        assert zero_value(list[int]) == []
        assert zero_value(Optional[int]) is None
        assert zero_value(Inner) == Inner(value=0)

    def test_construct_fills_fields_without_defaults(self):
        instance = construct(NoDefaults, {"count": 3})
        assert instance.count == 3
        assert instance.flag is False
        assert instance.label == ""
        assert instance.ident == NIL_UUID
        assert instance.items == []
        assert instance.inner == Inner()
        assert instance.maybe is None

    def test_construct_keeps_dataclass_defaults(self):
        instance = construct(Tagged, {})
        assert dataclasses.asdict(instance)["when"] == ZERO_TIME
        assert instance.name == ""
