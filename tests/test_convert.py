import argparse
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from dataclass_clibind.convert import (
    parse_duration,
    parse_identifier,
    parse_timestamp,
    strict_bool,
    unsigned_int,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("0", timedelta(0)),
        ("250ms", timedelta(milliseconds=250)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("2h45m30.5s", timedelta(hours=2, minutes=45, seconds=30.5)),
        ("-1.5h", -timedelta(hours=1.5)),
        ("+10s", timedelta(seconds=10)),
        ("1500us", timedelta(microseconds=1500)),
        ("1500µs", timedelta(microseconds=1500)),
        ("2000ns", timedelta(microseconds=2)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "-", "10", "1x", "h", "1h 30m", "1.2.3s"])
def test_parse_duration_rejects_malformed_input(text):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_duration(text)


class TestParseTimestamp:
    def test_rfc3339_with_z(self):
        assert parse_timestamp("2025-01-02T15:04:05Z") == datetime(
            2025, 1, 2, 15, 4, 5, tzinfo=timezone.utc
        )

    def test_rfc3339_with_offset(self):
        parsed = parse_timestamp("2025-01-02T15:04:05+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)

    def test_rfc3339_requires_offset(self):
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid RFC 3339"):
            parse_timestamp("2025-01-02T15:04:05")

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2025-01-02T15:04:05.5Z", datetime(2025, 1, 2, 15, 4, 5, 500000, tzinfo=timezone.utc)),
            ("2025-01-02t15:04:05.123456789z", datetime(2025, 1, 2, 15, 4, 5, 123456, tzinfo=timezone.utc)),
            (
                "2025-01-02T15:04:05-05:30",
                datetime(2025, 1, 2, 15, 4, 5, tzinfo=timezone(-timedelta(hours=5, minutes=30))),
            ),
        ],
    )
    def test_rfc3339_accepted_forms(self, text, expected):
        parsed = parse_timestamp(text)
        assert parsed == expected
        assert parsed.utcoffset() == expected.utcoffset()

    @pytest.mark.parametrize(
        "text",
        [
            "20250102T150405Z",
            "2025-01-02 15:04:05Z",
            "2025-W01-4T15:04:05Z",
            "2025-01-02T15:04Z",
            "2025-01-02T15:04:05+0200",
            " 2025-01-02T15:04:05Z",
            "2025-13-02T15:04:05Z",
            "2025-01-02T15:04:05+24:00",
        ],
    )
    def test_rfc3339_rejected_forms(self, text):
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid RFC 3339"):
            parse_timestamp(text)

    def test_custom_layout(self):
        assert parse_timestamp("2024-03-09", "%Y-%m-%d") == datetime(2024, 3, 9)

    def test_custom_layout_mismatch(self):
        with pytest.raises(argparse.ArgumentTypeError, match="%Y-%m-%d"):
            parse_timestamp("not-a-date", "%Y-%m-%d")


def test_parse_identifier():
    text = "b33a6a1c-1f2e-4d3c-9a8b-7c6d5e4f3a21"
    assert parse_identifier(text) == uuid.UUID(text)
    assert parse_identifier("{" + text + "}") == uuid.UUID(text)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_identifier("not-a-uuid")


def test_strict_bool():
    assert strict_bool("true") is True
    assert strict_bool("0") is False
    with pytest.raises(argparse.ArgumentTypeError):
        strict_bool("yes")


def test_unsigned_int():
    assert unsigned_int("42") == 42
    with pytest.raises(argparse.ArgumentTypeError, match="negative"):
        unsigned_int("-1")
    with pytest.raises(argparse.ArgumentTypeError):
        unsigned_int("4.2")
