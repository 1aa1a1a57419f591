import pytest
from dataclasses import dataclass, field
from unittest.mock import patch
from io import StringIO

from dataclass_clibind import DataclassFlagParser


@dataclass
class SampleConfigForFlags:
    string_field: str = field(
        default="",
        metadata={"cli": "string-field", "cli_default": "default_value", "help": "A string field"},
    )


def test_add_flag_method_and_help_and_parse():
    parser = DataclassFlagParser(SampleConfigForFlags)

    # Add a custom boolean flag via the method
    parser.add_flag("--verbose", "-v", action="store_true", help="Enable verbose")

    # Check that help includes the new flag
    with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
        with pytest.raises(SystemExit):
            parser.parser.parse_args(["--help"])
        help_output = mock_stdout.getvalue()

    assert "--verbose" in help_output
    assert "Enable verbose" in help_output

    # Check that parsing sets the flag and dataclass flags still parse
    ns = parser.parser.parse_args(["--verbose", "--string-field", "custom"])
    assert hasattr(ns, "verbose") and ns.verbose is True

    result = parser.parse(["--verbose", "--string-field", "custom"])
    cfg = result["SampleConfigForFlags"]
    assert cfg.string_field == "custom"
    # custom flag should be present as a top-level key in parse result
    assert "verbose" in result
    assert result.get("verbose") is True


def test_flags_via_constructor_accepts_multiple_formats_and_parse_help():
    # Provide flags via constructor in both tuple and dict forms
    flags = [
        ("--log", {"type": str, "help": "Log file path"}),
        {"names": "--quiet", "kwargs": {"action": "store_true", "help": "Quiet mode"}},
    ]

    parser = DataclassFlagParser(SampleConfigForFlags, flags=flags)

    with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
        with pytest.raises(SystemExit):
            parser.parser.parse_args(["--help"])
        help_output = mock_stdout.getvalue()

    assert "--log" in help_output
    assert "Log file path" in help_output
    assert "--quiet" in help_output
    assert "Quiet mode" in help_output

    result = parser.parse(["--log", "/tmp/log.txt", "--quiet", "--string-field", "abc"])
    cfg = result["SampleConfigForFlags"]
    assert cfg.string_field == "abc"
    assert result.get("log") == "/tmp/log.txt"
    assert result.get("quiet") is True


def test_invalid_flag_spec_in_constructor_raises():
    with pytest.raises(ValueError, match="Each flag must be"):
        DataclassFlagParser(SampleConfigForFlags, flags=["--bare"])


def test_conflict_between_constructor_and_add_flag_raises():
    flags = [("--conflict", {"action": "store_true", "help": "From constructor"})]
    parser = DataclassFlagParser(SampleConfigForFlags, flags=flags)

    with pytest.raises(ValueError) as exc:
        parser.add_flag("--conflict", action="store_true", help="From add_flag")

    assert "Flag name conflict" in str(exc.value)
    res = parser.parse(["--conflict", "--string-field", "x"])
    assert res.get("conflict") is True


def test_add_flag_conflicting_with_generated_flag_raises():
    parser = DataclassFlagParser(SampleConfigForFlags)
    with pytest.raises(ValueError, match="--string-field"):
        parser.add_flag("--string-field", type=str)
