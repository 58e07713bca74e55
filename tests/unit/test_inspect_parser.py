"""
Unit tests for the inspect output parser.
"""
import pytest

from dockstate.exceptions import InspectionFieldError, OutputParseError
from dockstate.PARSERS.inspect_parser import get_string_field, parse_inspection


def test_returns_first_object():
    record = parse_inspection('[{"Id": "abc", "Image": "sha256:1"}, {"Id": "def"}]')
    assert record == {"Id": "abc", "Image": "sha256:1"}


def test_nested_values_kept():
    record = parse_inspection('[{"State": {"Running": true, "Pid": 42}}]')
    assert record["State"]["Pid"] == 42


@pytest.mark.parametrize("text", [
    "",
    "not json",
    "[",
    "[]",
    '{"Id": "abc"}',
    '["abc"]',
])
def test_rejects_unusable_output(text):
    with pytest.raises(OutputParseError):
        parse_inspection(text)


def test_string_field():
    assert get_string_field({"Image": "sha256:1"}, "Image") == "sha256:1"


def test_missing_field():
    with pytest.raises(InspectionFieldError) as excinfo:
        get_string_field({"Id": "abc"}, "Image")
    assert excinfo.value.field == "Image"


@pytest.mark.parametrize("value", [None, 42, ["sha256:1"], {"id": "sha256:1"}])
def test_wrong_type_is_not_coerced(value):
    with pytest.raises(InspectionFieldError):
        get_string_field({"Image": value}, "Image")


def test_field_error_is_a_parse_error():
    with pytest.raises(OutputParseError):
        get_string_field({}, "Image")
