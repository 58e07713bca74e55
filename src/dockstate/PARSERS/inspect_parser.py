"""
Parser for the JSON printed by `container inspect`.
"""
import json
from typing import Any

from ..exceptions import InspectionFieldError, OutputParseError
from ..MODELS.runtime_records import InspectionRecord


def parse_inspection(text: str) -> InspectionRecord:
    """
    Parses inspect output and returns its first object.

    :param text: JSON array printed by the CLI.
    :return: The first object of the array.
    :raises OutputParseError: If the text is not a non-empty JSON array of objects.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OutputParseError(f"failed to parse inspect output: {e.msg}") from e

    if not isinstance(data, list):
        raise OutputParseError(
            "failed to parse inspect output: expected a JSON array",
            {"got": type(data).__name__},
        )
    if not data:
        raise OutputParseError("failed to parse inspect output: empty array")

    first = data[0]
    if not isinstance(first, dict):
        raise OutputParseError(
            "failed to parse inspect output: expected an object",
            {"got": type(first).__name__},
        )
    return first


def get_string_field(record: InspectionRecord, field: str) -> str:
    """
    Returns a string field of an inspection record.

    :raises InspectionFieldError: If the field is absent or not a string.
    """
    if field not in record:
        raise InspectionFieldError(field, f"inspection has no {field!r} field")

    value: Any = record[field]
    if not isinstance(value, str):
        raise InspectionFieldError(
            field,
            f"inspection field {field!r} is not a string",
            {"type": type(value).__name__},
        )
    return value
