"""
Shell-style variable expansion for settings files.

Supported forms, where a leading ':' also treats an empty value as unset:

    ${NAME}            value of NAME; an error if NAME is unset
    ${NAME:-word}      word if NAME is unset or empty
    ${NAME-word}       word if NAME is unset
    ${NAME:+word}      word if NAME is set and non-empty, else nothing
    ${NAME+word}       word if NAME is set, else nothing
    ${NAME:?message}   an error carrying message if NAME is unset or empty
    ${NAME?message}    an error carrying message if NAME is unset
    $$                 a literal '$'

Any other '$' is left as written.
"""
import re
from typing import Mapping, Optional

from ..exceptions import ConfigError

_REFERENCE = re.compile(
    r"\$(?:(?P<dollar>\$)"
    r"|\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<op>:?[-+?])(?P<word>[^}]*))?\})"
)


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def expand_variables(text: str, variables: Mapping[str, str], source: Optional[str] = None) -> str:
    """
    Expands ${...} references in text.

    :param text: Settings file content.
    :param variables: Values to substitute, usually the environment.
    :param source: File name reported in errors.
    :raises ConfigError: If a required variable is unset, with its name and line.
    """
    def substitute(match: "re.Match") -> str:
        if match.group("dollar"):
            return "$"

        name = match.group("name")
        op = match.group("op") or ""
        word = match.group("word") or ""

        value = variables.get(name)
        present = value is not None and (value != "" or not op.startswith(":"))

        if op.endswith("-"):
            return value if present else word
        if op.endswith("+"):
            return word if present else ""
        if op.endswith("?"):
            if present:
                return value
            problem = word or "required variable is not set"
        elif value is not None:
            return value
        else:
            problem = "settings file references unset variable"

        details = {"variable": name, "line": _line_of(text, match.start())}
        if source:
            details["path"] = source
        raise ConfigError(f"{problem}: {name}", details)

    return _REFERENCE.sub(substitute, text)
