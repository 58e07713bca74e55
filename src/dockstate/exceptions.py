# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Errors raised while driving the container runtime CLI.

Exception Hierarchy:
    DockstateError (base)
    ├── CommandError - the runtime CLI could not be run or exited non-zero
    │   └── AuthenticationError - registry login failed
    ├── OutputParseError - the CLI printed something we cannot read
    │   └── InspectionFieldError - inspection lacks a field or it has the wrong type
    ├── NotFoundError - a well-formed lookup matched nothing
    │   └── ImageNotFoundError
    ├── ConvergenceError - the target image is not confirmed running
    ├── InvalidReferenceError - an image reference, id or digest is unusable
    └── ConfigError - settings file could not be loaded
"""
from typing import Any, Dict, List, Optional


class DockstateError(Exception):
    """
    Base exception for everything raised by dockstate.

    Attributes:
        message: Human-readable error description
        details: Extra context (ids, digests, operation) rendered into str()
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception to a dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class CommandError(DockstateError):
    """
    Raised when the runtime CLI is missing, fails on its streams,
    or exits with a non-zero status.
    """

    def __init__(
        self,
        message: str,
        args: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if returncode is not None:
            details.setdefault("exit_code", returncode)
        if stderr:
            details.setdefault("stderr", stderr.strip())
        super().__init__(message, details)
        self.command_args = list(args or [])
        self.returncode = returncode
        self.stderr = stderr


class AuthenticationError(CommandError):
    """Raised when `login` against a registry fails."""


class OutputParseError(DockstateError):
    """Raised when CLI output does not have the expected shape."""


class InspectionFieldError(OutputParseError):
    """Raised when an inspection record lacks a field or holds the wrong type."""

    def __init__(self, field: str, message: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details.setdefault("field", field)
        super().__init__(message, details)
        self.field = field


class NotFoundError(DockstateError):
    """Raised when a lookup by id or digest matched zero records."""


class ImageNotFoundError(NotFoundError):
    """Raised when no listed image matches a local id or content digest."""


class ConvergenceError(DockstateError):
    """Raised when no container is confirmed running the target digest."""


class InvalidReferenceError(DockstateError, ValueError):
    """Raised when an image reference, local id or digest argument is unusable."""


class ConfigError(DockstateError):
    """Raised when a settings file cannot be read or validated."""
