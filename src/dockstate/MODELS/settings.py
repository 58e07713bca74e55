"""
Settings for talking to the container runtime.
"""
import logging
from typing import Optional
from pydantic import BaseModel, field_validator

class RuntimeSettings(BaseModel):
    """
    Which CLI to drive and where to log in for private pulls.
    """
    tool: str = "docker"
    registry_host: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("tool")
    @classmethod
    def _tool_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tool must not be empty")
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level
