"""
Loading of runtime settings from a YAML file, a .env file and the environment.

Precedence, lowest first: defaults, YAML file, DOCKSTATE_* variables.
"""
import os
from typing import Dict, Optional

import yaml
from dotenv import dotenv_values
from pydantic import ValidationError

from ..exceptions import ConfigError
from ..MODELS.settings import RuntimeSettings
from .variable_expansion import expand_variables

ENV_PREFIX = "DOCKSTATE_"
ENV_FIELDS = {
    "TOOL": "tool",
    "REGISTRY_HOST": "registry_host",
    "LOG_LEVEL": "log_level",
}


def build_context(env: Optional[Dict[str, str]] = None, dotenv_path: str = ".env") -> Dict[str, str]:
    """
    Merges variables from a .env file (if present) under the given environment.

    :param env: Environment to use. Defaults to os.environ.
    :param dotenv_path: Path to the .env file.
    :return: Variables with the environment taking precedence.
    """
    context: Dict[str, str] = {}
    if os.path.exists(dotenv_path):
        context.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
    context.update(os.environ if env is None else env)
    return context


def load_settings(
    path: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    dotenv_path: str = ".env",
) -> RuntimeSettings:
    """
    Loads runtime settings.

    :param path: Optional YAML settings file.
    :param env: Environment to use. Defaults to os.environ.
    :param dotenv_path: Path to a .env file merged under the environment.
    :raises ConfigError: If the file is missing, malformed or has invalid values.
    """
    context = build_context(env, dotenv_path)
    data: Dict[str, object] = {}

    if path:
        try:
            with open(path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"cannot read settings file: {e.strerror}", {"path": path}) from e

        content = expand_variables(content, context, source=path)
        try:
            loaded = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"settings file is not valid YAML: {e}", {"path": path}) from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("settings file must contain a mapping", {"path": path})
        data.update(loaded)

    for suffix, field in ENV_FIELDS.items():
        value = context.get(ENV_PREFIX + suffix)
        if value:
            data[field] = value

    try:
        return RuntimeSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid settings: {e.errors()[0]['msg']}", {"path": path}) from e
