"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import (
    env_bool,
    env_float,
    env_list,
    env_str,
)
from .settings import DEFAULT_PORT_TOKENS, Settings, load_settings

__all__ = [
    "ConfigurationError",
    "DEFAULT_PORT_TOKENS",
    "Settings",
    "env_bool",
    "env_float",
    "env_list",
    "env_str",
    "load_settings",
]
