"""Immutable runtime settings assembled once at startup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .runtime import env_bool, env_float, env_list, env_str

# Next.js / React dev servers start at 3000, Vite at 5173
DEFAULT_PORT_TOKENS: tuple[str, ...] = ("3000-3010", "5173-5183")
DEFAULT_SIGNAL_WAIT_SECONDS = 0.5
DEFAULT_LOOKUP_TIMEOUT_SECONDS = 5.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Configuration for a single kill-dev run."""

    default_port_tokens: tuple[str, ...] = DEFAULT_PORT_TOKENS
    signal_wait_seconds: float = DEFAULT_SIGNAL_WAIT_SECONDS
    lookup_timeout_seconds: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    parallel: bool = False

    def __post_init__(self) -> None:
        if not self.default_port_tokens:
            raise ConfigurationError.missing_value("default_port_tokens")
        if self.signal_wait_seconds < 0:
            raise ConfigurationError.invalid_value("signal_wait_seconds", self.signal_wait_seconds, "Must be non-negative")
        if self.lookup_timeout_seconds <= 0:
            raise ConfigurationError.invalid_value("lookup_timeout_seconds", self.lookup_timeout_seconds, "Must be positive")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError.invalid_value("log_level", self.log_level, "Expected a logging level name")


def load_settings() -> Settings:
    """Build settings from ``KILL_DEV_*`` environment variables."""
    return Settings(
        default_port_tokens=env_list("KILL_DEV_DEFAULT_PORTS", or_value=DEFAULT_PORT_TOKENS) or DEFAULT_PORT_TOKENS,
        signal_wait_seconds=env_float("KILL_DEV_SIGNAL_WAIT_SECONDS", or_value=DEFAULT_SIGNAL_WAIT_SECONDS),
        lookup_timeout_seconds=env_float("KILL_DEV_LOOKUP_TIMEOUT_SECONDS", or_value=DEFAULT_LOOKUP_TIMEOUT_SECONDS),
        log_level=env_str("KILL_DEV_LOG_LEVEL", or_value=DEFAULT_LOG_LEVEL),
        log_file=env_str("KILL_DEV_LOG_FILE"),
        parallel=bool(env_bool("KILL_DEV_PARALLEL", or_value=False)),
    )


__all__ = ["DEFAULT_PORT_TOKENS", "Settings", "load_settings"]
