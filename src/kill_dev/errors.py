"""Common error types used across kill-dev."""

from __future__ import annotations

from typing import Sequence


class KillDevError(Exception):
    """Base class for kill-dev failures."""


class PortLookupError(KillDevError):
    """Raised when the OS cannot be queried for the owner of a port."""

    def __init__(self, port: int, reason: str) -> None:
        super().__init__(f"Lookup for port {port} failed: {reason}")
        self.port = port
        self.reason = reason


class CommandUnavailableError(KillDevError):
    """Raised when an OS inspection tool is missing or cannot be executed."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        super().__init__(f"Command {argv[0]!r} unavailable: {reason}")
        self.argv = tuple(argv)
        self.reason = reason


class TerminationPermissionError(KillDevError):
    """Raised when even the strongest signal is refused for lack of privileges."""

    def __init__(self, pid: int, signal_name: str) -> None:
        super().__init__(f"Permission denied sending {signal_name} to PID {pid}")
        self.pid = pid
        self.signal_name = signal_name


class PromptUnavailableError(KillDevError):
    """Raised when the interactive prompt cannot be rendered in this environment."""


__all__ = [
    "CommandUnavailableError",
    "KillDevError",
    "PortLookupError",
    "PromptUnavailableError",
    "TerminationPermissionError",
]
