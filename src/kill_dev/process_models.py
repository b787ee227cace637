from __future__ import annotations

import ntpath
import posixpath
from dataclasses import dataclass
from typing import Optional

from .errors import TerminationPermissionError

UNKNOWN = "unknown"
MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class ProcessHandle:
    """A process found bound to a port during one scan."""

    port: int
    pid: int
    name: str
    command_line: str = UNKNOWN
    working_directory: str = UNKNOWN

    def __post_init__(self) -> None:
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ValueError(f"Port out of range: {self.port}")
        if self.pid <= 0:
            raise ValueError(f"PID must be positive: {self.pid}")

    @property
    def short_command(self) -> str:
        """Basename of the executable in the command line."""
        if not self.command_line or self.command_line == UNKNOWN:
            return UNKNOWN
        executable = self.command_line.split(" ")[0]
        return posixpath.basename(ntpath.basename(executable)) or executable

    @property
    def label(self) -> str:
        return f"Port {self.port} (PID {self.pid})"


@dataclass(frozen=True)
class TerminationOutcome:
    """Result of one termination attempt, used only for the run summary."""

    handle: ProcessHandle
    terminated: bool
    port_still_bound: bool
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.terminated and not self.port_still_bound

    @property
    def permission_denied(self) -> bool:
        return isinstance(self.error, TerminationPermissionError)


__all__ = ["MAX_PORT", "MIN_PORT", "UNKNOWN", "ProcessHandle", "TerminationOutcome"]
