from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class SocketOwner:
    """A pid seen holding a socket, as reported by one lookup backend."""

    pid: int
    name: Optional[str] = None
    listening: bool = True


@dataclass(frozen=True)
class ProcessDetails:
    """Descriptive fields for a pid; ``None`` marks a field that could not be read."""

    name: Optional[str] = None
    command_line: Optional[str] = None
    working_directory: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.command_line is not None and self.working_directory is not None


def pick_owner(owners: Iterable[SocketOwner]) -> Optional[SocketOwner]:
    """Choose one owner deterministically: listening sockets first, then lowest pid."""
    candidates: List[SocketOwner] = [owner for owner in owners if owner.pid > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda owner: (not owner.listening, owner.pid))
