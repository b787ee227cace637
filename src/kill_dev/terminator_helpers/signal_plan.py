"""Escalation ladders of termination signals."""

from __future__ import annotations

import signal
import sys
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class EscalationStep:
    """One rung of the ladder; ``signum`` of ``None`` means a forceful terminate call."""

    name: str
    signum: Optional[int]


FORCE_TERMINATE = EscalationStep(name="TerminateProcess", signum=None)

POSIX_ESCALATION: Tuple[EscalationStep, ...] = (
    EscalationStep(name="SIGTERM", signum=int(signal.SIGTERM)),
    EscalationStep(name="SIGINT", signum=int(signal.SIGINT)),
    EscalationStep(name="SIGKILL", signum=int(getattr(signal, "SIGKILL", signal.SIGTERM))),
)

# Windows has no signal ladder, a single TerminateProcess call replaces it
WINDOWS_ESCALATION: Tuple[EscalationStep, ...] = (FORCE_TERMINATE,)


def default_escalation(platform: Optional[str] = None) -> Tuple[EscalationStep, ...]:
    if (platform or sys.platform).startswith("win"):
        return WINDOWS_ESCALATION
    return POSIX_ESCALATION
