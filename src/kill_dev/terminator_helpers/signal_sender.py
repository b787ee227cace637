"""Deliver escalation steps to a pid through psutil."""

from __future__ import annotations

import logging

import psutil

from .signal_plan import EscalationStep

logger = logging.getLogger(__name__)


def send_step(pid: int, step: EscalationStep) -> None:
    """
    Deliver one escalation step to ``pid``.

    Raises:
        ProcessLookupError: If the process no longer exists
        PermissionError: If the caller may not signal the process
    """
    try:
        proc = psutil.Process(pid)
        if step.signum is None:
            proc.kill()
        else:
            proc.send_signal(step.signum)
    except psutil.NoSuchProcess as exc:
        raise ProcessLookupError(pid) from exc
    except psutil.AccessDenied as exc:
        raise PermissionError(f"Access denied sending {step.name} to PID {pid}") from exc
    logger.debug("Sent %s to PID %s", step.name, pid)
