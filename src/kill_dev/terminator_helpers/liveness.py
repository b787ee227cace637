"""Zero-effect liveness probe for a pid."""

from __future__ import annotations

import logging

import psutil

logger = logging.getLogger(__name__)


def pid_is_alive(pid: int) -> bool:
    """Return True while ``pid`` exists and is not a zombie awaiting reaping."""
    if not psutil.pid_exists(pid):
        return False
    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        # Existence is confirmed even if the status is unreadable
        logger.debug("Status of PID %s is not readable; assuming alive", pid)
        return True
