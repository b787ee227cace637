"""Fallback socket-table scan through ``netstat`` on Windows."""

from __future__ import annotations

import logging
from typing import List

from ..errors import PortLookupError
from .command_runner import run_command
from .lookup_models import SocketOwner

logger = logging.getLogger(__name__)


def parse_netstat_output(output: str, port: int) -> List[SocketOwner]:
    """Parse ``netstat -ano`` rows (``TCP local foreign state pid``) for ``port``."""
    owners: List[SocketOwner] = []
    suffix = f":{port}"
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 5 or parts[0].upper() != "TCP":
            continue
        local, state, pid_text = parts[1], parts[3], parts[4]
        if not local.endswith(suffix) or not pid_text.isdigit():
            continue
        pid = int(pid_text)
        if pid == 0:
            # System Idle Process owns TIME_WAIT remnants
            continue
        owners.append(SocketOwner(pid=pid, listening=state.upper() == "LISTENING"))
    return owners


def netstat_port_owners(port: int, *, timeout: float) -> List[SocketOwner]:
    """
    Query ``netstat`` for processes holding ``port``.

    Raises:
        PortLookupError: If netstat exits with an error
    """
    result = run_command(["netstat", "-ano"], timeout=timeout)
    if result.returncode != 0:
        raise PortLookupError(port, f"netstat exited with {result.returncode}: {result.stderr.strip()}")
    owners = parse_netstat_output(result.stdout, port)
    logger.debug("netstat found %d owner(s) for port %s", len(owners), port)
    return owners
