"""Fallback socket-table scan through ``lsof`` on POSIX systems."""

from __future__ import annotations

import logging
import re
from typing import List

from ..errors import PortLookupError
from .command_runner import run_command
from .lookup_models import SocketOwner

logger = logging.getLogger(__name__)

_HEADER_PREFIX = "COMMAND"
_MIN_COLUMNS = 9


def _unescape(command: str) -> str:
    # lsof renders unprintable bytes (spaces included) as \xNN
    return re.sub(r"\\x([0-9a-fA-F]{2})", lambda match: chr(int(match.group(1), 16)), command)


def parse_lsof_output(output: str, port: int) -> List[SocketOwner]:
    """
    Parse ``lsof -nP -iTCP:PORT`` output into socket owners.

    Only rows whose local address ends in ``:PORT`` are kept, so clients
    connected to the port from elsewhere are ignored. Malformed rows are
    skipped.
    """
    owners: List[SocketOwner] = []
    suffix = f":{port}"
    for line in output.splitlines():
        if not line.strip() or line.startswith(_HEADER_PREFIX):
            continue
        parts = line.split(None, _MIN_COLUMNS - 1)
        if len(parts) < _MIN_COLUMNS:
            continue
        command, pid_text, name = parts[0], parts[1], parts[-1]
        if not pid_text.isdigit():
            continue
        local = name.split("->", 1)[0].split(" ", 1)[0]
        if not local.endswith(suffix):
            continue
        owners.append(SocketOwner(pid=int(pid_text), name=_unescape(command), listening="(LISTEN)" in name))
    return owners


def lsof_port_owners(port: int, *, timeout: float) -> List[SocketOwner]:
    """
    Query ``lsof`` for processes holding ``port``.

    Raises:
        PortLookupError: If lsof fails for a reason other than "nothing found"
    """
    result = run_command(["lsof", "-nP", f"-iTCP:{port}"], timeout=timeout)
    # lsof exits 1 when nothing matches
    if result.returncode not in (0, 1):
        raise PortLookupError(port, f"lsof exited with {result.returncode}: {result.stderr.strip()}")
    owners = parse_lsof_output(result.stdout, port)
    logger.debug("lsof found %d owner(s) for port %s", len(owners), port)
    return owners
