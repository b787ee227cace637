"""Primary lookup backed by psutil's socket and process tables."""

from __future__ import annotations

import logging
from typing import List, Optional

import psutil

from ..errors import PortLookupError
from .lookup_models import ProcessDetails, SocketOwner

logger = logging.getLogger(__name__)


def _local_port(connection) -> Optional[int]:
    laddr = getattr(connection, "laddr", None)
    if not laddr:
        return None
    port = getattr(laddr, "port", None)
    if port is None:
        # Some platforms hand back a bare (ip, port) tuple
        try:
            port = laddr[1]
        except (IndexError, TypeError):
            return None
    return port


def socket_owners(port: int) -> List[SocketOwner]:
    """
    Return every pid psutil reports holding a TCP socket on ``port``.

    Raises:
        PortLookupError: If the socket table cannot be read (e.g. macOS without root)
    """
    try:
        connections = psutil.net_connections(kind="tcp")
    except psutil.AccessDenied as exc:
        raise PortLookupError(port, "access denied reading socket table") from exc
    except (psutil.Error, OSError) as exc:
        raise PortLookupError(port, str(exc)) from exc

    owners: List[SocketOwner] = []
    for connection in connections:
        if _local_port(connection) != port or not connection.pid:
            continue
        owners.append(SocketOwner(pid=connection.pid, listening=connection.status == psutil.CONN_LISTEN))
    return owners


def port_has_socket(port: int) -> bool:
    """
    Return True when a process still holds ``port`` or it is still listening.

    Ownerless sockets in TIME_WAIT are left over from closed connections and
    do not keep the port busy for a new listener, so they are ignored.
    """
    try:
        connections = psutil.net_connections(kind="tcp")
    except (psutil.Error, OSError) as exc:
        raise PortLookupError(port, str(exc)) from exc
    return any(
        _local_port(connection) == port and (connection.pid or connection.status == psutil.CONN_LISTEN) for connection in connections
    )


def describe_process(pid: int) -> Optional[ProcessDetails]:
    """Read name, command line and working directory; ``None`` if the pid is gone."""
    try:
        proc = psutil.Process(pid)
    except psutil.NoSuchProcess:
        logger.debug("Process %s vanished before psutil inspection", pid)
        return None

    name = command_line = working_directory = None
    with proc.oneshot():
        try:
            name = proc.name()
        except psutil.NoSuchProcess:
            logger.debug("Process %s vanished while reading its name", pid)
            return None
        except psutil.AccessDenied:
            logger.debug("Access denied reading name of process %s", pid)

        try:
            cmdline = proc.cmdline()
            command_line = " ".join(cmdline) if cmdline else None
        except (psutil.AccessDenied, psutil.ZombieProcess):
            logger.debug("Command line of process %s is not readable", pid)
        except psutil.NoSuchProcess:
            return None

        try:
            working_directory = proc.cwd() or None
        except (psutil.AccessDenied, psutil.ZombieProcess):
            logger.debug("Working directory of process %s is not readable", pid)
        except psutil.NoSuchProcess:
            return None

    return ProcessDetails(name=name, command_line=command_line, working_directory=working_directory)
