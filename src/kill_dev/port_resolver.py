"""
Port Resolver

Finds the process that owns a local TCP port. Lookups go through three
stages in a fixed order:

1. psutil's socket table (primary)
2. platform tools for fields psutil could not read (auxiliary)
3. a raw ``lsof``/``netstat`` scan when the primary stage finds nothing (fallback)

When several processes hold the same port, listening sockets win and the
lowest pid among them is surfaced. Only that one process is reported.

Usage:
    from kill_dev.port_resolver import PortResolver

    handles = await PortResolver().resolve_many([3000, 5173])
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from typing import Callable, Iterable, List, Optional

import psutil

from .config.settings import DEFAULT_LOOKUP_TIMEOUT_SECONDS
from .errors import CommandUnavailableError, KillDevError, PortLookupError
from .port_resolver_helpers.lookup_models import ProcessDetails, SocketOwner, pick_owner
from .port_resolver_helpers.lsof_parser import lsof_port_owners
from .port_resolver_helpers.netstat_parser import netstat_port_owners
from .port_resolver_helpers.process_inspection import (
    lsof_working_directory,
    ps_command_line,
    tasklist_image_name,
)
from .port_resolver_helpers.psutil_lookup import describe_process, port_has_socket, socket_owners
from .process_models import UNKNOWN, ProcessHandle

logger = logging.getLogger(__name__)


class PortResolver:
    """Resolve ports to the processes bound to them."""

    def __init__(self, *, lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS, platform: Optional[str] = None) -> None:
        self._lookup_timeout = lookup_timeout
        self._windows = (platform or sys.platform).startswith("win")

    def resolve(self, port: int) -> Optional[ProcessHandle]:
        """
        Return the process bound to ``port``, or ``None`` if there is none or lookup fails.

        Every OS tool started for one port shares a single ``lookup_timeout``
        budget. Auxiliary lookups that no longer fit are skipped and their
        fields reported as unknown.
        """
        deadline = time.monotonic() + self._lookup_timeout
        owner = self._find_owner(port, deadline)
        if owner is None:
            logger.debug("No process found on port %s", port)
            return None

        details = self._describe(owner, deadline)
        if details is None:
            logger.debug("Process %s on port %s exited during lookup", owner.pid, port)
            return None

        return ProcessHandle(
            port=port,
            pid=owner.pid,
            name=details.name or owner.name or UNKNOWN,
            command_line=details.command_line or UNKNOWN,
            working_directory=details.working_directory or UNKNOWN,
        )

    def is_port_bound(self, port: int) -> bool:
        """Return True while any process still holds ``port``."""
        try:
            return port_has_socket(port)
        except PortLookupError as exc:
            logger.debug("Primary bind check failed: %s", exc)

        owners = self._fallback_owners(port, time.monotonic() + self._lookup_timeout)
        if owners is None:
            logger.warning("Could not verify whether port %s is free", port)
            return False
        return bool(owners)

    async def resolve_many(self, ports: Iterable[int]) -> List[ProcessHandle]:
        """
        Resolve every port concurrently.

        Each lookup runs on a worker thread under its own timeout, so a stuck
        query only costs that port. Results keep the input order and hold at
        most one handle per port.
        """
        unique_ports = list(dict.fromkeys(ports))
        results = await asyncio.gather(*(self._resolve_isolated(port) for port in unique_ports))
        return [handle for handle in results if handle is not None]

    async def is_port_bound_async(self, port: int) -> bool:
        return await asyncio.to_thread(self.is_port_bound, port)

    async def _resolve_isolated(self, port: int) -> Optional[ProcessHandle]:
        try:
            return await asyncio.wait_for(asyncio.to_thread(self.resolve, port), timeout=self._lookup_timeout)
        except asyncio.TimeoutError:
            logger.warning("Lookup for port %s timed out after %ss", port, self._lookup_timeout)
        except (psutil.Error, OSError, KillDevError) as exc:
            logger.debug("Lookup for port %s failed: %s", port, exc)
        return None

    def _find_owner(self, port: int, deadline: float) -> Optional[SocketOwner]:
        try:
            owner = pick_owner(socket_owners(port))
        except PortLookupError as exc:
            logger.debug("Primary lookup unavailable: %s", exc)
            owner = None
        if owner is not None:
            return owner

        owners = self._fallback_owners(port, deadline)
        if not owners:
            return None
        return pick_owner(owners)

    def _fallback_owners(self, port: int, deadline: float) -> Optional[List[SocketOwner]]:
        """Raw socket-table scan; ``None`` means the scan itself could not run."""
        timeout = _remaining(deadline)
        if timeout is None:
            logger.debug("No time left for fallback lookup on port %s", port)
            return None
        try:
            if self._windows:
                return netstat_port_owners(port, timeout=timeout)
            return lsof_port_owners(port, timeout=timeout)
        except (PortLookupError, CommandUnavailableError) as exc:
            logger.debug("Fallback lookup for port %s failed: %s", port, exc)
            return None

    def _describe(self, owner: SocketOwner, deadline: float) -> Optional[ProcessDetails]:
        try:
            details = describe_process(owner.pid)
        except psutil.Error as exc:
            logger.debug("psutil could not describe process %s: %s", owner.pid, exc)
            details = ProcessDetails()
        if details is None or details.complete:
            return details
        return self._fill_missing(owner.pid, details, deadline)

    def _fill_missing(self, pid: int, details: ProcessDetails, deadline: float) -> ProcessDetails:
        name, command_line, working_directory = details.name, details.command_line, details.working_directory
        if self._windows:
            if name is None:
                name = _within(deadline, tasklist_image_name, pid)
        else:
            if command_line is None:
                command_line = _within(deadline, ps_command_line, pid)
            if working_directory is None:
                working_directory = _within(deadline, lsof_working_directory, pid)
        return ProcessDetails(name=name, command_line=command_line, working_directory=working_directory)


def _remaining(deadline: float) -> Optional[float]:
    left = deadline - time.monotonic()
    return left if left > 0 else None


def _within(deadline: float, lookup: Callable[..., Optional[str]], pid: int) -> Optional[str]:
    timeout = _remaining(deadline)
    if timeout is None:
        logger.debug("Skipping auxiliary lookup for PID %s: lookup budget spent", pid)
        return None
    return lookup(pid, timeout=timeout)


__all__ = ["PortResolver"]
