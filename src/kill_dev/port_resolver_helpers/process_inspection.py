"""Auxiliary per-pid inspection through platform tools."""

from __future__ import annotations

import csv
import io
import logging
from typing import Optional

from ..errors import CommandUnavailableError
from .command_runner import run_command

logger = logging.getLogger(__name__)


def parse_lsof_cwd(output: str) -> Optional[str]:
    """Extract the path from ``lsof -Fn`` field output (``n<path>`` lines)."""
    for line in output.splitlines():
        if line.startswith("n") and len(line) > 1:
            return line[1:].strip()
    return None


def lsof_working_directory(pid: int, *, timeout: float) -> Optional[str]:
    try:
        result = run_command(["lsof", "-a", "-p", str(pid), "-d", "cwd", "-Fn"], timeout=timeout)
    except CommandUnavailableError as exc:
        logger.debug("cwd lookup for %s skipped: %s", pid, exc)
        return None
    if result.returncode != 0:
        return None
    return parse_lsof_cwd(result.stdout)


def ps_command_line(pid: int, *, timeout: float) -> Optional[str]:
    try:
        result = run_command(["ps", "-o", "command=", "-p", str(pid)], timeout=timeout)
    except CommandUnavailableError as exc:
        logger.debug("command line lookup for %s skipped: %s", pid, exc)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def parse_tasklist_csv(output: str) -> Optional[str]:
    """Return the image name from ``tasklist /FO CSV /NH`` output."""
    for row in csv.reader(io.StringIO(output)):
        if len(row) >= 2 and row[1].strip().isdigit():
            return row[0].strip() or None
    return None


def tasklist_image_name(pid: int, *, timeout: float) -> Optional[str]:
    try:
        result = run_command(["tasklist", "/FI", f"PID eq {pid}", "/FO", "CSV", "/NH"], timeout=timeout)
    except CommandUnavailableError as exc:
        logger.debug("tasklist lookup for %s skipped: %s", pid, exc)
        return None
    if result.returncode != 0:
        return None
    return parse_tasklist_csv(result.stdout)
