"""Run OS inspection tools with argument arrays."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Sequence

from ..errors import CommandUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


def run_command(argv: Sequence[str], *, timeout: float) -> CommandResult:
    """
    Execute ``argv`` without a shell and capture its output.

    Args:
        argv: Program and arguments; never interpolated into a shell string
        timeout: Seconds before the command is abandoned

    Returns:
        CommandResult with the exit status and decoded output

    Raises:
        CommandUnavailableError: If the program is missing, not executable or times out
    """
    try:
        completed = subprocess.run(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CommandUnavailableError(argv, "not installed") from exc
    except PermissionError as exc:
        raise CommandUnavailableError(argv, "not executable") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandUnavailableError(argv, f"timed out after {timeout}s") from exc

    logger.debug("%s exited with %s", argv[0], completed.returncode)
    return CommandResult(returncode=completed.returncode, stdout=completed.stdout or "", stderr=completed.stderr or "")
