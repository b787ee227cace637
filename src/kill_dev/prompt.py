"""Interactive multi-select of processes to terminate."""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional, Sequence, TextIO

import questionary

from .errors import PromptUnavailableError
from .process_models import ProcessHandle

logger = logging.getLogger(__name__)

PROMPT_MESSAGE = "Select processes to kill (Space to select/deselect, Enter to confirm):"


def choice_title(handle: ProcessHandle) -> list[tuple[str, str]]:
    """Styled title: name, pid, port, short and full command, then the working directory on its own line."""
    return [
        ("bold", handle.name),
        ("", " (PID: "),
        ("fg:ansiyellow", str(handle.pid)),
        ("", ") on port "),
        ("fg:ansimagenta", str(handle.port)),
        ("fg:ansicyan", f" [{handle.short_command}]"),
        ("fg:ansibrightblack", f" {handle.command_line}"),
        ("", "\n      "),
        ("fg:ansibrightblack", f"📂 {handle.working_directory}"),
    ]


def build_choices(handles: Sequence[ProcessHandle]) -> list[questionary.Choice]:
    return [questionary.Choice(title=choice_title(handle), value=handle) for handle in handles]


def select_processes(
    handles: Sequence[ProcessHandle],
    *,
    checkbox: Callable[..., questionary.Question] = questionary.checkbox,
    stdin: Optional[TextIO] = None,
) -> List[ProcessHandle]:
    """
    Ask the operator which processes to terminate.

    Returns:
        The chosen handles; empty when nothing was picked or the prompt was cancelled

    Raises:
        PromptUnavailableError: If no interactive terminal is attached
    """
    if not handles:
        return []

    stream = stdin if stdin is not None else sys.stdin
    if stream is None or not stream.isatty():
        raise PromptUnavailableError("stdin is not an interactive terminal")

    try:
        selected = checkbox(PROMPT_MESSAGE, choices=build_choices(handles)).ask()
    except OSError as exc:
        raise PromptUnavailableError(f"terminal cannot render the prompt: {exc}") from exc

    if selected is None:
        logger.debug("Prompt cancelled by operator")
        return []
    return list(selected)


__all__ = ["PROMPT_MESSAGE", "build_choices", "choice_title", "select_processes"]
