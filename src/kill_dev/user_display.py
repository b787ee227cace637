"""
User-Friendly Display Module

Operator-facing progress messages, separate from technical logging.
"""

from typing import Optional, Sequence

from rich.console import Console

from .process_models import TerminationOutcome
from .user_display_helpers.help_screen import build_help_text
from .user_display_helpers.message_formatter import (
    format_critical_error,
    format_error_detail,
    format_failure,
    format_invalid_token,
    format_no_processes,
    format_no_valid_ports,
    format_none_selected,
    format_permission_hint,
    format_port_busy_hint,
    format_prompt_unavailable,
    format_scan_start,
    format_success,
    format_summary,
    format_terminating,
    format_termination_start,
)


class UserDisplay:
    """Writes rich-formatted progress to stdout and errors to stderr."""

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        self._console = console or Console(highlight=False)
        self._error_console = error_console or Console(stderr=True, highlight=False)
        self.success_count = 0
        self.failure_count = 0

    def show_help(self, default_port_tokens: Sequence[str]) -> None:
        self._console.print(build_help_text(default_port_tokens))

    def show_invalid_tokens(self, tokens: Sequence[str]) -> None:
        for token in tokens:
            self._error_console.print(format_invalid_token(token))

    def show_no_valid_ports(self) -> None:
        self._console.print(format_no_valid_ports())

    def show_scan_start(self, ports: Sequence[int]) -> None:
        self._console.print(format_scan_start(ports))

    def show_no_processes(self) -> None:
        self._console.print(format_no_processes())

    def show_none_selected(self) -> None:
        self._console.print(format_none_selected())

    def show_termination_start(self) -> None:
        self._console.print(format_termination_start())

    def show_terminating(self, handle) -> None:
        self._console.print(format_terminating(handle))

    def show_outcome(self, outcome: TerminationOutcome) -> None:
        """Print one outcome with operator hints and count it toward the summary."""
        handle = outcome.handle
        if outcome.succeeded:
            self.success_count += 1
            self._console.print(format_success(handle))
            return

        self.failure_count += 1
        self._console.print(format_failure(handle))
        if outcome.error is not None:
            self._error_console.print(format_error_detail(outcome.error))
        if outcome.permission_denied:
            self._error_console.print(format_permission_hint())
        if outcome.port_still_bound:
            self._console.print(format_port_busy_hint(handle))

    def show_summary(self) -> None:
        self._console.print(format_summary(self.success_count, self.failure_count))

    def show_prompt_unavailable(self) -> None:
        self._error_console.print(format_prompt_unavailable())

    def show_critical_error(self, error: BaseException) -> None:
        self._error_console.print(format_critical_error(error))
