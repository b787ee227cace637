"""Tests for process value types."""

from __future__ import annotations

import pytest

from kill_dev.errors import TerminationPermissionError
from kill_dev.process_models import UNKNOWN, ProcessHandle, TerminationOutcome


class TestProcessHandle:
    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_rejects_out_of_range_port(self, port) -> None:
        with pytest.raises(ValueError):
            ProcessHandle(port=port, pid=1, name="x")

    def test_rejects_non_positive_pid(self) -> None:
        with pytest.raises(ValueError):
            ProcessHandle(port=3000, pid=0, name="x")

    @pytest.mark.parametrize(
        "command_line,expected",
        [
            ("/usr/local/bin/node server.js", "node"),
            ("C:\\nodejs\\node.exe --inspect", "node.exe"),
            ("python", "python"),
            (UNKNOWN, UNKNOWN),
        ],
    )
    def test_short_command(self, command_line, expected) -> None:
        handle = ProcessHandle(port=3000, pid=1, name="x", command_line=command_line)

        assert handle.short_command == expected

    def test_label(self) -> None:
        assert ProcessHandle(port=3000, pid=12, name="x").label == "Port 3000 (PID 12)"

    def test_same_pid_on_two_ports_are_distinct(self) -> None:
        first = ProcessHandle(port=3000, pid=12, name="x")
        second = ProcessHandle(port=3001, pid=12, name="x")

        assert first != second
        assert len({first, second}) == 2


class TestTerminationOutcome:
    def _handle(self) -> ProcessHandle:
        return ProcessHandle(port=3000, pid=12, name="x")

    def test_success_requires_dead_pid_and_free_port(self) -> None:
        assert TerminationOutcome(self._handle(), terminated=True, port_still_bound=False).succeeded
        assert not TerminationOutcome(self._handle(), terminated=True, port_still_bound=True).succeeded
        assert not TerminationOutcome(self._handle(), terminated=False, port_still_bound=False).succeeded

    def test_permission_denied_flag(self) -> None:
        outcome = TerminationOutcome(
            self._handle(), terminated=False, port_still_bound=True, error=TerminationPermissionError(12, "SIGKILL")
        )

        assert outcome.permission_denied
        assert not TerminationOutcome(self._handle(), terminated=False, port_still_bound=True, error=OSError()).permission_denied
