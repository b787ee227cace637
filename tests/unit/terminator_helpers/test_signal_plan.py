"""Tests for escalation ladders."""

from __future__ import annotations

import signal

from kill_dev.terminator_helpers.signal_plan import (
    FORCE_TERMINATE,
    POSIX_ESCALATION,
    WINDOWS_ESCALATION,
    default_escalation,
)


def test_posix_escalates_term_int_kill() -> None:
    assert [step.name for step in POSIX_ESCALATION] == ["SIGTERM", "SIGINT", "SIGKILL"]
    assert POSIX_ESCALATION[0].signum == signal.SIGTERM


def test_default_escalation_by_platform() -> None:
    assert default_escalation("linux") is POSIX_ESCALATION
    assert default_escalation("darwin") is POSIX_ESCALATION
    assert default_escalation("win32") is WINDOWS_ESCALATION


def test_windows_uses_single_forceful_call() -> None:
    assert WINDOWS_ESCALATION == (FORCE_TERMINATE,)
    assert FORCE_TERMINATE.signum is None
