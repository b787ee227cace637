"""Tests for the port resolver."""

from __future__ import annotations

import logging
import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from kill_dev.errors import CommandUnavailableError, PortLookupError
from kill_dev.port_resolver import PortResolver
from kill_dev.port_resolver_helpers.lookup_models import ProcessDetails, SocketOwner
from kill_dev.process_models import UNKNOWN, ProcessHandle

MODULE = "kill_dev.port_resolver"

FULL_DETAILS = ProcessDetails(name="node", command_line="/usr/bin/node server.js", working_directory="/srv/app")


@pytest.fixture
def resolver() -> PortResolver:
    return PortResolver(lookup_timeout=1.0, platform="linux")


class TestResolvePrimary:
    def test_returns_handle_from_psutil(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", return_value=[SocketOwner(pid=42)]), patch(
            f"{MODULE}.describe_process", return_value=FULL_DETAILS
        ):
            handle = resolver.resolve(3000)

        assert handle == ProcessHandle(
            port=3000, pid=42, name="node", command_line="/usr/bin/node server.js", working_directory="/srv/app"
        )

    def test_prefers_listener_then_lowest_pid(self, resolver) -> None:
        owners = [
            SocketOwner(pid=5, listening=False),
            SocketOwner(pid=90, listening=True),
            SocketOwner(pid=30, listening=True),
        ]
        with patch(f"{MODULE}.socket_owners", return_value=owners), patch(f"{MODULE}.describe_process", return_value=FULL_DETAILS):
            handle = resolver.resolve(3000)

        assert handle.pid == 30

    def test_process_gone_before_describe(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", return_value=[SocketOwner(pid=42)]), patch(f"{MODULE}.describe_process", return_value=None):
            assert resolver.resolve(3000) is None


class TestAuxiliaryLookup:
    def test_fills_missing_fields_from_platform_tools(self, resolver) -> None:
        partial = ProcessDetails(name="node", command_line=None, working_directory=None)
        with patch(f"{MODULE}.socket_owners", return_value=[SocketOwner(pid=42)]), patch(
            f"{MODULE}.describe_process", return_value=partial
        ), patch(f"{MODULE}.ps_command_line", return_value="node index.js") as ps_mock, patch(
            f"{MODULE}.lsof_working_directory", return_value="/home/dev/site"
        ) as lsof_mock:
            handle = resolver.resolve(3000)

        ps_mock.assert_called_once_with(42, timeout=pytest.approx(1.0, abs=0.5))
        lsof_mock.assert_called_once_with(42, timeout=pytest.approx(1.0, abs=0.5))
        assert handle.command_line == "node index.js"
        assert handle.working_directory == "/home/dev/site"

    def test_auxiliary_failure_downgrades_to_unknown(self, resolver) -> None:
        partial = ProcessDetails(name="node", command_line="node", working_directory=None)
        with patch(f"{MODULE}.socket_owners", return_value=[SocketOwner(pid=42)]), patch(
            f"{MODULE}.describe_process", return_value=partial
        ), patch(f"{MODULE}.lsof_working_directory", return_value=None):
            handle = resolver.resolve(3000)

        assert handle is not None
        assert handle.working_directory == UNKNOWN

    def test_skips_auxiliary_when_details_complete(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", return_value=[SocketOwner(pid=42)]), patch(
            f"{MODULE}.describe_process", return_value=FULL_DETAILS
        ), patch(f"{MODULE}.lsof_working_directory") as lsof_mock, patch(f"{MODULE}.ps_command_line") as ps_mock:
            resolver.resolve(3000)

        lsof_mock.assert_not_called()
        ps_mock.assert_not_called()

    def test_windows_uses_tasklist_for_name(self) -> None:
        resolver = PortResolver(lookup_timeout=1.0, platform="win32")
        partial = ProcessDetails(name=None, command_line=None, working_directory=None)
        with patch(f"{MODULE}.socket_owners", return_value=[SocketOwner(pid=7)]), patch(
            f"{MODULE}.describe_process", return_value=partial
        ), patch(f"{MODULE}.tasklist_image_name", return_value="node.exe"), patch(f"{MODULE}.lsof_working_directory") as lsof_mock:
            handle = resolver.resolve(3000)

        lsof_mock.assert_not_called()
        assert handle.name == "node.exe"
        assert handle.command_line == UNKNOWN


class TestFallback:
    def test_uses_lsof_when_primary_denied(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", side_effect=PortLookupError(3000, "access denied")), patch(
            f"{MODULE}.lsof_port_owners", return_value=[SocketOwner(pid=77, name="vite")]
        ), patch(f"{MODULE}.describe_process", return_value=ProcessDetails()), patch(
            f"{MODULE}.ps_command_line", return_value=None
        ), patch(f"{MODULE}.lsof_working_directory", return_value=None):
            handle = resolver.resolve(3000)

        assert handle.pid == 77
        assert handle.name == "vite"

    def test_uses_lsof_when_primary_empty(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", return_value=[]), patch(
            f"{MODULE}.lsof_port_owners", return_value=[SocketOwner(pid=77, name="vite")]
        ) as lsof_mock, patch(f"{MODULE}.describe_process", return_value=FULL_DETAILS):
            handle = resolver.resolve(5173)

        lsof_mock.assert_called_once_with(5173, timeout=pytest.approx(1.0, abs=0.5))
        assert handle.pid == 77

    def test_windows_uses_netstat(self) -> None:
        resolver = PortResolver(lookup_timeout=1.0, platform="win32")
        with patch(f"{MODULE}.socket_owners", return_value=[]), patch(
            f"{MODULE}.netstat_port_owners", return_value=[SocketOwner(pid=9)]
        ) as netstat_mock, patch(f"{MODULE}.lsof_port_owners") as lsof_mock, patch(
            f"{MODULE}.describe_process", return_value=FULL_DETAILS
        ):
            handle = resolver.resolve(3000)

        netstat_mock.assert_called_once()
        lsof_mock.assert_not_called()
        assert handle.pid == 9

    def test_missing_fallback_tool_means_no_process(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", side_effect=PortLookupError(3000, "denied")), patch(
            f"{MODULE}.lsof_port_owners", side_effect=CommandUnavailableError(["lsof"], "not installed")
        ):
            assert resolver.resolve(3000) is None

    def test_unbound_port_is_always_none(self, resolver) -> None:
        with patch(f"{MODULE}.socket_owners", return_value=[]), patch(f"{MODULE}.lsof_port_owners", return_value=[]):
            results = [resolver.resolve(3999) for _ in range(3)]

        assert results == [None, None, None]


class TestIsPortBound:
    def test_primary_true(self, resolver) -> None:
        with patch(f"{MODULE}.port_has_socket", return_value=True), patch(f"{MODULE}.lsof_port_owners") as lsof_mock:
            assert resolver.is_port_bound(3000) is True
        lsof_mock.assert_not_called()

    def test_primary_false_is_trusted(self, resolver) -> None:
        with patch(f"{MODULE}.port_has_socket", return_value=False), patch(f"{MODULE}.lsof_port_owners") as lsof_mock:
            assert resolver.is_port_bound(3000) is False
        lsof_mock.assert_not_called()

    def test_primary_false_without_lsof_logs_no_warning(self, resolver, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger=MODULE), patch(f"{MODULE}.port_has_socket", return_value=False), patch(
            f"{MODULE}.lsof_port_owners", side_effect=CommandUnavailableError(["lsof"], "not installed")
        ):
            assert resolver.is_port_bound(3000) is False

        assert not [record for record in caplog.records if record.levelno >= logging.WARNING]

    def test_fallback_confirms_free_port(self, resolver) -> None:
        with patch(f"{MODULE}.port_has_socket", side_effect=PortLookupError(3000, "denied")), patch(
            f"{MODULE}.lsof_port_owners", return_value=[]
        ):
            assert resolver.is_port_bound(3000) is False

    def test_fallback_sees_owner_primary_missed(self, resolver) -> None:
        with patch(f"{MODULE}.port_has_socket", side_effect=PortLookupError(3000, "denied")), patch(
            f"{MODULE}.lsof_port_owners", return_value=[SocketOwner(pid=3)]
        ):
            assert resolver.is_port_bound(3000) is True

    def test_unverifiable_reports_free(self, resolver) -> None:
        with patch(f"{MODULE}.port_has_socket", side_effect=PortLookupError(3000, "denied")), patch(
            f"{MODULE}.lsof_port_owners", side_effect=CommandUnavailableError(["lsof"], "not installed")
        ):
            assert resolver.is_port_bound(3000) is False

    def test_unverifiable_logs_warning(self, resolver, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger=MODULE), patch(
            f"{MODULE}.port_has_socket", side_effect=PortLookupError(3000, "denied")
        ), patch(f"{MODULE}.lsof_port_owners", side_effect=CommandUnavailableError(["lsof"], "not installed")):
            resolver.is_port_bound(3000)

        assert "Could not verify whether port 3000 is free" in caplog.text


class TestLookupBudget:
    def test_platform_tools_share_one_budget(self, resolver) -> None:
        clock = [100.0]

        def _tick(seconds, result):
            def _call(*args, **kwargs):
                clock[0] += seconds
                return result

            return _call

        partial = ProcessDetails(name="node", command_line=None, working_directory=None)
        with patch(f"{MODULE}.time") as time_mock, patch(
            f"{MODULE}.socket_owners", return_value=[]
        ), patch(f"{MODULE}.lsof_port_owners", side_effect=_tick(0.7, [SocketOwner(pid=42)])), patch(
            f"{MODULE}.describe_process", return_value=partial
        ), patch(f"{MODULE}.ps_command_line", side_effect=_tick(0.4, "node dev.js")) as ps_mock, patch(
            f"{MODULE}.lsof_working_directory"
        ) as cwd_mock:
            time_mock.monotonic.side_effect = lambda: clock[0]
            handle = resolver.resolve(3000)

        assert ps_mock.call_args.kwargs["timeout"] == pytest.approx(0.3)
        cwd_mock.assert_not_called()
        assert handle.command_line == "node dev.js"
        assert handle.working_directory == UNKNOWN


class TestResolveMany:
    @pytest.mark.asyncio
    async def test_filters_empty_ports_and_keeps_order(self, resolver) -> None:
        handles = {3001: ProcessHandle(port=3001, pid=11, name="a"), 3000: ProcessHandle(port=3000, pid=10, name="b")}
        resolver.resolve = MagicMock(side_effect=lambda port: handles.get(port))

        result = await resolver.resolve_many([3001, 3002, 3000])

        assert [handle.port for handle in result] == [3001, 3000]

    @pytest.mark.asyncio
    async def test_duplicate_ports_resolve_once(self, resolver) -> None:
        resolver.resolve = MagicMock(return_value=ProcessHandle(port=3000, pid=10, name="node"))

        result = await resolver.resolve_many([3000, 3000])

        assert len(result) == 1
        resolver.resolve.assert_called_once_with(3000)

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self, resolver) -> None:
        barrier = threading.Barrier(3, timeout=5)

        def _resolve(port):
            barrier.wait()
            return ProcessHandle(port=port, pid=port, name="srv")

        resolver.resolve = _resolve

        result = await resolver.resolve_many([4000, 4001, 4002])

        assert len(result) == 3

    @pytest.mark.asyncio
    async def test_failing_lookup_is_isolated(self, resolver) -> None:
        def _resolve(port):
            if port == 4000:
                raise OSError("boom")
            return ProcessHandle(port=port, pid=1, name="srv")

        resolver.resolve = _resolve

        result = await resolver.resolve_many([4000, 4001])

        assert [handle.port for handle in result] == [4001]

    @pytest.mark.asyncio
    async def test_stuck_lookup_times_out(self) -> None:
        resolver = PortResolver(lookup_timeout=0.05, platform="linux")

        def _resolve(port):
            if port == 4000:
                time.sleep(0.3)
            return ProcessHandle(port=port, pid=1, name="srv")

        resolver.resolve = _resolve

        result = await resolver.resolve_many([4000, 4001])

        assert [handle.port for handle in result] == [4001]
