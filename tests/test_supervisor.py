"""Tests for process termination and the supervisor."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

from agent_mcp.agent.supervisor import ProcessSupervisor, terminate
from tests.fakes import make_hanging_process, make_mock_process


class TestTerminate:
    async def test_exited_process_left_alone(self) -> None:
        proc = make_mock_process()
        proc.returncode = 0
        await terminate(proc)
        proc.terminate.assert_not_called()

    async def test_sigterm_is_enough(self) -> None:
        proc = make_hanging_process()
        await terminate(proc)
        proc.terminate.assert_called_once()
        proc.kill.assert_not_called()

    async def test_escalates_to_sigkill(self) -> None:
        proc = MagicMock()
        proc.returncode = None
        proc.terminate = MagicMock()
        proc.kill = MagicMock()
        waits = 0

        async def _wait() -> int:
            nonlocal waits
            waits += 1
            if waits == 1:
                await asyncio.sleep(10)
            return -9

        proc.wait = AsyncMock(side_effect=_wait)
        await terminate(proc, grace=0.01)

        proc.terminate.assert_called_once()
        proc.kill.assert_called_once()

    async def test_vanished_process_ignored(self) -> None:
        proc = make_mock_process()
        proc.terminate.side_effect = ProcessLookupError
        await terminate(proc)


class TestProcessSupervisor:
    async def test_track_adds_and_removes(self) -> None:
        supervisor = ProcessSupervisor()
        proc = make_mock_process()
        with supervisor.track(proc):
            assert len(supervisor) == 1
        assert len(supervisor) == 0

    async def test_shutdown_terminates_live_processes(self) -> None:
        supervisor = ProcessSupervisor()
        live = make_hanging_process(pid=1)
        done = make_mock_process(pid=2)
        done.returncode = 0

        with supervisor.track(live), supervisor.track(done):
            await supervisor.shutdown()
            assert len(supervisor) == 0

        live.terminate.assert_called_once()
        done.terminate.assert_not_called()

    async def test_shutdown_with_nothing_running(self) -> None:
        await ProcessSupervisor().shutdown()
