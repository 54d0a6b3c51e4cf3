"""Tests for the result finalizer."""

from __future__ import annotations

import pytest

from agent_mcp.agent.finalizer import finalize
from agent_mcp.agent.profiles import CLAUDE, GEMINI
from agent_mcp.agent.stream import StreamEventProcessor
from agent_mcp.errors import ProcessExitFailure
from tests.fakes import RecordingSink, jsonl


async def _processor(profile, stdout: bytes = b"", stderr: bytes = b"") -> StreamEventProcessor:
    processor = StreamEventProcessor(profile, RecordingSink())
    await processor.feed(stdout)
    await processor.feed_stderr(stderr)
    await processor.close()
    return processor


class TestSuccess:
    async def test_aggregated_text_wins(self) -> None:
        processor = await _processor(
            GEMINI,
            jsonl(
                {"type": "text", "text": "a"},
                {"type": "historyId", "result": "h-1"},
                {"type": "text", "text": "b"},
            ),
        )
        result = finalize(GEMINI, 0, processor)
        assert result.result == "ab"
        assert result.continuation_id == "h-1"

    async def test_raw_output_when_no_text(self) -> None:
        stdout = jsonl({"type": "progress"}) + b"loose text"
        processor = await _processor(GEMINI, stdout)
        result = finalize(GEMINI, 0, processor)
        assert result.result == stdout.decode()

    async def test_empty_output(self) -> None:
        processor = await _processor(CLAUDE)
        result = finalize(CLAUDE, 0, processor)
        assert result.result == ""
        assert result.continuation_id is None

    async def test_stderr_ignored_on_success(self) -> None:
        processor = await _processor(GEMINI, b"out", b"warning")
        assert finalize(GEMINI, 0, processor).result == "out"


class TestFailure:
    async def test_nonzero_exit_carries_stderr(self) -> None:
        processor = await _processor(
            CLAUDE,
            jsonl({"type": "result", "result": "x", "session_id": "s-1"}),
            b"line one\nline two\n",
        )
        with pytest.raises(ProcessExitFailure) as exc_info:
            finalize(CLAUDE, 2, processor)

        exc = exc_info.value
        assert exc.agent == "Claude Code"
        assert exc.returncode == 2
        assert exc.stderr == "line one\nline two\n"
        assert str(exc).startswith("Claude Code exited with code 2. Error: line one")

    async def test_signal_exit_is_failure(self) -> None:
        processor = await _processor(GEMINI, b"partial")
        with pytest.raises(ProcessExitFailure, match="code -9"):
            finalize(GEMINI, -9, processor)
