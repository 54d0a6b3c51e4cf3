"""Tests for request, event and result models."""

from __future__ import annotations

from pathlib import Path

import pytest

from agent_mcp.agent.models import (
    AgentResult,
    StreamEvent,
    TaskRequest,
    check_working_directory,
    decode_event,
)
from agent_mcp.errors import InvalidWorkingDirectory, MalformedEventLine


class TestDecodeEvent:
    def test_declared_and_extra_fields(self) -> None:
        event = decode_event('{"type": "text", "text": "hi", "extra": [1]}')
        assert isinstance(event, StreamEvent)
        assert event.type == "text"
        assert event.get_str("text") == "hi"
        assert event.get("extra") == [1]

    def test_missing_type_is_an_unrecognised_kind(self) -> None:
        event = decode_event('{"foo": "bar"}')
        assert event.type == ""

    def test_get_str_rejects_non_strings(self) -> None:
        event = decode_event('{"type": "historyId", "result": 7}')
        assert event.get_str("result") is None
        assert event.get("result") == 7

    def test_truncated_json(self) -> None:
        with pytest.raises(MalformedEventLine) as exc_info:
            decode_event('{"type": "te')
        assert exc_info.value.line == '{"type": "te'

    def test_scalar_json(self) -> None:
        with pytest.raises(MalformedEventLine, match="expected an object"):
            decode_event("42")

    def test_non_string_type(self) -> None:
        with pytest.raises(MalformedEventLine, match="invalid field"):
            decode_event('{"type": 3}')


class TestWorkingDirectory:
    def test_existing_absolute_directory(self, tmp_path: Path) -> None:
        check_working_directory(str(tmp_path))

    def test_missing_directory(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope"
        with pytest.raises(InvalidWorkingDirectory) as exc_info:
            check_working_directory(str(missing))
        assert exc_info.value.path == str(missing)
        assert str(missing) in str(exc_info.value)
        assert "does not exist" in str(exc_info.value)

    def test_relative_path(self) -> None:
        with pytest.raises(InvalidWorkingDirectory, match="not an absolute path"):
            check_working_directory("relative/dir")

    def test_file_is_not_a_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(InvalidWorkingDirectory, match="not a directory"):
            check_working_directory(str(target))

    def test_request_delegates(self, tmp_path: Path) -> None:
        request = TaskRequest(task="t", working_directory=str(tmp_path / "gone"))
        with pytest.raises(InvalidWorkingDirectory):
            request.check_working_directory()


class TestAgentResult:
    def test_payload_with_continuation(self) -> None:
        result = AgentResult(result="done", continuation_id="abc")
        assert result.to_payload("history_id") == {"result": "done", "history_id": "abc"}

    def test_payload_omits_missing_continuation(self) -> None:
        result = AgentResult(result="done")
        assert result.to_payload("session_id") == {"result": "done"}
