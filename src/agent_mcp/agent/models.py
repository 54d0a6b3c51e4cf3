"""Pydantic v2 models for tool requests, stream events, and results."""

from __future__ import annotations

import enum
import json
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from agent_mcp.errors import InvalidWorkingDirectory, MalformedEventLine


class MalformedLinePolicy(enum.Enum):
    """What the stream processor does with a line that fails to decode."""

    #: Drop the line and keep going.  Fragments and stray log output are
    #: expected on an agent's stdout.
    IGNORE = "ignore"
    #: Propagate ``MalformedEventLine`` out of the processor.
    RAISE = "raise"


class TaskRequest(BaseModel):
    """A validated request to run one agent task."""

    model_config = ConfigDict(frozen=True)

    task: str = Field(description="Task text passed to the agent")
    working_directory: str = Field(description="Absolute directory to run in")
    continuation_id: str | None = Field(
        default=None,
        description="History/session id to resume a prior run",
    )

    def check_working_directory(self) -> None:
        """Raise ``InvalidWorkingDirectory`` unless the directory is usable."""
        check_working_directory(self.working_directory)


class StreamEvent(BaseModel):
    """One newline-delimited JSON event from an agent's stdout.

    Only the ``type`` discriminant is declared.  Payload fields differ per
    agent and per kind, so they stay in ``model_extra`` and are read with
    ``get`` / ``get_str``.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="", description="Event kind discriminant")

    def get(self, key: str, default: Any = None) -> Any:
        """Return a payload field of the event."""
        return (self.model_extra or {}).get(key, default)

    def get_str(self, key: str) -> str | None:
        """Return a payload field if it is a string, else None."""
        value = self.get(key)
        return value if isinstance(value, str) else None


class AgentResult(BaseModel):
    """Successful outcome of a call."""

    result: str = Field(description="Aggregated text, or raw stdout as fallback")
    continuation_id: str | None = Field(
        default=None,
        description="Identifier to pass back to resume this conversation",
    )

    def to_payload(self, continuation_field: str) -> dict[str, str]:
        """Build the JSON body returned to the caller.

        The continuation key is named per agent and omitted when absent.
        """
        payload = {"result": self.result}
        if self.continuation_id is not None:
            payload[continuation_field] = self.continuation_id
        return payload


def check_working_directory(path: str) -> None:
    """Ensure *path* is an absolute path naming an existing directory."""
    if not os.path.isabs(path):
        raise InvalidWorkingDirectory(path, "is not an absolute path")
    if not os.path.exists(path):
        raise InvalidWorkingDirectory(path)
    if not os.path.isdir(path):
        raise InvalidWorkingDirectory(path, "is not a directory")


def decode_event(line: str) -> StreamEvent:
    """Decode one stdout line into a ``StreamEvent``.

    Raises:
        MalformedEventLine: If the line is not a JSON object or its
            declared fields have the wrong types.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedEventLine(line, str(exc)) from exc

    if not isinstance(data, dict):
        raise MalformedEventLine(line, f"expected an object, got {type(data).__name__}")

    try:
        return StreamEvent.model_validate(data)
    except ValidationError as exc:
        raise MalformedEventLine(line, f"{exc.error_count()} invalid field(s)") from exc
