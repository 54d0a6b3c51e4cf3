"""Shared constants and type aliases for the agent-mcp runtime."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

#: MCP tool name registered by every agent server.
TOOL_NAME = "task"

#: Bytes requested per read from a child's stdout/stderr pipe.
READ_CHUNK_SIZE = 65_536


@runtime_checkable
class LogSink(Protocol):
    """Where streamed agent output is forwarded during a call.

    ``mcp.server.fastmcp.Context`` satisfies this protocol, so the live
    transcript lands in the calling session's log notifications.
    """

    async def info(self, message: str) -> None: ...

    async def error(self, message: str) -> None: ...
