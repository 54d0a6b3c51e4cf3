"""Error taxonomy for agent tool calls.

Every failure of a call is one of these types.  The tool boundary converts
them into a single error result; nothing here crosses the MCP
protocol as a structured code.
"""

from __future__ import annotations


class AgentError(Exception):
    """Base class for failures of a single agent tool call."""


class InvalidWorkingDirectory(AgentError):
    """The requested working directory is not an absolute, existing directory."""

    def __init__(self, path: str, reason: str = "does not exist") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Directory {path} {reason}")


class SpawnFailure(AgentError):
    """The OS could not start the agent process."""

    def __init__(self, agent: str, error: OSError, hint: str | None = None) -> None:
        self.agent = agent
        self.error = error
        msg = f"Failed to spawn {agent}: {error}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)


class ProcessExitFailure(AgentError):
    """The agent process exited with a non-zero status."""

    def __init__(self, agent: str, returncode: int, stderr: str) -> None:
        self.agent = agent
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{agent} exited with code {returncode}. Error: {stderr}")


class MalformedEventLine(AgentError):
    """A stdout line could not be decoded as a stream event.

    Dropped silently under the default ``MalformedLinePolicy.IGNORE``.
    """

    def __init__(self, line: str, detail: str = "") -> None:
        self.line = line
        self.detail = detail
        preview = line if len(line) <= 200 else line[:200] + "..."
        msg = f"Malformed event line: {preview!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
