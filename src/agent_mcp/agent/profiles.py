"""Agent profiles — how each backing CLI is invoked and how its events read.

A profile is the only place the Gemini and Claude adapters differ.  The
launcher, stream processor, finalizer and tool registrar are shared.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import NamedTuple

from agent_mcp.agent.models import StreamEvent


class EventUpdate(NamedTuple):
    """Aggregation effect of one stream event."""

    text: str | None = None
    continuation_id: str | None = None


NO_UPDATE = EventUpdate()


@dataclass(frozen=True)
class AgentProfile(abc.ABC):
    """Static description of one backing agent CLI."""

    #: Config / CLI key, e.g. ``"gemini"``.
    name: str
    #: Human-readable name used in error messages.
    display_name: str
    #: MCP server name advertised to clients.
    server_name: str
    #: Default executable.
    program: str
    #: Flag that carries the task text.
    prompt_flag: str
    #: Flags selecting newline-delimited JSON streaming output.
    stream_flags: tuple[str, ...]
    #: Flag that carries the continuation identifier.
    continuation_flag: str
    #: Tool parameter / result key for the continuation identifier.
    continuation_field: str
    #: Description of the continuation parameter.
    continuation_description: str
    #: Shown when the executable cannot be found.
    install_hint: str = ""

    def build_args(
        self,
        task: str,
        continuation_id: str | None = None,
        extra_args: list[str] | None = None,
    ) -> list[str]:
        """Return the argument vector (without the program) for one run."""
        args = [self.prompt_flag, task, *self.stream_flags]
        if continuation_id:
            args.extend([self.continuation_flag, continuation_id])
        if extra_args:
            args.extend(extra_args)
        return args

    @abc.abstractmethod
    def interpret(self, event: StreamEvent) -> EventUpdate:
        """Map a decoded event to its aggregation effect."""


@dataclass(frozen=True)
class GeminiProfile(AgentProfile):
    """Gemini CLI ``--output-format stream-json``.

    * ``{"type": "text", "text": ...}`` — incremental response text.
    * ``{"type": "historyId", "result": ...}`` — conversation history id.
    """

    def interpret(self, event: StreamEvent) -> EventUpdate:
        if event.type == "text":
            text = event.get_str("text")
            if text:
                return EventUpdate(text=text)
        elif event.type == "historyId":
            history_id = event.get_str("result")
            if history_id:
                return EventUpdate(continuation_id=history_id)
        return NO_UPDATE


@dataclass(frozen=True)
class ClaudeProfile(AgentProfile):
    """Claude Code ``--output-format stream-json --verbose``.

    * ``system``    — init event carrying ``session_id``.
    * ``assistant`` — wraps an API message; text blocks live in
      ``message.content[]``.
    * ``result``    — final event, also carrying ``session_id``.

    ``user`` (tool result echoes) and unknown kinds have no effect.
    """

    def interpret(self, event: StreamEvent) -> EventUpdate:
        if event.type in ("system", "result"):
            session_id = event.get_str("session_id")
            if session_id:
                return EventUpdate(continuation_id=session_id)
        elif event.type == "assistant":
            text = "".join(_assistant_text_blocks(event))
            if text:
                return EventUpdate(text=text)
        return NO_UPDATE


def _assistant_text_blocks(event: StreamEvent) -> list[str]:
    message = event.get("message")
    if not isinstance(message, dict):
        return []
    blocks = message.get("content")
    if not isinstance(blocks, list):
        return []
    texts: list[str] = []
    for block in blocks:
        if not isinstance(block, dict) or block.get("type") != "text":
            continue
        text = block.get("text")
        if isinstance(text, str) and text:
            texts.append(text)
    return texts


GEMINI = GeminiProfile(
    name="gemini",
    display_name="Gemini CLI",
    server_name="gemini-cli-mcp",
    program="gemini",
    prompt_flag="-p",
    stream_flags=("--output-format", "stream-json"),
    continuation_flag="--history-id",
    continuation_field="history_id",
    continuation_description="Continue in a previous conversation history",
    install_hint="Install: npm install -g @google/gemini-cli",
)

CLAUDE = ClaudeProfile(
    name="claude",
    display_name="Claude Code",
    server_name="claude-code-mcp",
    program="claude",
    prompt_flag="-p",
    stream_flags=("--output-format", "stream-json", "--verbose"),
    continuation_flag="--resume",
    continuation_field="session_id",
    continuation_description="Resume a previous Claude Code session",
    install_hint="Install: npm install -g @anthropic-ai/claude-code",
)

PROFILES: dict[str, AgentProfile] = {p.name: p for p in (GEMINI, CLAUDE)}


def get_profile(name: str) -> AgentProfile:
    """Look up a profile by name.

    Raises:
        KeyError: If no profile has that name.
    """
    try:
        return PROFILES[name]
    except KeyError:
        available = ", ".join(sorted(PROFILES))
        msg = f"Unknown agent '{name}' — available agents: {available}"
        raise KeyError(msg) from None
