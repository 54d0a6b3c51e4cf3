"""Agent adapters: profiles, launcher, stream processor, finalizer."""

from agent_mcp.agent.finalizer import finalize
from agent_mcp.agent.launcher import build_command, launch
from agent_mcp.agent.models import (
    AgentResult,
    MalformedLinePolicy,
    StreamEvent,
    TaskRequest,
    decode_event,
)
from agent_mcp.agent.profiles import CLAUDE, GEMINI, PROFILES, AgentProfile, get_profile
from agent_mcp.agent.runner import run_agent
from agent_mcp.agent.stream import StreamEventProcessor
from agent_mcp.agent.supervisor import ProcessSupervisor

__all__ = [
    "CLAUDE",
    "GEMINI",
    "PROFILES",
    "AgentProfile",
    "AgentResult",
    "MalformedLinePolicy",
    "ProcessSupervisor",
    "StreamEvent",
    "StreamEventProcessor",
    "TaskRequest",
    "build_command",
    "decode_event",
    "finalize",
    "get_profile",
    "launch",
    "run_agent",
]
