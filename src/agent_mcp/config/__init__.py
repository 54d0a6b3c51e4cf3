"""Configuration models and parser for agent-mcp.yaml."""

from agent_mcp.config.models import KNOWN_AGENTS, AgentSettings, ServerConfig
from agent_mcp.config.parser import ConfigError, load_config

__all__ = [
    "KNOWN_AGENTS",
    "AgentSettings",
    "ConfigError",
    "ServerConfig",
    "load_config",
]
