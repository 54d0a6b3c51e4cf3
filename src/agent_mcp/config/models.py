"""Pydantic v2 models for agent-mcp.yaml configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Agent names a config file may configure.
KNOWN_AGENTS = ("gemini", "claude")


class AgentSettings(BaseModel):
    """Per-agent launch settings."""

    model_config = ConfigDict(extra="forbid")

    command: str | None = Field(
        default=None,
        description="Executable to run instead of the agent's default binary",
    )
    args: list[str] = Field(
        default_factory=list,
        description="Extra arguments appended after the built-in flags",
    )
    env: dict[str, str] = Field(
        default_factory=dict,
        description="Environment variables set for the agent process",
    )
    unset_env: list[str] = Field(
        default_factory=list,
        description="Environment variables removed before spawning",
    )
    render_hint: bool = Field(
        default=True,
        description="Attach a hint telling the caller to display the result directly",
    )

    @field_validator("command")
    @classmethod
    def _command_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            msg = "command must not be blank"
            raise ValueError(msg)
        return value


class ServerConfig(BaseModel):
    """Top-level agent-mcp.yaml configuration."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default="1", description="Config schema version")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the server's own stderr log",
    )
    agents: dict[str, AgentSettings] = Field(
        default_factory=dict,
        description="Launch settings keyed by agent name",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("agents")
    @classmethod
    def _known_agents(
        cls, value: dict[str, AgentSettings]
    ) -> dict[str, AgentSettings]:
        unknown = sorted(set(value) - set(KNOWN_AGENTS))
        if unknown:
            joined = ", ".join(f"'{n}'" for n in unknown)
            available = ", ".join(f"'{n}'" for n in KNOWN_AGENTS)
            msg = f"Unknown agents: {joined} — available agents: {available}"
            raise ValueError(msg)
        return value

    def settings_for(self, agent: str) -> AgentSettings:
        """Return the settings for *agent*, or the defaults if unconfigured."""
        return self.agents.get(agent) or AgentSettings()
