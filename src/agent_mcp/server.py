"""MCP server — registers one ``task`` tool backed by an agent CLI.

One server instance exists per process.  ``build_server`` constructs it at
startup for a single agent profile; the lifespan context tears down any
agent processes still running when the server stops.
"""

# No ``from __future__ import annotations`` here: FastMCP inspects the tool
# handler annotations at registration time to find the ``Context`` parameter.

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from agent_mcp.agent.models import AgentResult, TaskRequest
from agent_mcp.agent.profiles import AgentProfile
from agent_mcp.agent.runner import run_agent
from agent_mcp.agent.supervisor import ProcessSupervisor
from agent_mcp.config.models import AgentSettings, ServerConfig
from agent_mcp.constants import TOOL_NAME, LogSink
from agent_mcp.errors import AgentError

logger = logging.getLogger(__name__)

TaskArg = Annotated[
    str,
    Field(description="The task to delegate, keep it close to original user query"),
]
WorkingDirectoryArg = Annotated[
    str,
    Field(description="The working directory to run the agent in, must be an absolute path"),
]


class AgentTool:
    """The ``task`` tool for one agent profile.

    Holds everything a call needs besides its own request: the profile,
    the configured launch settings and the shared process supervisor.
    """

    def __init__(
        self,
        profile: AgentProfile,
        settings: AgentSettings | None = None,
        supervisor: ProcessSupervisor | None = None,
    ) -> None:
        self.profile = profile
        self.settings = settings or AgentSettings()
        self.supervisor = supervisor if supervisor is not None else ProcessSupervisor()

    @property
    def description(self) -> str:
        return f"Run {self.profile.display_name} agent to complete a task"

    async def __call__(
        self,
        sink: LogSink,
        task: str,
        working_directory: str,
        continuation_id: str | None = None,
    ) -> CallToolResult:
        """Validate, run and shape one call.

        Every failure comes back as an error result whose only text is
        ``"Failed to run <agent>: <cause>"``.
        """
        request = TaskRequest(
            task=task,
            working_directory=working_directory,
            continuation_id=continuation_id or None,
        )
        try:
            request.check_working_directory()
            result = await run_agent(
                self.profile,
                request,
                sink,
                settings=self.settings,
                supervisor=self.supervisor,
            )
        except AgentError as exc:
            logger.error("%s: %s", self.profile.name, exc)
            return self.to_error(exc)

        return self.to_response(result)

    def to_error(self, exc: AgentError) -> CallToolResult:
        """Wrap a failure so the caller sees the message unprefixed."""
        return CallToolResult(
            content=[
                TextContent(
                    type="text",
                    text=f"Failed to run {self.profile.display_name}: {exc}",
                )
            ],
            isError=True,
        )

    def to_response(self, result: AgentResult) -> CallToolResult:
        """Wrap a result in the protocol's text content envelope."""
        payload = result.to_payload(self.profile.continuation_field)
        meta: dict[str, Any] | None = None
        if self.settings.render_hint:
            meta = {
                "chatwise": {
                    # the caller can display the text directly instead of re-submitting
                    "stop": True,
                    "markdown": result.result,
                },
            }
        return CallToolResult(
            content=[TextContent(type="text", text=json.dumps(payload))],
            _meta=meta,
        )


def register_tool(server: FastMCP, tool: AgentTool) -> None:
    """Declare *tool* on *server* with a schema named for its profile."""
    profile = tool.profile
    continuation_arg = Annotated[
        str | None,
        Field(description=profile.continuation_description),
    ]

    if profile.continuation_field == "history_id":

        async def handler(
            task: TaskArg,
            working_directory: WorkingDirectoryArg,
            ctx: Context,
            history_id: continuation_arg = None,
        ) -> CallToolResult:
            return await tool(ctx, task, working_directory, history_id)

    elif profile.continuation_field == "session_id":

        async def handler(
            task: TaskArg,
            working_directory: WorkingDirectoryArg,
            ctx: Context,
            session_id: continuation_arg = None,
        ) -> CallToolResult:
            return await tool(ctx, task, working_directory, session_id)

    else:
        msg = f"Unsupported continuation field: {profile.continuation_field}"
        raise ValueError(msg)

    server.add_tool(
        handler,
        name=TOOL_NAME,
        title="New task",
        description=tool.description,
        structured_output=False,
    )


def build_server(profile: AgentProfile, config: ServerConfig | None = None) -> FastMCP:
    """Construct the MCP server for *profile*."""
    config = config or ServerConfig()
    tool = AgentTool(profile, config.settings_for(profile.name))

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await tool.supervisor.shutdown()

    server = FastMCP(
        profile.server_name,
        instructions=(
            f"Delegates tasks to {profile.display_name}. The agent's live "
            "transcript is sent as log messages while the task runs."
        ),
        lifespan=lifespan,
        log_level=config.log_level,
    )
    register_tool(server, tool)
    return server
