"""Process launcher — start one agent CLI subprocess per call."""

from __future__ import annotations

import asyncio
import logging
import os

from agent_mcp.agent.models import TaskRequest
from agent_mcp.agent.profiles import AgentProfile
from agent_mcp.config.models import AgentSettings
from agent_mcp.errors import SpawnFailure

logger = logging.getLogger(__name__)


def build_command(
    profile: AgentProfile,
    request: TaskRequest,
    settings: AgentSettings | None = None,
) -> list[str]:
    """Return the full argv for *request*, program first."""
    settings = settings or AgentSettings()
    program = settings.command or profile.program
    return [
        program,
        *profile.build_args(request.task, request.continuation_id, settings.args),
    ]


def build_env(settings: AgentSettings | None = None) -> dict[str, str]:
    """Inherit the server's environment, minus ``unset_env``, plus ``env``."""
    settings = settings or AgentSettings()
    removed = set(settings.unset_env)
    env = {k: v for k, v in os.environ.items() if k not in removed}
    env.update(settings.env)
    return env


async def launch(
    profile: AgentProfile,
    request: TaskRequest,
    settings: AgentSettings | None = None,
) -> asyncio.subprocess.Process:
    """Start the agent for *request* in its working directory.

    stdin, stdout and stderr are piped independently; stdin is closed right
    away since the task travels on the command line.

    Raises:
        SpawnFailure: If the OS cannot start the process.
    """
    cmd_args = build_command(profile, request, settings)

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd_args,
            cwd=request.working_directory,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=build_env(settings),
        )
    except FileNotFoundError as exc:
        logger.error("%s: executable not found: %s", profile.name, cmd_args[0])
        raise SpawnFailure(profile.display_name, exc, profile.install_hint) from exc
    except OSError as exc:
        logger.error("%s: failed to spawn: %s", profile.name, exc)
        raise SpawnFailure(profile.display_name, exc) from exc

    if proc.stdin is not None:
        proc.stdin.close()

    logger.info(
        "%s: started pid %s in %s%s",
        profile.name,
        proc.pid,
        request.working_directory,
        " (resuming)" if request.continuation_id else "",
    )
    return proc
