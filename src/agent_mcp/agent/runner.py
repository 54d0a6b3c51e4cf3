"""Run one agent task end to end: launch, stream, finalize."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from agent_mcp.agent.finalizer import finalize
from agent_mcp.agent.helpers import format_stderr_preview
from agent_mcp.agent.launcher import launch
from agent_mcp.agent.models import AgentResult, MalformedLinePolicy, TaskRequest
from agent_mcp.agent.profiles import AgentProfile
from agent_mcp.agent.stream import StreamEventProcessor
from agent_mcp.agent.supervisor import ProcessSupervisor, terminate
from agent_mcp.config.models import AgentSettings
from agent_mcp.constants import READ_CHUNK_SIZE, LogSink

logger = logging.getLogger(__name__)


async def run_agent(
    profile: AgentProfile,
    request: TaskRequest,
    sink: LogSink,
    settings: AgentSettings | None = None,
    supervisor: ProcessSupervisor | None = None,
    on_malformed: MalformedLinePolicy = MalformedLinePolicy.IGNORE,
) -> AgentResult:
    """Run *request* with the agent described by *profile*.

    Streams the transcript into *sink* while the process runs and returns
    the aggregated result once it exits.  There is no timeout: the call
    lasts as long as the agent does.  If the awaiting task is cancelled, or
    anything else interrupts the stream, the child is terminated before the
    exception propagates.

    Raises:
        SpawnFailure: The process could not be started.
        ProcessExitFailure: The process exited with a non-zero code.
    """
    proc = await launch(profile, request, settings)
    processor = StreamEventProcessor(profile, sink, on_malformed)
    if supervisor is None:
        supervisor = ProcessSupervisor()

    with supervisor.track(proc):
        try:
            await _drain(proc, processor)
            await processor.close()
            returncode = await proc.wait()
        except BaseException:
            logger.warning("%s: run interrupted, terminating pid %s", profile.name, proc.pid)
            await asyncio.shield(terminate(proc))
            raise

    if returncode == 0:
        logger.info(
            "%s: pid %s finished (%d events, %d lines dropped)",
            profile.name,
            proc.pid,
            processor.events_seen,
            processor.lines_dropped,
        )
    else:
        preview = format_stderr_preview(processor.stderr_text)
        logger.warning(
            "%s: pid %s exited with code %s.%s",
            profile.name,
            proc.pid,
            returncode,
            f" Stderr:\n  {preview}" if preview else "",
        )
    return finalize(profile, returncode, processor)


async def _drain(
    proc: asyncio.subprocess.Process, processor: StreamEventProcessor
) -> None:
    """Pump stdout and stderr concurrently until both reach EOF.

    If either pump fails, the other is cancelled and awaited before the
    failure propagates.
    """
    pumps = [
        asyncio.create_task(_pump(proc.stdout, processor.feed)),
        asyncio.create_task(_pump(proc.stderr, processor.feed_stderr)),
    ]
    try:
        await asyncio.gather(*pumps)
    finally:
        for task in pumps:
            task.cancel()
        await asyncio.gather(*pumps, return_exceptions=True)


async def _pump(
    stream: asyncio.StreamReader | None,
    handler: Callable[[bytes], Awaitable[None]],
) -> None:
    """Read *stream* chunk by chunk until EOF, handing each chunk on."""
    if stream is None:
        return
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        await handler(chunk)
