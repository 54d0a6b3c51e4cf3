"""Result finalizer — turn an exit status and stream state into one outcome."""

from __future__ import annotations

from agent_mcp.agent.models import AgentResult
from agent_mcp.agent.profiles import AgentProfile
from agent_mcp.agent.stream import StreamEventProcessor
from agent_mcp.errors import ProcessExitFailure


def finalize(
    profile: AgentProfile,
    returncode: int,
    processor: StreamEventProcessor,
) -> AgentResult:
    """Resolve a finished run.

    Exit code 0 yields the aggregated text (or the raw stdout when no text
    event was recognised) and the last continuation id.  Any other code
    raises ``ProcessExitFailure`` carrying the full stderr text; no partial
    result is returned.
    """
    if returncode != 0:
        raise ProcessExitFailure(profile.display_name, returncode, processor.stderr_text)

    return AgentResult(
        result=processor.text or processor.raw_output,
        continuation_id=processor.continuation_id,
    )
