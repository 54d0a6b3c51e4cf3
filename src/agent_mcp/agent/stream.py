"""Stream event processor — incremental JSONL decoding of agent output.

The agent's stdout arrives in chunks with no alignment to line boundaries.
The processor keeps the trailing fragment of each chunk and prepends it to
the next one, so a JSON record split across reads is decoded whole.  The
fragment left at EOF is handled by ``close()``.

Every decoded line is forwarded to the log sink at ``info`` level before its
aggregation effect is applied.  Every stderr chunk is forwarded verbatim at
``error`` level.  Within each channel, forwarding follows arrival order.
"""

from __future__ import annotations

import codecs
import logging

from agent_mcp.agent.models import MalformedLinePolicy, StreamEvent, decode_event
from agent_mcp.agent.profiles import AgentProfile
from agent_mcp.constants import LogSink
from agent_mcp.errors import MalformedEventLine

logger = logging.getLogger(__name__)


class StreamEventProcessor:
    """Per-call aggregation state plus the logic that mutates it.

    One instance belongs to exactly one call and is discarded once the
    finalizer has read it.
    """

    def __init__(
        self,
        profile: AgentProfile,
        sink: LogSink,
        on_malformed: MalformedLinePolicy = MalformedLinePolicy.IGNORE,
    ) -> None:
        self._profile = profile
        self._sink = sink
        self._on_malformed = on_malformed

        self._stdout_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._stderr_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._partial_line = ""
        self._closed = False

        self._raw_chunks: list[str] = []
        self._text_parts: list[str] = []
        self._stderr_chunks: list[str] = []
        self._continuation_id: str | None = None

        self.events_seen = 0
        self.lines_dropped = 0

    # ------------------------------------------------------------------ #
    # Aggregated state
    # ------------------------------------------------------------------ #

    @property
    def text(self) -> str:
        """Concatenated text of all text-carrying events, in arrival order."""
        return "".join(self._text_parts)

    @property
    def raw_output(self) -> str:
        """Everything read from stdout, undecoded."""
        return "".join(self._raw_chunks)

    @property
    def stderr_text(self) -> str:
        """Everything read from stderr."""
        return "".join(self._stderr_chunks)

    @property
    def continuation_id(self) -> str | None:
        """Last continuation identifier seen, if any."""
        return self._continuation_id

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    async def feed(self, data: bytes | str) -> None:
        """Consume one stdout chunk."""
        if self._closed:
            msg = "feed() called after close()"
            raise RuntimeError(msg)

        chunk = data if isinstance(data, str) else self._stdout_decoder.decode(data)
        if not chunk:
            return
        self._raw_chunks.append(chunk)

        *lines, self._partial_line = (self._partial_line + chunk).split("\n")
        for line in lines:
            await self._handle_line(line)

    async def close(self) -> None:
        """Flush the decoder and process the fragment left at EOF."""
        if self._closed:
            return
        self._closed = True

        tail = self._stdout_decoder.decode(b"", final=True)
        if tail:
            self._raw_chunks.append(tail)
        line = self._partial_line + tail
        self._partial_line = ""
        for piece in line.split("\n"):
            await self._handle_line(piece)

        stderr_tail = self._stderr_decoder.decode(b"", final=True)
        if stderr_tail:
            self._stderr_chunks.append(stderr_tail)
            await self._sink.error(stderr_tail)

    async def _handle_line(self, line: str) -> None:
        line = line.rstrip("\r")
        if not line.strip():
            return

        try:
            event = decode_event(line)
        except MalformedEventLine:
            self.lines_dropped += 1
            if self._on_malformed is MalformedLinePolicy.RAISE:
                raise
            logger.debug(
                "%s: dropped undecodable stdout line: %s",
                self._profile.name,
                line[:200],
            )
            return

        self.events_seen += 1
        await self._sink.info(line)
        self._apply(event)

    def _apply(self, event: StreamEvent) -> None:
        update = self._profile.interpret(event)
        if update.text:
            self._text_parts.append(update.text)
        if update.continuation_id is not None:
            self._continuation_id = update.continuation_id

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    async def feed_stderr(self, data: bytes | str) -> None:
        """Consume one stderr chunk; no decoding beyond UTF-8."""
        chunk = data if isinstance(data, str) else self._stderr_decoder.decode(data)
        if not chunk:
            return
        self._stderr_chunks.append(chunk)
        await self._sink.error(chunk)
