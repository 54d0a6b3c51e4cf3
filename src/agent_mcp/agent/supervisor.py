"""Process supervisor — the set of agent subprocesses still running."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterator

logger = logging.getLogger(__name__)

#: Seconds to wait after SIGTERM before SIGKILL.
_SIGTERM_WAIT = 3.0


async def terminate(proc: asyncio.subprocess.Process, grace: float = _SIGTERM_WAIT) -> None:
    """Stop *proc*: SIGTERM, wait up to *grace* seconds, then SIGKILL."""
    if proc.returncode is not None:
        return

    with contextlib.suppress(ProcessLookupError):
        proc.terminate()
    try:
        await asyncio.wait_for(proc.wait(), timeout=grace)
    except TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()


class ProcessSupervisor:
    """Tracks live agent subprocesses across calls.

    Shared by every call of one server.  Calls only add and remove their
    own process; ``shutdown()`` runs once, when the server stops.
    """

    def __init__(self) -> None:
        self._processes: set[asyncio.subprocess.Process] = set()

    def __len__(self) -> int:
        return len(self._processes)

    @contextlib.contextmanager
    def track(self, proc: asyncio.subprocess.Process) -> Iterator[None]:
        """Register *proc* for the duration of the block."""
        self._processes.add(proc)
        try:
            yield
        finally:
            self._processes.discard(proc)

    async def shutdown(self) -> None:
        """Terminate every process that is still running."""
        live = [p for p in self._processes if p.returncode is None]
        if not live:
            return
        logger.info("Terminating %d running agent process(es)", len(live))
        await asyncio.gather(*(terminate(p) for p in live), return_exceptions=True)
        self._processes.clear()
