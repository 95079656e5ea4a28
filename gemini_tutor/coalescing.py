"""Single-flight coalescing of identical in-flight calls.

Callers that issue the same logical request while one is already running
share its outcome instead of starting a second endpoint call. Nothing is
kept once the call settles: the next call with that key runs again.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
import logging
from typing import Any

log = logging.getLogger(__name__)


class SingleFlight:
    """Runs at most one operation per key at a time"""

    def __init__(self):
        self._in_flight: dict[Hashable, asyncio.Task[Any]] = {}

    def __len__(self) -> int:
        return len(self._in_flight)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._in_flight

    async def run(self, key: Hashable, operation: Callable[[], Awaitable[Any]]) -> Any:
        """Await ``operation()``, or join the call already running for ``key``.

        Every caller sharing a key receives the same result or the same
        exception. ``operation`` is not invoked for callers that join.
        """
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(operation())
            self._in_flight[key] = task
            task.add_done_callback(lambda _t: self._forget(key, _t))
        else:
            log.debug("Joining in-flight call for key %r.", key)
        # shield: one cancelled caller must not cancel the shared call
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the outcome retrieved even when every caller was cancelled
        if not task.cancelled():
            task.exception()
