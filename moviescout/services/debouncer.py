"""Single-slot debouncer on top of asyncio tasks.

Every `observe()` cancels the pending emission and re-arms the timer. Only the
latest value survives; it reaches the callback once the quiet period passes
without another call.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(
        self,
        callback: Callable[[Any], Awaitable[None] | None],
        quiet_period_ms: int,
    ):
        if quiet_period_ms < 0:
            raise ValueError("quiet_period_ms must be >= 0")
        self.callback = callback
        self.quiet_period = quiet_period_ms / 1000
        self._task: asyncio.Task | None = None
        # Emissions already past their quiet period; held so they are not collected
        self._running: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a value is waiting for its quiet period to elapse."""
        return self._task is not None and not self._task.done()

    @property
    def running(self) -> int:
        """Number of emissions whose callback is still executing."""
        return len(self._running)

    def observe(self, value: Any) -> None:
        """Replace any pending value and restart the timer. Needs a running loop."""
        if self._closed:
            logger.debug("Debouncer closed, dropping %r", value)
            return

        self._cancel_pending()
        self._task = asyncio.get_running_loop().create_task(self._emit_later(value))
        self._task.add_done_callback(self._finished)

    def close(self) -> None:
        """Cancel the pending emission. Nothing is emitted afterwards."""
        self._closed = True
        self._cancel_pending()

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _emit_later(self, value: Any) -> None:
        await asyncio.sleep(self.quiet_period)
        if self._closed:
            return

        # The emission now runs on its own; a later observe() must not cancel it
        self._running.add(asyncio.current_task())
        self._task = None

        result = self.callback(value)
        if inspect.isawaitable(result):
            await result

    def _finished(self, task: asyncio.Task) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced callback failed: %s", exc, exc_info=exc)
