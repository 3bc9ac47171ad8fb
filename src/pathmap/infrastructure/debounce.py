"""Cancel-and-rearm debounce timer using asyncio."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from pathmap.infrastructure.logger import logger


class DebounceTimer:
    """Runs the most recently scheduled callback after delay_s of quiet.

    Scheduling again before the delay elapses cancels the pending callback;
    at most one is ever armed.
    """

    def __init__(self, delay_s: float) -> None:
        self._delay = delay_s
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, callback: Callable[[], Awaitable[None] | None]) -> None:
        """Cancel any pending callback and arm a new countdown for this one."""
        if self._task:
            self._task.cancel()
        self._task = asyncio.create_task(self._fire(callback))

    async def _fire(self, callback: Callable[[], Awaitable[None] | None]) -> None:
        await asyncio.sleep(self._delay)
        # Disarm before running so a callback that re-schedules is not cancelled by itself.
        self._task = None
        try:
            result = callback()
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            logger.exception("Debounced callback failed")

    def clear(self) -> None:
        """Cancel the timer without firing the callback."""
        if self._task:
            self._task.cancel()
            self._task = None
