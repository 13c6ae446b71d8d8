"""
Debounced emission of the latest input value.

Every push restarts the quiet period; the callback only sees the value that
was current once input paused for ``delay`` seconds.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from typeahead.core.logging import get_logger

logger = get_logger(__name__)


class Debouncer:
    def __init__(self, callback: Callable[[Any], Awaitable[None]], delay: float = 0.5) -> None:
        self.delay = delay
        self._callback = callback
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: Any) -> None:
        """Schedule ``value`` for emission, superseding any earlier one."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._emit(value))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def flush(self) -> None:
        """Wait until the scheduled emission (if any) has run."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def _emit(self, value: Any) -> None:
        await asyncio.sleep(self.delay)
        try:
            await self._callback(value)
        except Exception:
            logger.exception(f"Debounced callback failed for value={value!r}")
