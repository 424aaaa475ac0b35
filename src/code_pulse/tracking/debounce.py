"""Keyed debouncing on an asyncio event loop.

A Debouncer holds at most one pending task per key. Scheduling a key that is
already pending cancels the earlier timer, so a burst of schedules for one
key runs exactly one task: the last one scheduled, one delay after it.

    debouncer = Debouncer()
    debouncer.schedule("/src/app.ts", 0.5, lambda: analyze("/src/app.ts"))
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from ..config import TrackingConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

FILE_DEBOUNCE_SECONDS = 0.3


class Debouncer:
    """Cancel-and-replace scheduler of delayed callbacks, one per key.

    Args:
        loop: Event loop to schedule on. Defaults to the loop running when
            ``schedule`` is first called.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, key: str, delay: float, task: Callable[[], None]) -> None:
        """Run ``task`` after ``delay`` seconds, replacing any pending task for ``key``.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        if self.cancel(key):
            logger.debug(f"Debounce replaced pending task: {key}")
        self._handles[key] = self._get_loop().call_later(delay, self._fire, key, task)

    def _fire(self, key: str, task: Callable[[], None]) -> None:
        self._handles.pop(key, None)
        try:
            task()
        except Exception:
            logger.exception(f"Debounced task failed: {key}")

    def cancel(self, key: str) -> bool:
        """Cancel the pending task for ``key``. Returns True if one was pending."""
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every pending task. Returns how many were cancelled."""
        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            handle.cancel()
        return len(handles)

    def pending_keys(self) -> list[str]:
        return list(self._handles)

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)


class DebouncedFileTracker:
    """Single-purpose file debouncer with a 300 ms quiet period by default.

    ``queue_file_tracking(path, callback)`` calls ``callback(path)`` once the
    path has seen no further queue requests for the quiet period.
    """

    def __init__(
        self,
        delay: float = FILE_DEBOUNCE_SECONDS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.delay = delay
        self._debouncer = Debouncer(loop)

    @classmethod
    def from_config(
        cls, config: TrackingConfig, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> DebouncedFileTracker:
        return cls(delay=config.file_debounce_seconds, loop=loop)

    def queue_file_tracking(self, path: str, callback: Callable[[str], None]) -> None:
        self._debouncer.schedule(path, self.delay, lambda: callback(path))

    def cancel(self, path: str) -> bool:
        return self._debouncer.cancel(path)

    def cancel_all(self) -> int:
        return self._debouncer.cancel_all()

    def __len__(self) -> int:
        return len(self._debouncer)
