"""Workspace watching: file-system changes fed to the scheduler as saves.

Changes reported by ``watchfiles`` pass through a DebouncedFileTracker, so a
file written several times in quick succession is analyzed once, after it
settles. Deleted files are dropped from the scheduler.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from watchfiles import Change, awatch

from ..logging_config import get_logger
from .debounce import DebouncedFileTracker
from .scheduler import AnalysisScheduler, EventKind

logger = get_logger(__name__)

IGNORED_DIRS = frozenset(
    {
        "node_modules",
        "__pycache__",
        "venv",
        "env",
        "dist",
        "build",
    }
)


class SourceFilter:
    """watchfiles filter: skips hidden and build directories under the roots.

    Paths listed in ``ignored_files`` (the metrics store) are always skipped.
    """

    def __init__(
        self, roots: Sequence[Path], ignored_files: Iterable[Union[str, Path]] = ()
    ) -> None:
        self.roots = [Path(root).resolve() for root in roots]
        self.ignored_files = {Path(p).resolve() for p in ignored_files}

    def __call__(self, change: Change, path: str) -> bool:
        candidate = Path(path)
        if candidate.resolve() in self.ignored_files:
            return False

        parts: tuple[str, ...] = (candidate.name,)
        for root in self.roots:
            try:
                parts = candidate.relative_to(root).parts
                break
            except ValueError:
                continue

        return not any(part.startswith(".") or part in IGNORED_DIRS for part in parts)


class WorkspaceWatcher:
    """Turns file-system changes under some roots into scheduler events.

    Args:
        scheduler: Receives a SAVE event per settled file
        roots: Directories to watch
        tracker: Per-file debouncer (built from the scheduler's config by default)
        ignored_files: Files whose changes are never reported
    """

    def __init__(
        self,
        scheduler: AnalysisScheduler,
        roots: Sequence[Union[str, Path]],
        tracker: Optional[DebouncedFileTracker] = None,
        ignored_files: Iterable[Union[str, Path]] = (),
    ) -> None:
        self.scheduler = scheduler
        self.roots = [Path(root).resolve() for root in roots]
        self.tracker = tracker or DebouncedFileTracker.from_config(scheduler.config)
        self.watch_filter = SourceFilter(self.roots, ignored_files)

    def handle_changes(self, changes: Iterable[tuple[Change, str]]) -> int:
        """Queue settled saves for written files and forget deleted ones.

        Returns:
            Number of files queued
        """
        queued = 0
        for change, path in changes:
            if change == Change.deleted:
                self.tracker.cancel(path)
                self.scheduler.forget(path)
                logger.debug(f"Forgot deleted file: {path}")
                continue
            self.tracker.queue_file_tracking(path, self._on_settled)
            queued += 1
        return queued

    def _on_settled(self, path: str) -> None:
        self.scheduler.record_event(EventKind.SAVE, path)

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Watch until ``stop_event`` is set or the task is cancelled."""
        logger.info(f"Watching {', '.join(str(r) for r in self.roots)} for changes")
        try:
            async for changes in awatch(
                *self.roots, watch_filter=self.watch_filter, stop_event=stop_event
            ):
                logger.debug(f"Detected {len(changes)} change(s)")
                self.handle_changes(changes)
        finally:
            cancelled = self.tracker.cancel_all()
            if cancelled:
                logger.debug(f"Dropped {cancelled} unsettled file(s)")
