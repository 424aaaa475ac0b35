"""Event-driven analysis scheduling and session tracking.

The AnalysisScheduler is the process-facing core. A host (editor bridge,
file watcher, CLI) feeds it events; it decides what to analyze and when,
keeps the metric cache and the current coding session, and folds both into
persisted daily totals on flush.

Trigger rules:
    CHANGE        record activity, queue a debounced light analysis
    SAVE          record activity, run a deep analysis immediately
    FOCUS_CHANGE  record activity
    TICK          run the idle check

CHANGE, SAVE and FOCUS_CHANGE only act on files accepted by the context's
inclusion policy.

Light analysis never replaces a live cache entry: unsaved edits to a file
that is already cached are picked up by the next save, not while typing.

Example:
    >>> ctx = PulseContext.create(load_config())
    >>> scheduler = AnalysisScheduler(ctx, JsonSnapshotStore(".code-pulse/metrics.json"))
    >>> scheduler.record_event(EventKind.SAVE, "/src/app.ts", "if (a && b) {}")
    >>> scheduler.get_session_insights().files_tracked
    1
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

from ..cache import MetricCache
from ..context import PulseContext
from ..exceptions import FileAccessError, PersistenceError
from ..logging_config import get_logger
from ..metrics.analyzer import ComplexityAnalyzer
from ..metrics.languages import language_from_identity
from ..metrics.models import FileRecord
from ..metrics.recommendations import ComplexityAlert, classify_complexity, get_recommendations
from .aggregation import average_complexity, language_breakdown
from .debounce import Debouncer
from .models import SessionInsights, Snapshot, utc_date
from .session import SessionTracker

logger = get_logger(__name__)


class EventKind(Enum):
    """Host notifications understood by the scheduler."""

    CHANGE = "change"
    SAVE = "save"
    FOCUS_CHANGE = "focus_change"
    TICK = "tick"


class SnapshotStore(Protocol):
    """Persistence collaborator used at flush and restore points."""

    def load_snapshot(self) -> Snapshot: ...

    def save_snapshot(self, snapshot: Snapshot) -> None: ...


def read_file_content(identity: str) -> str:
    """Default content reader: the file at ``identity`` decoded as UTF-8.

    Raises:
        FileAccessError: If the file cannot be read
    """
    try:
        return Path(identity).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileAccessError(identity, str(e)) from e


def line_count(content: str) -> int:
    if not content:
        return 0
    return content.count("\n") + 1


def _minutes(seconds: float) -> float:
    return round(seconds / 60, 1)


class AnalysisScheduler:
    """Decides when to analyze files and accounts for coding sessions.

    Args:
        context: Configuration, clock, reporter and inclusion policy
        store: Persistence collaborator for flush and restore
        analyzer: Complexity analyzer (built from the config by default)
        cache: Metric cache (built from the config by default)
        reader: Reads current file content when an event carries none
        on_alert: Called with every complexity alert raised by a deep analysis
        loop: Event loop for debounce timers and the idle tick. Defaults to
            the running loop at first use.
    """

    def __init__(
        self,
        context: PulseContext,
        store: SnapshotStore,
        analyzer: Optional[ComplexityAnalyzer] = None,
        cache: Optional[MetricCache[FileRecord]] = None,
        reader: Callable[[str], str] = read_file_content,
        on_alert: Optional[Callable[[ComplexityAlert], None]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        config = context.config
        self.context = context
        self.config = config
        self.store = store
        self.analyzer = analyzer or ComplexityAnalyzer(
            max_traversal_nodes=config.max_traversal_nodes
        )
        if cache is None:
            cache = MetricCache(
                max_size=config.cache_max_size,
                ttl_seconds=config.cache_ttl_seconds,
                clock=context.clock,
            )
        self.cache: MetricCache[FileRecord] = cache
        self.sessions = SessionTracker(context.clock, config.idle_threshold_seconds)

        self._reader = reader
        self._on_alert = on_alert
        self._loop = loop
        self._debouncer = Debouncer(loop)
        # identity -> (content, language override)
        self._pending: dict[str, tuple[Optional[str], Optional[str]]] = {}
        self._idle_task: Optional[asyncio.Task[None]] = None
        self._flush_task: Optional[asyncio.Task[None]] = None
        self._torn_down = False

    # ── Events ─────────────────────────────────────────────────────

    def record_event(
        self,
        kind: EventKind,
        identity: Optional[str] = None,
        content: Optional[str] = None,
        language: Optional[str] = None,
    ) -> None:
        """Handle one host event.

        Args:
            kind: Event kind
            identity: File the event concerns (ignored for TICK)
            content: Current file content; read through the reader when None
            language: Language tag to analyze as. Defaults to the identity's
                file extension.

        Raises:
            RuntimeError: For CHANGE events when no loop was given and none
                is running. Nothing is left pending in that case.
        """
        if kind is EventKind.TICK:
            self.check_idle()
            return

        if not identity:
            return

        language = language or language_from_identity(identity)
        if not self.context.is_tracked(identity, language):
            logger.debug(f"Ignoring {kind.value} for untracked file: {identity}")
            return

        self.sessions.record_activity(identity)

        if kind is EventKind.CHANGE:
            self.schedule_analysis(identity, content, language)
        elif kind is EventKind.SAVE:
            self._deep_analysis(identity, content, language)

    def schedule_analysis(
        self, identity: str, content: Optional[str] = None, language: Optional[str] = None
    ) -> None:
        """Queue a light analysis after the debounce delay.

        A newer schedule for the same identity replaces the pending one,
        payload included.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        self._debouncer.schedule(
            identity, self.config.debounce_seconds, lambda: self._run_pending(identity)
        )
        self._pending[identity] = (content, language)

    @property
    def pending(self) -> list[str]:
        """Identities waiting for their debounce delay to elapse."""
        return list(self._pending)

    def _run_pending(self, identity: str) -> None:
        if identity not in self._pending:
            return
        content, language = self._pending.pop(identity)
        self._light_analysis(identity, content, language)

    def forget(self, identity: str) -> None:
        """Drop a file that no longer exists: its pending analysis and cache entry."""
        self._debouncer.cancel(identity)
        self._pending.pop(identity, None)
        self.cache.delete(identity)

    # ── Analysis ───────────────────────────────────────────────────

    def _light_analysis(
        self, identity: str, content: Optional[str], language: Optional[str] = None
    ) -> Optional[FileRecord]:
        if self.cache.get(identity) is not None:
            logger.debug(f"Skipping light analysis, already cached: {identity}")
            return None

        if content is None:
            try:
                content = self._reader(identity)
            except (OSError, FileAccessError) as e:
                logger.debug(f"Dropping pending analysis for {identity}: {e}")
                return None

        return self._analyze(identity, content, deep=False, language=language)

    def _deep_analysis(
        self, identity: str, content: Optional[str], language: Optional[str] = None
    ) -> Optional[FileRecord]:
        if content is None:
            try:
                content = self._reader(identity)
            except (OSError, FileAccessError) as e:
                logger.warning(f"Cannot analyze saved file {identity}: {e}")
                return None

        record = self._analyze(identity, content, deep=True, language=language)
        self._check_alert(record)
        if self.config.enable_detailed_logging:
            self._log_insights(record)
        return record

    def _analyze(
        self, identity: str, content: str, deep: bool, language: Optional[str] = None
    ) -> FileRecord:
        language = language or language_from_identity(identity)
        size = len(content.encode("utf-8", errors="replace"))

        if deep or size < self.config.deep_analysis_byte_limit:
            metrics = self.analyzer.analyze(content, language)
        else:
            metrics = self.analyzer.quick_analyze(content, language)

        record = FileRecord(
            identity=identity,
            language=language,
            line_count=line_count(content),
            metrics=metrics,
            observed_at=self.context.clock(),
        )
        self.cache.set(identity, record)
        logger.debug(
            f"{'Deep' if deep else 'Light'} analysis of {identity}: "
            f"cc={metrics.cyclomatic_complexity}, mi={metrics.maintainability_index:.1f}"
        )
        return record

    def _check_alert(self, record: FileRecord) -> None:
        alert = classify_complexity(
            record.identity,
            record.metrics.cyclomatic_complexity,
            record.language,
            self.config.threshold_for(record.language),
        )
        if alert is None:
            return

        logger.warning(f"{Path(record.identity).name}: {alert.message} [{alert.severity.value}]")
        if self._on_alert is not None:
            self._on_alert(alert)

    def _log_insights(self, record: FileRecord) -> None:
        metrics = record.metrics
        lines = [
            f"File Analysis: {Path(record.identity).name}",
            f"Language: {record.language}",
            f"Lines of Code: {record.line_count}",
            "Complexity Metrics:",
            f"  - Cyclomatic Complexity: {metrics.cyclomatic_complexity}",
            f"  - Maintainability Index: {metrics.maintainability_index:.2f}",
            "Recommendations:",
        ]
        lines.extend(f"  * {rec}" for rec in get_recommendations(metrics))
        logger.info("\n".join(lines))

    # ── Sessions ───────────────────────────────────────────────────

    def check_idle(self) -> float:
        """Run one idle check. Returns the idle seconds added."""
        return self.sessions.check_idle()

    def get_session_insights(self) -> SessionInsights:
        """Summarize the current session and the live cache contents."""
        now = self.context.clock()
        session = self.sessions.current
        records = [record for _, record in self.cache.items()]

        return SessionInsights(
            duration_minutes=_minutes(session.elapsed(now)),
            active_minutes=_minutes(session.active_seconds(now)),
            idle_minutes=_minutes(session.idle_accumulated),
            files_tracked=len(records),
            file_changes=len(session.active_files),
            language_breakdown=language_breakdown(records),
            average_complexity=average_complexity(records),
        )

    # ── Persistence ────────────────────────────────────────────────

    def flush(self) -> Snapshot:
        """Fold the session and cache into the stored snapshot, then start a new session.

        Returns:
            The snapshot that was saved

        Raises:
            PersistenceError: If the store fails. The current session is kept
                so the next flush includes it.
        """
        insights = self.get_session_insights()
        records = dict(self.cache.items())
        today = utc_date(self.context.clock())

        try:
            snapshot = self.store.load_snapshot().with_session(today, insights, records)
            self.store.save_snapshot(snapshot)
        except PersistenceError as e:
            self.context.reporter.error(f"Failed to save metrics: {e}")
            raise

        closed = self.sessions.rotate()
        stats = self.cache.stats()
        logger.info(
            f"Flushed session: {insights.active_minutes} active min, "
            f"{len(closed.active_files)} files changed, {len(records)} records "
            f"(cache {stats['size']}/{stats['max_size']})"
        )
        return snapshot

    def restore(self, workspace_roots: Optional[Iterable[str]] = None) -> int:
        """Load persisted file records into the cache.

        Args:
            workspace_roots: Keep only identities under one of these roots.
                None keeps every record.

        Returns:
            Number of records restored
        """
        try:
            snapshot = self.store.load_snapshot()
        except PersistenceError as e:
            self.context.reporter.warn(f"Failed to load metrics: {e}")
            return 0

        roots = None if workspace_roots is None else [str(r) for r in workspace_roots]
        restored = 0
        for identity, record in snapshot.file_records.items():
            if roots is not None and not any(identity.startswith(root) for root in roots):
                continue
            self.cache.set(identity, record)
            restored += 1

        logger.info(f"Restored {restored} file records")
        return restored

    # ── Lifecycle ──────────────────────────────────────────────────

    def start(self) -> None:
        """Start the periodic idle check and auto-flush on the event loop.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        if self._idle_task is not None:
            return
        loop = self._loop or asyncio.get_running_loop()
        self._idle_task = loop.create_task(self._idle_loop())
        self._flush_task = loop.create_task(self._flush_loop())
        logger.debug(
            f"Idle check every {self.config.idle_check_seconds}s, "
            f"auto-flush every {self.config.tracking_interval_minutes} min"
        )

    async def _idle_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.idle_check_seconds)
            self.check_idle()

    async def _flush_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.tracking_interval_seconds)
            try:
                self.flush()
            except PersistenceError:
                # Already reported; the session is retried on the next interval
                continue

    def teardown(self) -> None:
        """Flush, then release the periodic tasks and all pending debounce timers.

        Timers are released even when the flush fails. Calling it again is a
        no-op.
        """
        if self._torn_down:
            return
        self._torn_down = True
        try:
            self.flush()
        finally:
            cancelled = self._debouncer.cancel_all()
            self._pending.clear()
            for task in (self._idle_task, self._flush_task):
                if task is not None:
                    task.cancel()
            self._idle_task = None
            self._flush_task = None
            logger.info(f"Scheduler torn down ({cancelled} pending analyses cancelled)")

    async def __aenter__(self) -> AnalysisScheduler:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()
