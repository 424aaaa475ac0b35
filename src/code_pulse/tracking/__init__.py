"""Activity tracking: debouncing, sessions, aggregation, scheduling and watching."""

from .aggregation import average_complexity, language_breakdown, outlier_filtered_mean
from .debounce import DebouncedFileTracker, Debouncer
from .models import DailyTotals, SessionInsights, SessionRecord, Snapshot
from .scheduler import AnalysisScheduler, EventKind, SnapshotStore
from .session import SessionTracker
from .watcher import SourceFilter, WorkspaceWatcher

__all__ = [
    "AnalysisScheduler",
    "EventKind",
    "SnapshotStore",
    "Debouncer",
    "DebouncedFileTracker",
    "SessionTracker",
    "SessionRecord",
    "SessionInsights",
    "DailyTotals",
    "Snapshot",
    "outlier_filtered_mean",
    "average_complexity",
    "language_breakdown",
    "WorkspaceWatcher",
    "SourceFilter",
]
