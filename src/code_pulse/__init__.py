"""
Code Pulse - code complexity metrics and coding activity tracking

Computes cyclomatic complexity, Halstead figures and a maintainability index
for source files, caches the results, and turns a stream of editor events
into coding-session insights and daily totals.
"""

__version__ = "0.1.0"

from .cache import MetricCache
from .config import TrackingConfig, load_config
from .context import ErrorReporter, PulseContext
from .metrics import ComplexityAnalyzer, ComplexityMetrics, FileRecord, get_recommendations
from .storage import JsonSnapshotStore
from .tracking import AnalysisScheduler, EventKind, SessionInsights

__all__ = [
    "ComplexityAnalyzer",
    "ComplexityMetrics",
    "FileRecord",
    "get_recommendations",
    "MetricCache",
    "TrackingConfig",
    "load_config",
    "PulseContext",
    "ErrorReporter",
    "AnalysisScheduler",
    "EventKind",
    "SessionInsights",
    "JsonSnapshotStore",
]
