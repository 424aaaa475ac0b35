"""Exception hierarchy for Code Pulse."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    TraversalBudgetExceeded,
)
from .base import CodePulseError
from .config import ConfigurationError, InvalidConfigError
from .persistence import PersistenceError

__all__ = [
    "CodePulseError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "TraversalBudgetExceeded",
    "ConfigurationError",
    "InvalidConfigError",
    "PersistenceError",
]
