"""Runtime context shared by the tracking components.

PulseContext bundles what the scheduler needs from its host: configuration,
a time source, an inclusion policy and a place to report user-visible
problems. Hosts (the CLI, an editor bridge, tests) build one and pass it in;
nothing in the tracking layer reaches for globals.

Example:
    >>> ctx = PulseContext.create(load_config())
    >>> ctx.is_tracked("/src/app.ts", "ts")
    True
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .config import TrackingConfig
from .logging_config import get_logger

logger = get_logger(__name__)


class ReportLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ErrorReporter:
    """Routes user-facing notices to the log and an optional host callback.

    Attributes:
        notify: Called with (level, message) for every report, e.g. to show
            a notification in an editor
        history: Reports received so far, oldest first
    """

    notify: Optional[Callable[[ReportLevel, str], None]] = None
    history: list[tuple[ReportLevel, str]] = field(default_factory=list)

    def info(self, message: str) -> None:
        self._report(ReportLevel.INFO, message)

    def warn(self, message: str) -> None:
        self._report(ReportLevel.WARNING, message)

    def error(self, message: str) -> None:
        self._report(ReportLevel.ERROR, message)

    def _report(self, level: ReportLevel, message: str) -> None:
        if level is ReportLevel.ERROR:
            logger.error(message)
        elif level is ReportLevel.WARNING:
            logger.warning(message)
        else:
            logger.info(message)

        self.history.append((level, message))
        if self.notify is not None:
            self.notify(level, message)


@dataclass(frozen=True)
class PulseContext:
    """Immutable collaborators for one tracking session.

    Attributes:
        config: Tracking configuration
        clock: Time source returning seconds since the epoch
        reporter: User-facing error/notice sink
        is_tracked: Inclusion policy, (identity, language) -> bool
    """

    config: TrackingConfig
    clock: Callable[[], float]
    reporter: ErrorReporter
    is_tracked: Callable[[str, str], bool]

    @classmethod
    def create(
        cls,
        config: TrackingConfig,
        clock: Callable[[], float] = time.time,
        reporter: Optional[ErrorReporter] = None,
        is_tracked: Optional[Callable[[str, str], bool]] = None,
    ) -> PulseContext:
        """Build a context, defaulting the policy to ``config.is_tracked``."""
        return cls(
            config=config,
            clock=clock,
            reporter=reporter or ErrorReporter(),
            is_tracked=is_tracked or config.is_tracked,
        )
