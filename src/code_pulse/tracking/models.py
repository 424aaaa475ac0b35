"""Session, insight and snapshot types for activity tracking.

SessionRecord is the only mutable type here: the scheduler owns exactly one
current record and appends to it as events arrive. Everything that leaves
the scheduler (insights, daily totals, snapshots) is a plain value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from ..metrics.models import FileRecord


@dataclass
class SessionRecord:
    """One coding session, from construction or the last flush to the next.

    Attributes:
        started_at: Clock time the session began (seconds)
        idle_accumulated: Idle seconds counted by the idle tick
        active_files: File identities touched, in first-touch order
        ended_at: Clock time of the flush that closed the session
    """

    started_at: float
    idle_accumulated: float = 0.0
    active_files: dict[str, None] = field(default_factory=dict)
    ended_at: Optional[float] = None

    def touch(self, identity: str) -> None:
        self.active_files.setdefault(identity, None)

    def add_idle(self, seconds: float) -> None:
        self.idle_accumulated += seconds

    def close(self, now: float) -> None:
        self.ended_at = now

    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    def elapsed(self, now: float) -> float:
        """Seconds since the session started (up to its end once closed)."""
        end = now if self.ended_at is None else self.ended_at
        return max(0.0, end - self.started_at)

    def active_seconds(self, now: float) -> float:
        """Elapsed minus accumulated idle time, floored at zero."""
        return max(0.0, self.elapsed(now) - self.idle_accumulated)


@dataclass(frozen=True)
class SessionInsights:
    """Summary of the current session and the cached file records.

    Minute values are rounded to one decimal place.
    """

    duration_minutes: float
    active_minutes: float
    idle_minutes: float
    files_tracked: int
    file_changes: int
    language_breakdown: dict[str, int]
    average_complexity: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_minutes": self.duration_minutes,
            "active_minutes": self.active_minutes,
            "idle_minutes": self.idle_minutes,
            "files_tracked": self.files_tracked,
            "file_changes": self.file_changes,
            "language_breakdown": dict(self.language_breakdown),
            "average_complexity": self.average_complexity,
        }


@dataclass(frozen=True)
class DailyTotals:
    """Accumulated activity for one calendar day (ISO ``YYYY-MM-DD``)."""

    date: str
    total_coding_minutes: float = 0.0
    files_edited: int = 0
    languages: dict[str, int] = field(default_factory=dict)

    def fold(self, insights: SessionInsights) -> DailyTotals:
        """Return these totals with one flushed session folded in.

        Coding minutes add up, ``files_edited`` keeps the larger of the two
        counts and per-language counts are summed.
        """
        languages = dict(self.languages)
        for language, count in insights.language_breakdown.items():
            languages[language] = languages.get(language, 0) + count
        return DailyTotals(
            date=self.date,
            total_coding_minutes=round(self.total_coding_minutes + insights.active_minutes, 1),
            files_edited=max(self.files_edited, insights.file_changes),
            languages=languages,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "total_coding_minutes": self.total_coding_minutes,
            "files_edited": self.files_edited,
            "languages": dict(self.languages),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyTotals:
        return cls(
            date=str(data["date"]),
            total_coding_minutes=float(data.get("total_coding_minutes", 0.0)),
            files_edited=int(data.get("files_edited", 0)),
            languages={str(k): int(v) for k, v in data.get("languages", {}).items()},
        )


@dataclass(frozen=True)
class Snapshot:
    """Everything the persistence collaborator stores.

    Attributes:
        daily_totals: One entry per day, oldest first
        file_records: Latest FileRecord per identity
    """

    daily_totals: list[DailyTotals] = field(default_factory=list)
    file_records: dict[str, FileRecord] = field(default_factory=dict)

    def totals_for(self, date: str) -> Optional[DailyTotals]:
        for totals in self.daily_totals:
            if totals.date == date:
                return totals
        return None

    def with_session(
        self, date: str, insights: SessionInsights, records: dict[str, FileRecord]
    ) -> Snapshot:
        """Fold a session and the live cache contents into a new snapshot."""
        existing = self.totals_for(date)
        if existing is None:
            daily = [*self.daily_totals, DailyTotals(date).fold(insights)]
        else:
            folded = existing.fold(insights)
            daily = [folded if t.date == date else t for t in self.daily_totals]

        merged = dict(self.file_records)
        merged.update(records)
        return Snapshot(daily_totals=daily, file_records=merged)

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily_totals": [t.to_dict() for t in self.daily_totals],
            "file_records": {k: r.to_dict() for k, r in self.file_records.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        return cls(
            daily_totals=[DailyTotals.from_dict(t) for t in data.get("daily_totals", [])],
            file_records={
                str(k): FileRecord.from_dict(r) for k, r in data.get("file_records", {}).items()
            },
        )


def utc_date(timestamp: float) -> str:
    """ISO calendar date (UTC) of a clock timestamp."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()
