"""Tests for session, totals and snapshot models."""

from code_pulse.metrics.models import ComplexityMetrics, FileRecord, HalsteadMetrics
from code_pulse.tracking.models import (
    DailyTotals,
    SessionInsights,
    SessionRecord,
    Snapshot,
    utc_date,
)


def insights(active=10.0, changes=2, languages=None):
    return SessionInsights(
        duration_minutes=active,
        active_minutes=active,
        idle_minutes=0.0,
        files_tracked=changes,
        file_changes=changes,
        language_breakdown=languages if languages is not None else {"ts": 2},
        average_complexity=3.0,
    )


def record(identity, cc=2):
    return FileRecord(
        identity=identity,
        language="ts",
        line_count=4,
        metrics=ComplexityMetrics(cc, 90.5, HalsteadMetrics(1.5, 8.0, 12.0)),
        observed_at=1_700_000_000.0,
    )


class TestSessionRecord:
    def test_elapsed_stops_at_close(self):
        session = SessionRecord(started_at=100.0)
        session.close(160.0)
        assert session.elapsed(500.0) == 60.0
        assert not session.is_open

    def test_touch_is_idempotent(self):
        session = SessionRecord(started_at=0.0)
        session.touch("/a")
        session.touch("/a")
        assert list(session.active_files) == ["/a"]


class TestDailyTotals:
    def test_fold_rules(self):
        totals = DailyTotals("2024-01-01", 30.0, 5, {"ts": 1, "py": 2})
        folded = totals.fold(insights(active=12.5, changes=3, languages={"ts": 2, "go": 1}))
        assert folded.total_coding_minutes == 42.5
        assert folded.files_edited == 5
        assert folded.languages == {"ts": 3, "py": 2, "go": 1}

    def test_fold_does_not_mutate(self):
        totals = DailyTotals("2024-01-01", languages={"ts": 1})
        totals.fold(insights())
        assert totals.languages == {"ts": 1}
        assert totals.total_coding_minutes == 0.0


class TestSnapshot:
    def test_with_session_new_day(self):
        snapshot = Snapshot().with_session("2024-01-01", insights(), {"/a.ts": record("/a.ts")})
        assert [t.date for t in snapshot.daily_totals] == ["2024-01-01"]
        assert snapshot.daily_totals[0].files_edited == 2
        assert set(snapshot.file_records) == {"/a.ts"}

    def test_with_session_merges_records_by_identity(self):
        base = Snapshot(
            daily_totals=[DailyTotals("2023-12-31", 5.0, 1, {})],
            file_records={"/a.ts": record("/a.ts", cc=1), "/b.ts": record("/b.ts")},
        )
        updated = base.with_session("2024-01-01", insights(), {"/a.ts": record("/a.ts", cc=9)})
        assert len(updated.daily_totals) == 2
        assert updated.file_records["/a.ts"].metrics.cyclomatic_complexity == 9
        assert "/b.ts" in updated.file_records
        assert base.file_records["/a.ts"].metrics.cyclomatic_complexity == 1

    def test_dict_round_trip(self):
        snapshot = Snapshot(
            daily_totals=[DailyTotals("2024-01-01", 12.5, 3, {"ts": 2})],
            file_records={"/a.ts": record("/a.ts")},
        )
        assert Snapshot.from_dict(snapshot.to_dict()) == snapshot

    def test_from_empty_dict(self):
        assert Snapshot.from_dict({}) == Snapshot()


class TestUtcDate:
    def test_utc_date(self):
        assert utc_date(1_700_000_000.0) == "2023-11-14"
        assert utc_date(0.0) == "1970-01-01"
