"""Tests for recommendations and complexity alerts."""

import pytest

from code_pulse.config import TrackingConfig
from code_pulse.metrics.models import ComplexityMetrics, HalsteadMetrics
from code_pulse.metrics.recommendations import (
    ALL_CLEAR,
    AlertSeverity,
    check_complexity_alert,
    classify_complexity,
    get_recommendations,
    resolve_threshold,
)


def make_metrics(cc=1, mi=100.0, difficulty=0.0):
    return ComplexityMetrics(
        cyclomatic_complexity=cc,
        maintainability_index=mi,
        halstead=HalsteadMetrics(difficulty=difficulty, volume=10.0, effort=difficulty * 10.0),
    )


class TestGetRecommendations:
    """Threshold mapping from metrics to suggestions."""

    def test_all_clear(self):
        assert get_recommendations(make_metrics()) == [ALL_CLEAR]

    def test_high_complexity(self):
        recs = get_recommendations(make_metrics(cc=16))
        assert recs == ["High cyclomatic complexity. Refactor into smaller functions."]

    def test_moderate_complexity(self):
        recs = get_recommendations(make_metrics(cc=11))
        assert recs == ["Moderate complexity. Simplify nested conditions."]

    def test_complexity_boundaries_are_exclusive(self):
        assert get_recommendations(make_metrics(cc=10)) == [ALL_CLEAR]
        assert "Moderate" in get_recommendations(make_metrics(cc=15))[0]

    def test_low_maintainability(self):
        recs = get_recommendations(make_metrics(mi=39.9))
        assert recs == ["Low maintainability. Break into smaller modules."]

    def test_moderate_maintainability(self):
        recs = get_recommendations(make_metrics(mi=59.9))
        assert recs == ["Moderate maintainability. Improve documentation."]

    def test_high_cognitive_complexity(self):
        recs = get_recommendations(make_metrics(difficulty=31))
        assert recs == ["High cognitive complexity. Simplify logic."]

    def test_multiple_in_severity_order(self):
        recs = get_recommendations(make_metrics(cc=20, mi=10.0, difficulty=50))
        assert len(recs) == 3
        assert recs[0].startswith("High cyclomatic")
        assert recs[1].startswith("Low maintainability")
        assert recs[2].startswith("High cognitive")

    def test_deterministic(self):
        metrics = make_metrics(cc=12, mi=55.0)
        assert get_recommendations(metrics) == get_recommendations(metrics)


class TestComplexityAlert:
    """Per-language complexity thresholds."""

    THRESHOLDS = {"typescript": 15, "javascript": 12, "python": 20}

    def test_below_threshold_no_alert(self):
        assert check_complexity_alert("/a.ts", 15, "ts", self.THRESHOLDS) is None

    def test_warning_above_threshold(self):
        alert = check_complexity_alert("/a.ts", 16, "ts", self.THRESHOLDS)
        assert alert is not None
        assert alert.severity is AlertSeverity.WARNING
        assert alert.threshold == 15

    def test_error_above_one_and_a_half_threshold(self):
        alert = check_complexity_alert("/a.js", 19, "js", self.THRESHOLDS)
        assert alert is not None
        assert alert.severity is AlertSeverity.ERROR

    def test_exactly_one_and_a_half_is_warning(self):
        alert = check_complexity_alert("/a.js", 18, "javascript", self.THRESHOLDS)
        assert alert.severity is AlertSeverity.WARNING

    def test_unknown_language_uses_default(self):
        assert check_complexity_alert("/a.go", 10, "go", self.THRESHOLDS) is None
        alert = check_complexity_alert("/a.go", 11, "go", self.THRESHOLDS)
        assert alert.threshold == 10

    def test_message_mentions_complexity(self):
        alert = check_complexity_alert("/a.py", 45, "py", self.THRESHOLDS)
        assert "45" in alert.message
        assert alert.severity is AlertSeverity.ERROR

    @pytest.mark.parametrize("language", ["TypeScript", "TS", "tsx"])
    def test_language_aliases(self, language):
        assert check_complexity_alert("/a", 15, language, self.THRESHOLDS) is None


class TestClassifyComplexity:
    """Severity from an already-resolved threshold."""

    def test_at_threshold_no_alert(self):
        assert classify_complexity("/a.go", 8, "go", threshold=8) is None

    def test_severity_bands(self):
        assert classify_complexity("/a.go", 9, "go", threshold=8).severity is AlertSeverity.WARNING
        assert classify_complexity("/a.go", 13, "go", threshold=8).severity is AlertSeverity.ERROR

    def test_resolve_threshold_matches_config(self):
        config = TrackingConfig(language_complexity_thresholds={"ruby": 7}, complexity_threshold=9)
        for tag in ("rb", "ruby", "go"):
            assert resolve_threshold(
                tag, config.language_complexity_thresholds, config.complexity_threshold
            ) == config.threshold_for(tag)
