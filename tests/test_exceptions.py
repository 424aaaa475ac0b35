"""Tests for the exception hierarchy."""

from code_pulse.exceptions import (
    AnalysisError,
    CodePulseError,
    ConfigurationError,
    FileAccessError,
    InvalidConfigError,
    ParsingError,
    PersistenceError,
    TraversalBudgetExceeded,
)


class TestHierarchy:
    def test_analysis_errors(self):
        for exc in (
            FileAccessError("/a.ts", "gone"),
            ParsingError("typescript", "bad"),
            TraversalBudgetExceeded("ts", 10),
        ):
            assert isinstance(exc, AnalysisError)
            assert isinstance(exc, CodePulseError)

    def test_config_errors(self):
        assert isinstance(InvalidConfigError("k", 1, "bad"), ConfigurationError)

    def test_persistence_error(self):
        exc = PersistenceError("/tmp/m.json", "disk full")
        assert isinstance(exc, CodePulseError)
        assert exc.reason == "disk full"


class TestFormatting:
    def test_details_rendered(self):
        exc = FileAccessError("/a.ts", "gone")
        assert str(exc) == "Cannot access file: /a.ts (identity=/a.ts, reason=gone)"

    def test_no_details(self):
        assert str(CodePulseError("plain")) == "plain"

    def test_budget_details(self):
        exc = TraversalBudgetExceeded("ts", 500)
        assert exc.details["budget"] == "500"
        assert exc.budget == 500

    def test_detail_values_stringified(self):
        exc = CodePulseError("bad value", details={"limit": 3, "ratio": 0.5})
        assert exc.details == {"limit": "3", "ratio": "0.5"}


class TestSerialization:
    def test_to_dict(self):
        exc = PersistenceError("/tmp/m.json", "disk full")
        assert exc.to_dict() == {
            "error": "PersistenceError",
            "message": "Snapshot storage failed: /tmp/m.json",
            "details": {"path": "/tmp/m.json", "reason": "disk full"},
        }

    def test_to_dict_is_a_copy(self):
        exc = ParsingError("tsx", "bad")
        exc.to_dict()["details"]["reason"] = "changed"
        assert exc.details["reason"] == "bad"
