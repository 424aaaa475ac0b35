"""Tests for the runtime context and error reporter."""

import logging

from code_pulse.config import TrackingConfig
from code_pulse.context import ErrorReporter, PulseContext, ReportLevel


class TestErrorReporter:
    def test_history_and_notify(self):
        seen = []
        reporter = ErrorReporter(notify=lambda level, msg: seen.append((level, msg)))
        reporter.info("hello")
        reporter.warn("careful")
        reporter.error("broken")

        expected = [
            (ReportLevel.INFO, "hello"),
            (ReportLevel.WARNING, "careful"),
            (ReportLevel.ERROR, "broken"),
        ]
        assert reporter.history == expected
        assert seen == expected

    def test_errors_are_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="code_pulse")
        ErrorReporter().error("Failed to save metrics")
        assert any(
            r.levelno == logging.ERROR and "Failed to save metrics" in r.message
            for r in caplog.records
        )


class TestPulseContext:
    def test_defaults(self):
        config = TrackingConfig()
        ctx = PulseContext.create(config)
        assert ctx.is_tracked("/a.ts", "ts")
        assert not ctx.is_tracked("/a.json", "json")
        assert isinstance(ctx.reporter, ErrorReporter)
        assert ctx.clock() > 0

    def test_overrides(self, clock):
        ctx = PulseContext.create(TrackingConfig(), clock=clock, is_tracked=lambda i, l: False)
        assert ctx.clock() == clock.now
        assert not ctx.is_tracked("/a.ts", "ts")
