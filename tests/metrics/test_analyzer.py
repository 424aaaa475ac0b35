"""Tests for code_pulse.metrics.analyzer module."""

import math

import pytest

from code_pulse.metrics.analyzer import ComplexityAnalyzer
from code_pulse.metrics.patterns import fallback_metrics


@pytest.fixture(scope="module")
def analyzer():
    return ComplexityAnalyzer()


SAMPLES = [
    ("", "ts"),
    ("", "py"),
    ("", "unknown"),
    ("if (a && b) { run(); }", "ts"),
    ("const f = (x) => x ? 1 : 2;", "js"),
    ("def f(x):\n    if x and y:\n        return 1\n", "python"),
    ("{{{{ not valid ))) code", "typescript"),
    ("while true do\n  x = x or y\nend", "lua"),
    ("\n".join("if (a || b) { c(); }" for _ in range(300)), "js"),
]


class TestInvariants:
    """Bounds that hold for every input and strategy."""

    @pytest.mark.parametrize("source,language", SAMPLES)
    def test_complexity_at_least_one(self, analyzer, source, language):
        metrics = analyzer.analyze(source, language)
        assert metrics.cyclomatic_complexity >= 1

    @pytest.mark.parametrize("source,language", SAMPLES)
    def test_maintainability_in_range(self, analyzer, source, language):
        metrics = analyzer.analyze(source, language)
        assert 0.0 <= metrics.maintainability_index <= 100.0

    @pytest.mark.parametrize("language", ["ts", "js", "py", "rb", "txt"])
    def test_empty_source_is_baseline(self, analyzer, language):
        """Empty text yields complexity 1 and a defined maintainability."""
        metrics = analyzer.analyze("", language)
        assert metrics.cyclomatic_complexity == 1
        assert not math.isnan(metrics.maintainability_index)
        assert not math.isnan(metrics.halstead.volume)


class TestStructuredAnalysis:
    """Tree-sitter strategy for the TypeScript/JavaScript family."""

    def test_if_with_logical_and(self, analyzer):
        """Base 1 + if + && = 3."""
        metrics = analyzer.analyze("if (a && b) { run(); }", "ts")
        assert metrics.cyclomatic_complexity == 3

    def test_switch_counts_statement_and_cases(self, analyzer):
        """switch + two case labels; default adds nothing."""
        source = (
            "switch (x) {\n"
            "  case 1: f(); break;\n"
            "  case 2: g(); break;\n"
            "  default: h();\n"
            "}\n"
        )
        assert analyzer.analyze(source, "js").cyclomatic_complexity == 4

    def test_loops_catch_and_ternary(self, analyzer):
        source = (
            "for (let i = 0; i < n; i++) { f(i); }\n"
            "for (const x of xs) { g(x); }\n"
            "while (ok) { ok = step(); }\n"
            "do { tick(); } while (busy);\n"
            "try { risky(); } catch (e) { log(e); }\n"
            "const y = cond ? 1 : 2;\n"
        )
        assert analyzer.analyze(source, "typescript").cyclomatic_complexity == 7

    def test_nullish_and_or_are_branches(self, analyzer):
        source = "const v = a ?? b;\nconst w = c || d;\n"
        assert analyzer.analyze(source, "js").cyclomatic_complexity == 3

    def test_non_logical_binary_operators_do_not_branch(self, analyzer):
        source = "const total = a + b * c - d;\n"
        assert analyzer.analyze(source, "ts").cyclomatic_complexity == 1

    def test_tsx_alias(self, analyzer):
        source = "const el = ok ? <A /> : <B />;\n"
        assert analyzer.analyze(source, "tsx").cyclomatic_complexity == 2

    def test_language_tag_case_insensitive(self, analyzer):
        upper = analyzer.analyze("if (a) { b(); }", "TS")
        lower = analyzer.analyze("if (a) { b(); }", "ts")
        assert upper == lower

    def test_halstead_counts_operators_and_operands(self, analyzer):
        """a + b: one operator, two identifiers."""
        metrics = analyzer.analyze("x = a + b;", "js")
        # n1 = 1 (+), n2 = 3 (x, a, b), N1 = 1, N2 = 3
        assert metrics.halstead.volume == pytest.approx(4 * math.log2(4))
        assert metrics.halstead.difficulty == pytest.approx(0.5)
        assert metrics.halstead.effort == pytest.approx(
            metrics.halstead.difficulty * metrics.halstead.volume
        )

    def test_complexity_capped_at_100(self, analyzer):
        source = "\n".join(f"if (v{i}) {{ f(); }}" for i in range(150))
        assert analyzer.analyze(source, "js").cyclomatic_complexity == 100

    def test_malformed_source_still_returns_metrics(self, analyzer):
        metrics = analyzer.analyze("function ( { if (((", "ts")
        assert metrics.cyclomatic_complexity >= 1


class TestTraversalBudget:
    """An exceeded node budget degrades to the generic fallback."""

    def test_budget_exceeded_uses_fallback(self):
        source = "if (a && b) { run(); }\nwhile (x) { y(); }\n"
        analyzer = ComplexityAnalyzer(max_traversal_nodes=5)
        assert analyzer.analyze(source, "ts") == fallback_metrics(source)

    def test_generous_budget_uses_tree(self):
        source = "if (a && b) { run(); }"
        analyzer = ComplexityAnalyzer(max_traversal_nodes=10_000)
        assert analyzer.analyze(source, "ts").cyclomatic_complexity == 3


class TestPatternAnalysis:
    """Line heuristics for Python and Ruby."""

    def test_python_keywords_and_operators(self, analyzer):
        source = (
            "def check(x, y):\n"
            "    # if this is a comment it is ignored\n"
            "    if x and y:\n"
            "        return 1\n"
            "    elif x or y:\n"
            "        return 2\n"
            "    for item in x:\n"
            "        pass\n"
            "    return 0\n"
        )
        # 1 + def + (if, and) + (elif, or) + for = 7
        assert analyzer.analyze(source, "py").cyclomatic_complexity == 7

    def test_python_formulas(self, analyzer):
        source = "if x:\n    y()\n"
        metrics = analyzer.analyze(source, "python")
        # lines = 3 (trailing newline), cc = 2
        assert metrics.cyclomatic_complexity == 2
        assert metrics.maintainability_index == pytest.approx(100 - 0.2 * 2 - 0.1 * 3)
        assert metrics.halstead.difficulty == pytest.approx(1.0)
        assert metrics.halstead.volume == pytest.approx(3 * math.log2(3))

    def test_python_return_ternary(self, analyzer):
        source = "return a if cond else b"
        # 'if' keyword + ternary pattern
        assert analyzer.analyze(source, "py").cyclomatic_complexity == 3

    def test_python_keywords_without_trailing_space(self, analyzer):
        source = "while(x):\n    pass\ntry:\n    f()\nexcept:\n    pass\n"
        # 1 + while + except
        assert analyzer.analyze(source, "py").cyclomatic_complexity == 3

    def test_ruby_dialect(self, analyzer):
        source = "def go\n  unless done\n    run\n  end\nend\n"
        assert analyzer.analyze(source, "rb").cyclomatic_complexity == 3


class TestFallbackAnalysis:
    """Generic heuristics for unknown languages."""

    def test_generic_keywords(self, analyzer):
        source = "if x then\n  y\nelse\n  z\nend\nwhile a && b do\nend\n"
        # 1 + if + else + (while, &&) = 5
        assert analyzer.analyze(source, "lua").cyclomatic_complexity == 5

    def test_comment_lines_skipped(self, analyzer):
        source = "// if while for\n# case switch\nplain line\n"
        assert analyzer.analyze(source, "txt").cyclomatic_complexity == 1

    def test_capped_at_50(self, analyzer):
        source = "\n".join("if x" for _ in range(80))
        assert analyzer.analyze(source, "unknown").cyclomatic_complexity == 50

    def test_fallback_formulas(self, analyzer):
        source = "if x\nend"
        metrics = analyzer.analyze(source, "cobol")
        assert metrics.cyclomatic_complexity == 2
        assert metrics.maintainability_index == pytest.approx(100 - 0.25 * 2 - 0.05 * 2)
        assert metrics.halstead.difficulty == pytest.approx(0.2)
        assert metrics.halstead.volume == pytest.approx(2.0)
        assert metrics.halstead.effort == pytest.approx(4.0)


class TestQuickAnalyze:
    """Line-count heuristic for large, in-progress edits."""

    def test_one_point_per_fifty_lines(self, analyzer):
        source = "\n".join(["x"] * 250)
        assert analyzer.quick_analyze(source, "ts").cyclomatic_complexity == 5

    def test_floor_of_one(self, analyzer):
        assert analyzer.quick_analyze("x", "ts").cyclomatic_complexity == 1

    def test_cap_of_twenty(self, analyzer):
        source = "\n".join(["x"] * 5000)
        metrics = analyzer.quick_analyze(source, "js")
        assert metrics.cyclomatic_complexity == 20
        assert metrics.maintainability_index == pytest.approx(80.0)

    def test_derived_figures(self, analyzer):
        source = "\n".join(["x"] * 100)
        metrics = analyzer.quick_analyze(source, "py")
        assert metrics.cyclomatic_complexity == 2
        assert metrics.halstead.difficulty == pytest.approx(0.4)
        assert metrics.halstead.volume == pytest.approx(100.0)
        assert metrics.halstead.effort == pytest.approx(200.0)

    def test_ignores_content(self, analyzer):
        """Only the line count matters."""
        busy = "\n".join(["if (a && b || c) {}"] * 60)
        plain = "\n".join(["x"] * 60)
        assert analyzer.quick_analyze(busy, "ts") == analyzer.quick_analyze(plain, "ts")
