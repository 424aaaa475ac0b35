"""Line-pattern complexity heuristics.

Used for languages without a syntax tree (pattern-based dialects), as the
generic fallback for unknown languages or failed tree walks, and for the
quick heuristic that bounds latency on large files being edited.
"""

from __future__ import annotations

import math

from .languages import GENERIC_DIALECT, PatternDialect
from .models import ComplexityMetrics, HalsteadMetrics
from .scoring import clamp, count_lines

QUICK_LINES_PER_POINT = 50
QUICK_COMPLEXITY_CAP = 20


def _scan_complexity(source: str, dialect: PatternDialect) -> int:
    """1 + the complexity of every non-blank, non-comment line."""
    complexity = 1
    for line in source.split("\n"):
        stripped = line.strip()
        if dialect.is_skipped(stripped):
            continue
        complexity += dialect.line_complexity(stripped)

    if dialect.complexity_cap is not None:
        complexity = min(complexity, dialect.complexity_cap)
    return complexity


def pattern_metrics(source: str, dialect: PatternDialect) -> ComplexityMetrics:
    """Keyword/operator heuristics for a known scripting dialect.

    Halstead figures are estimates derived from line count and complexity,
    and maintainability uses a linear penalty.
    """
    line_count = count_lines(source)
    complexity = _scan_complexity(source, dialect)

    volume = line_count * math.log2(complexity + 1)
    difficulty = complexity / 2

    return ComplexityMetrics(
        cyclomatic_complexity=complexity,
        maintainability_index=clamp(0.0, 100.0, 100 - 0.2 * complexity - 0.1 * line_count),
        halstead=HalsteadMetrics(
            difficulty=difficulty,
            volume=volume,
            effort=difficulty * volume,
        ),
    )


def fallback_metrics(source: str) -> ComplexityMetrics:
    """Language-agnostic heuristics, capped for safety on unknown input."""
    line_count = count_lines(source)
    complexity = _scan_complexity(source, GENERIC_DIALECT)

    return ComplexityMetrics(
        cyclomatic_complexity=complexity,
        maintainability_index=clamp(0.0, 100.0, 100 - 0.25 * complexity - 0.05 * line_count),
        halstead=HalsteadMetrics(
            difficulty=complexity / 10,
            volume=float(line_count),
            effort=float(complexity * line_count),
        ),
    )


def quick_metrics(source: str) -> ComplexityMetrics:
    """O(lines) estimate: one complexity point per 50 lines, between 1 and 20."""
    line_count = count_lines(source)
    complexity = int(clamp(1, QUICK_COMPLEXITY_CAP, line_count // QUICK_LINES_PER_POINT))

    return ComplexityMetrics(
        cyclomatic_complexity=complexity,
        maintainability_index=clamp(0.0, 100.0, 100.0 - complexity),
        halstead=HalsteadMetrics(
            difficulty=complexity / 5,
            volume=float(line_count),
            effort=float(complexity * line_count),
        ),
    )
