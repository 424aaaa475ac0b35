"""Code quality recommendations and complexity alerts.

Both functions here are pure: same input, same output, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from .languages import canonical_language
from .models import ComplexityMetrics

HIGH_COMPLEXITY = 15
MODERATE_COMPLEXITY = 10
LOW_MAINTAINABILITY = 40
MODERATE_MAINTAINABILITY = 60
HIGH_DIFFICULTY = 30

ALL_CLEAR = "Code quality metrics are within recommended ranges."

DEFAULT_ALERT_THRESHOLD = 10
ERROR_MULTIPLIER = 1.5


def get_recommendations(metrics: ComplexityMetrics) -> list[str]:
    """Map metrics to improvement suggestions, most critical first.

    Returns a single positive message when no threshold is crossed.
    """
    recommendations: list[str] = []

    if metrics.cyclomatic_complexity > HIGH_COMPLEXITY:
        recommendations.append("High cyclomatic complexity. Refactor into smaller functions.")
    elif metrics.cyclomatic_complexity > MODERATE_COMPLEXITY:
        recommendations.append("Moderate complexity. Simplify nested conditions.")

    if metrics.maintainability_index < LOW_MAINTAINABILITY:
        recommendations.append("Low maintainability. Break into smaller modules.")
    elif metrics.maintainability_index < MODERATE_MAINTAINABILITY:
        recommendations.append("Moderate maintainability. Improve documentation.")

    if metrics.halstead.difficulty > HIGH_DIFFICULTY:
        recommendations.append("High cognitive complexity. Simplify logic.")

    return recommendations or [ALL_CLEAR]


class AlertSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ComplexityAlert:
    """A file whose complexity exceeds its language threshold."""

    identity: str
    language: str
    complexity: int
    threshold: int
    severity: AlertSeverity

    @property
    def message(self) -> str:
        return f"High code complexity detected ({self.complexity}). Consider refactoring."


def resolve_threshold(
    language: str,
    thresholds: Optional[Mapping[str, int]] = None,
    default_threshold: int = DEFAULT_ALERT_THRESHOLD,
) -> int:
    """Alert threshold for a language tag; tags are matched by canonical name."""
    return (thresholds or {}).get(canonical_language(language), default_threshold)


def classify_complexity(
    identity: str, complexity: int, language: str, threshold: int
) -> Optional[ComplexityAlert]:
    """Return an alert when complexity exceeds an already-resolved threshold.

    Severity is ERROR above 1.5x the threshold, WARNING above the threshold.
    """
    if complexity <= threshold:
        return None

    severity = (
        AlertSeverity.ERROR
        if complexity > threshold * ERROR_MULTIPLIER
        else AlertSeverity.WARNING
    )
    return ComplexityAlert(
        identity=identity,
        language=language,
        complexity=complexity,
        threshold=threshold,
        severity=severity,
    )


def check_complexity_alert(
    identity: str,
    complexity: int,
    language: str,
    thresholds: Optional[Mapping[str, int]] = None,
    default_threshold: int = DEFAULT_ALERT_THRESHOLD,
) -> Optional[ComplexityAlert]:
    """Return an alert when complexity exceeds the language threshold."""
    threshold = resolve_threshold(language, thresholds, default_threshold)
    return classify_complexity(identity, complexity, language, threshold)
