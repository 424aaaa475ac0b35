"""Metric value types produced by the complexity analyzer.

ComplexityMetrics is immutable and produced fresh per analysis call.
FileRecord pairs those metrics with the file they describe; a re-analysis
supersedes the whole record rather than merging into it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HalsteadMetrics:
    """Halstead size/difficulty figures.

    Attributes:
        difficulty: (n1 / 2) * (N2 / n2) for structured analysis, an estimate otherwise
        volume: (N1 + N2) * log2(n1 + n2) for structured analysis, an estimate otherwise
        effort: difficulty * volume
    """

    difficulty: float
    volume: float
    effort: float

    def to_dict(self) -> dict[str, float]:
        return {"difficulty": self.difficulty, "volume": self.volume, "effort": self.effort}


@dataclass(frozen=True)
class ComplexityMetrics:
    """Structural complexity of one source text.

    Attributes:
        cyclomatic_complexity: Independent paths, always >= 1
        maintainability_index: Composite sustainability score in [0, 100]
        halstead: Halstead difficulty / volume / effort
    """

    cyclomatic_complexity: int
    maintainability_index: float
    halstead: HalsteadMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "maintainability_index": self.maintainability_index,
            "halstead": self.halstead.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ComplexityMetrics:
        halstead = data.get("halstead", {})
        return cls(
            cyclomatic_complexity=int(data["cyclomatic_complexity"]),
            maintainability_index=float(data["maintainability_index"]),
            halstead=HalsteadMetrics(
                difficulty=float(halstead.get("difficulty", 0.0)),
                volume=float(halstead.get("volume", 0.0)),
                effort=float(halstead.get("effort", 0.0)),
            ),
        )


@dataclass(frozen=True)
class FileRecord:
    """Latest computed metadata for one file identity.

    Attributes:
        identity: Absolute path or stable file key
        language: Language tag the file was analyzed as (its extension)
        line_count: Number of lines in the analyzed content
        metrics: Complexity metrics of that content
        observed_at: Clock timestamp (seconds) of the analysis
    """

    identity: str
    language: str
    line_count: int
    metrics: ComplexityMetrics
    observed_at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity": self.identity,
            "language": self.language,
            "line_count": self.line_count,
            "metrics": self.metrics.to_dict(),
            "observed_at": self.observed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileRecord:
        return cls(
            identity=str(data["identity"]),
            language=str(data.get("language", "")),
            line_count=int(data.get("line_count", 0)),
            metrics=ComplexityMetrics.from_dict(data["metrics"]),
            observed_at=float(data.get("observed_at", 0.0)),
        )
