"""Complexity metrics: models, language dispatch and analysis strategies."""

from .analyzer import ComplexityAnalyzer
from .languages import LanguageFamily, LanguageStrategy, PatternDialect, resolve_language
from .models import ComplexityMetrics, FileRecord, HalsteadMetrics
from .recommendations import (
    AlertSeverity,
    ComplexityAlert,
    check_complexity_alert,
    classify_complexity,
    get_recommendations,
)

__all__ = [
    "ComplexityAnalyzer",
    "ComplexityMetrics",
    "HalsteadMetrics",
    "FileRecord",
    "LanguageFamily",
    "LanguageStrategy",
    "PatternDialect",
    "resolve_language",
    "get_recommendations",
    "check_complexity_alert",
    "classify_complexity",
    "ComplexityAlert",
    "AlertSeverity",
]
