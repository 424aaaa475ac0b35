"""Aggregate statistics over cached file records."""

from typing import Iterable, List, Union

import numpy as np

from ..metrics.models import FileRecord

OUTLIER_STD_DEVIATIONS = 2.0


def outlier_filtered_mean(
    values: Union[List[float], np.ndarray], max_deviations: float = OUTLIER_STD_DEVIATIONS
) -> float:
    """
    Mean after discarding values far from the unfiltered mean.

    Uses the population standard deviation. A value whose distance from the
    mean reaches ``max_deviations * std`` (within floating-point tolerance) is
    an outlier. When every value is discarded, the unfiltered mean is returned.

    Args:
        values: Sample values
        max_deviations: Cut-off in standard deviations

    Returns:
        Filtered mean, or 0.0 for an empty sample
    """
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        return 0.0

    mean = float(np.mean(data))
    std = float(np.std(data))
    limit = max_deviations * std

    deviations = np.abs(data - mean)
    outliers = (deviations > limit) | np.isclose(deviations, limit)
    kept = data[~outliers]

    if kept.size == 0:
        return mean
    return float(np.mean(kept))


def language_breakdown(records: Iterable[FileRecord]) -> dict[str, int]:
    """Count records per language tag."""
    breakdown: dict[str, int] = {}
    for record in records:
        breakdown[record.language] = breakdown.get(record.language, 0) + 1
    return breakdown


def average_complexity(records: Iterable[FileRecord]) -> float:
    """Outlier-filtered mean cyclomatic complexity of ``records``."""
    return outlier_filtered_mean([r.metrics.cyclomatic_complexity for r in records])
