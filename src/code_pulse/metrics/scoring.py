"""Small numeric helpers shared by the metric strategies."""


def clamp(low: float, high: float, value: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def count_lines(source: str) -> int:
    """Line count used by the metric formulas (empty text counts as one line)."""
    return len(source.split("\n"))
