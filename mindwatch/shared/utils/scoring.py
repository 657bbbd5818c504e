"""Scoring and bucketing helpers shared by the text and face scorers."""
import math
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's built-in round() uses banker's rounding (round(4.5) == 4);
    the stress scores are calibrated against ordinary rounding.

    Example:
        >>> round_half_up(4.5)
        5
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    """Constrain value to the closed interval [low, high]."""
    return max(low, min(high, value))


def bucket(value: float, bands: Sequence[Tuple[float, T]]) -> T:
    """Map value to the first band whose inclusive upper bound covers it.

    Args:
        value: Value to classify
        bands: (upper_bound, label) pairs in ascending bound order

    Returns:
        Label of the matching band, or the last label if value exceeds
        every bound
    """
    for upper_bound, label in bands:
        if value <= upper_bound:
            return label
    return bands[-1][1]
