"""Shared math utilities for MoodSense.

Small numeric helpers used by the context window, the pattern table and
the statistics module. **No third-party dependencies.**
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

__all__ = ["jaccard_similarity", "linear_slope", "mean", "population_stddev"]


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_stddev(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    mu = mean(values)
    return math.sqrt(sum((v - mu) ** 2 for v in values) / len(values))


def linear_slope(values: Sequence[float]) -> float:
    """Least-squares slope of *values* against their index.

    Returns 0.0 when fewer than two points are given.
    """
    n = len(values)
    if n < 2:
        return 0.0
    xs = range(n)
    sum_x = sum(xs)
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in zip(xs, values))
    sum_x2 = sum(x * x for x in xs)
    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def jaccard_similarity(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard index of two token collections; 0.0 when both are empty."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)
