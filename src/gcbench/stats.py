"""Statistical helpers for benchmark aggregation.

Provides the sample standard deviation used as the per-benchmark error
estimate, quadrature (root-sum-of-squares) propagation of independent
errors for the totals row, and descriptive summary statistics for
exports.  Pure Python, no external dependencies.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Iterable, Sequence


# ---------------------------------------------------------------------------
# Error estimates
# ---------------------------------------------------------------------------


def std_deviation(values: Sequence[float]) -> float:
    """Return the sample standard deviation of *values*.

    Uses the ``n - 1`` denominator.  Fewer than two values carry no
    spread information, so the result is 0.0 for them.
    """
    if len(values) < 2:
        return 0.0
    return statistics.stdev(values)


def quadrature(errors: Iterable[float]) -> float:
    """Combine independent errors as ``sqrt(sum(e**2))``."""
    return math.sqrt(math.fsum(e * e for e in errors))


# ---------------------------------------------------------------------------
# Descriptive statistics
# ---------------------------------------------------------------------------


@dataclass
class DescriptiveStats:
    """Summary statistics for a sample."""

    n: int
    mean: float
    median: float
    stdev: float
    min: float
    max: float
    cv: float  # coefficient of variation (stdev/mean)

    def to_dict(self) -> dict[str, float | int]:
        """Serialize to a dict with rounded values."""
        return {
            "n": self.n,
            "mean": round(self.mean, 6),
            "median": round(self.median, 6),
            "stdev": round(self.stdev, 6),
            "min": round(self.min, 6),
            "max": round(self.max, 6),
            "cv": round(self.cv, 6),
        }


def describe(values: Sequence[float]) -> DescriptiveStats:
    """Compute descriptive statistics for a sample.

    Args:
        values: A sequence of numeric values.

    Returns:
        DescriptiveStats with all fields populated. If n < 2,
        stdev and CV are 0.0.  An empty sample gives NaN everywhere.
    """
    if not values:
        nan = float("nan")
        return DescriptiveStats(n=0, mean=nan, median=nan, stdev=nan, min=nan, max=nan, cv=nan)

    sorted_v = sorted(values)
    n = len(sorted_v)
    mean = statistics.mean(sorted_v)
    stdev = std_deviation(sorted_v)
    if n >= 2:
        cv = stdev / mean if mean != 0 else float("inf")
    else:
        cv = 0.0

    return DescriptiveStats(
        n=n,
        mean=mean,
        median=statistics.median(sorted_v),
        stdev=stdev,
        min=sorted_v[0],
        max=sorted_v[-1],
        cv=cv,
    )
