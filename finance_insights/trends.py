"""Least squares trend fitting used by the spending forecast.

The trend fit guards its divisions explicitly so that degenerate input
(flat series, a single point) yields zeros instead of NaN or infinity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class TrendFit:
    slope: float
    intercept: float
    correlation: float


def linear_trend(values: Sequence[float]) -> TrendFit:
    """Fit an ordinary least squares line over x = 0..n-1.

    Returns the slope, the intercept and the Pearson correlation between the
    index and the values.  When either variance is zero the correlation is
    reported as 0; when the index has no variance the slope is 0 as well.

    Example:
        >>> linear_trend([100, 110, 120]).slope
        10.0
    """
    y = np.asarray(values, dtype=float)
    n = y.size
    if n == 0:
        return TrendFit(0.0, 0.0, 0.0)

    x = np.arange(n, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    sxx = float((dx * dx).sum())
    syy = float((dy * dy).sum())
    sxy = float((dx * dy).sum())

    slope = sxy / sxx if sxx > 0 else 0.0
    intercept = float(y.mean()) - slope * float(x.mean())
    correlation = sxy / float(np.sqrt(sxx * syy)) if sxx > 0 and syy > 0 else 0.0
    return TrendFit(slope=slope, intercept=intercept, correlation=correlation)
