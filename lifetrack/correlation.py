"""
Habit -> final score correlation.

For each active good habit, pairs the day's habit value with the day's
final score and reports Pearson's r. Thin or degenerate samples are
reported through flags rather than a NaN.
"""

import logging
from typing import Iterable, List, Tuple

import numpy as np

from lifetrack.config import CorrelationParams
from lifetrack.inputs import as_number, resolve_habit_value
from lifetrack.models import (
    CorrelationFlag,
    CorrelationResult,
    DailyLogRow,
    HabitDefinition,
    HabitPool,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pearson primitive
# ---------------------------------------------------------------------------

def _pearson_r(x: np.ndarray, y: np.ndarray) -> float:
    """
    r = (n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))

    Returns 0.0 when the denominator vanishes or the result is not finite.
    """
    n = len(x)
    sum_x = x.sum()
    sum_y = y.sum()

    numerator = n * np.dot(x, y) - sum_x * sum_y
    denominator = np.sqrt(
        (n * np.dot(x, x) - sum_x ** 2) * (n * np.dot(y, y) - sum_y ** 2)
    )

    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    r = numerator / denominator
    if not np.isfinite(r):
        return 0.0

    # Rounding can push |r| a hair past 1
    return float(np.clip(r, -1.0, 1.0))


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------

def is_correlation_candidate(habit: HabitDefinition) -> bool:
    return (
        bool(habit.is_active)
        and habit.retired_at is None
        and habit.pool == HabitPool.GOOD
    )


def paired_samples(
    rows: Iterable[DailyLogRow],
    habit: HabitDefinition,
) -> Tuple[np.ndarray, np.ndarray]:
    """(habit values, final scores) for the days where both resolve."""
    xs: List[float] = []
    ys: List[float] = []

    for row in rows:
        x = resolve_habit_value(row, habit)
        y = as_number(row.final_score)
        if x is None or y is None:
            continue
        xs.append(x)
        ys.append(y)

    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def correlate_habit(
    rows: Iterable[DailyLogRow],
    habit: HabitDefinition,
    params: CorrelationParams | None = None,
) -> CorrelationResult:
    """Correlation result for a single habit."""
    if params is None:
        params = CorrelationParams()

    x, y = paired_samples(rows, habit)
    n = len(x)

    if n < params.min_data_points:
        logger.debug("Habit %s: %d samples, below %d", habit.name, n, params.min_data_points)
        return CorrelationResult(habit.name, None, n, CorrelationFlag.INSUFFICIENT_DATA)

    if np.all(x == x[0]):
        logger.debug("Habit %s: constant values across %d days", habit.name, n)
        return CorrelationResult(habit.name, 0.0, n, CorrelationFlag.ZERO_VARIANCE)

    return CorrelationResult(habit.name, _pearson_r(x, y), n)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _sort_key(result: CorrelationResult) -> float:
    return -1.0 if result.r is None else abs(result.r)


def compute_correlations(
    rows: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
    params: CorrelationParams | None = None,
) -> List[CorrelationResult]:
    """
    Pearson's r between each active, non-retired good habit and final score.

    Sorted by |r| descending; habits without an r (insufficient data) last.
    """
    rows = list(rows)
    candidates = [h for h in habits if is_correlation_candidate(h)]

    if not rows or not candidates:
        return []

    results = [correlate_habit(rows, habit, params) for habit in candidates]
    return sorted(results, key=_sort_key, reverse=True)
