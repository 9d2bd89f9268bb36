"""
Pipeline orchestration: the pure half of the save, edit and analytics flows.

Storage is the caller's business. These helpers take rows and catalog
already loaded, wire the default scoring-input builder into the engines,
and hand back results to persist or render:

    score_day            single-day save (previous streak + five scores)
    cascade_edit         historical edit -> ordered CascadeUpdate list
    apply_updates        preview of the rows after the updates are written
    analyze_correlations windowed habit/score correlation
    analyze_history      all analytics signals in one pass
"""

import dataclasses
import logging
from functools import partial
from typing import Any, Dict, Iterable, List

from lifetrack.cascade import compute_cascade, determine_previous_streak, to_day
from lifetrack.config import AnalyticsParams, CorrelationParams, ScoringConfig
from lifetrack.correlation import compute_correlations
from lifetrack.inputs import build_scoring_input
from lifetrack.models import (
    CascadeUpdate,
    CorrelationResult,
    DailyLogRow,
    HabitDefinition,
    ScoringOutput,
)
from lifetrack.scoring import compute_scores
from lifetrack.signals import (
    compute_day_of_week_averages,
    compute_habit_completion_rates,
    compute_score_trend,
    compute_vice_frequency,
    select_window,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Save / edit
# ---------------------------------------------------------------------------

def score_day(
    row: DailyLogRow,
    history: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
    config: ScoringConfig,
) -> ScoringOutput:
    """
    Score a day being saved.

    ``history`` is the stored log; any existing row for the same date is
    ignored. The previous streak follows the day-1 and gap conventions.
    """
    day = to_day(row.date)
    others = [r for r in history if to_day(r.date) != day]
    previous_streak = determine_previous_streak(day, others)
    return compute_scores(build_scoring_input(row, previous_streak, tuple(habits), config))


def cascade_edit(
    edited_date: Any,
    rows: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
    config: ScoringConfig,
) -> List[CascadeUpdate]:
    """Run the cascade with the catalog-aware scoring-input builder."""
    builder = partial(build_scoring_input, habits=tuple(habits), config=config)
    return compute_cascade(edited_date, rows, config, builder)


def apply_updates(
    rows: Iterable[DailyLogRow],
    updates: Iterable[CascadeUpdate],
) -> List[DailyLogRow]:
    """
    Return date-sorted copies of ``rows`` with ``updates`` applied.

    Scores an update leaves as ``None`` keep their stored value. The input
    rows are not modified.
    """
    by_day = {to_day(u.date): u for u in updates}
    result = []

    for row in sorted(rows, key=lambda r: to_day(r.date)):
        update = by_day.get(to_day(row.date))
        if update is None:
            result.append(row)
            continue

        changes = {"streak": update.streak, "final_score": update.final_score}
        for name in ("positive_score", "vice_penalty", "base_score"):
            value = getattr(update, name)
            if value is not None:
                changes[name] = value
        result.append(dataclasses.replace(row, **changes))

    return result


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

def analyze_correlations(
    rows: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
    config: ScoringConfig,
    end_date: Any = None,
    params: CorrelationParams | None = None,
) -> List[CorrelationResult]:
    """Correlate habits with final score over the configured history window."""
    window = select_window(rows, config.correlation_window_days, end_date)
    logger.debug(
        "Correlating over %d rows (window=%d days)", len(window), config.correlation_window_days
    )
    return compute_correlations(window, habits, params)


def analyze_history(
    rows: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
    config: ScoringConfig,
    end_date: Any = None,
    params: AnalyticsParams | None = None,
) -> Dict:
    """
    All analytics signals for the dashboard.

    Stateless. No storage access.
    """
    rows = list(rows)
    habits = tuple(habits)

    # Stage 1: Score signals
    trend = compute_score_trend(rows, params)
    weekdays = compute_day_of_week_averages(rows)

    # Stage 2: Habit / vice frequency
    completion = compute_habit_completion_rates(rows, habits)
    vices = compute_vice_frequency(rows, habits)

    # Stage 3: Correlation over the configured window
    correlations = analyze_correlations(rows, habits, config, end_date)

    logger.debug("Analyzed %d rows across %d habits", len(rows), len(habits))

    return {
        "score_trend": trend,
        "day_of_week": weekdays,
        "habit_completion": completion,
        "vice_frequency": vices,
        "correlations": correlations,
    }
