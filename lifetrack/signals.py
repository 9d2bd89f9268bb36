"""
Analytics signals over the daily log: trend, weekday pattern, habit and
vice frequency, and the history window the correlation engine sees.

All functions are pure transforms over rows. No I/O, no side effects.
"""

import datetime
from typing import Any, Dict, Iterable, List

import pandas as pd

from lifetrack.cascade import to_day
from lifetrack.config import AnalyticsParams
from lifetrack.models import DailyLogRow, HabitCategory, HabitDefinition, HabitPool, InputType


SCORE_COLUMNS = (
    "positive_score",
    "vice_penalty",
    "base_score",
    "streak",
    "final_score",
)

# Dropdown labels that mean "not done"
EMPTY_DROPDOWN_LABELS = ("", "None")


# ---------------------------------------------------------------------------
# Frame construction and windowing
# ---------------------------------------------------------------------------

def rows_to_frame(rows: Iterable[DailyLogRow]) -> pd.DataFrame:
    """Date-sorted DataFrame of the five scores, one row per day."""
    records = [
        {"date": pd.Timestamp(to_day(row.date)), **{col: getattr(row, col) for col in SCORE_COLUMNS}}
        for row in rows
    ]
    df = pd.DataFrame(records, columns=["date", *SCORE_COLUMNS])
    for col in SCORE_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df.sort_values("date", inplace=True)
    df.reset_index(drop=True, inplace=True)
    return df


def select_window(
    rows: Iterable[DailyLogRow],
    window_days: int,
    end_date: Any = None,
) -> List[DailyLogRow]:
    """
    Rows dated within the last ``window_days`` calendar days, inclusive of
    ``end_date`` (default: the latest row). A window of 0 keeps every row.
    """
    keyed = sorted(((to_day(row.date), row) for row in rows), key=lambda pair: pair[0])
    if not keyed:
        return []

    end = to_day(end_date) if end_date is not None else keyed[-1][0]
    if window_days == 0:
        return [row for day, row in keyed if day <= end]

    start = end - datetime.timedelta(days=window_days - 1)
    return [row for day, row in keyed if start <= day <= end]


# ---------------------------------------------------------------------------
# Score signals
# ---------------------------------------------------------------------------

def compute_score_trend(
    rows: Iterable[DailyLogRow],
    params: AnalyticsParams | None = None,
) -> List[Dict]:
    """
    Final score per scored day with a trailing moving average.

    The average is ``None`` until a full window of scored days exists.
    """
    if params is None:
        params = AnalyticsParams()
    window = params.moving_average_window

    df = rows_to_frame(rows)
    scored = df[df["final_score"].notna()].reset_index(drop=True)
    moving = scored["final_score"].rolling(window, min_periods=window).mean()

    return [
        {
            "date": scored.at[i, "date"].date().isoformat(),
            "final_score": float(scored.at[i, "final_score"]),
            "moving_avg": None if pd.isna(moving.iat[i]) else float(moving.iat[i]),
        }
        for i in range(len(scored))
    ]


def compute_day_of_week_averages(rows: Iterable[DailyLogRow]) -> List[Dict]:
    """Average final score per weekday (Monday = 0), weekdays with data only."""
    df = rows_to_frame(rows)
    scored = df[df["final_score"].notna()].copy()
    if scored.empty:
        return []

    scored["day"] = scored["date"].dt.dayofweek
    grouped = scored.groupby("day")["final_score"].agg(["mean", "count"])

    return [
        {"day": int(day), "avg_score": float(stats["mean"]), "count": int(stats["count"])}
        for day, stats in grouped.iterrows()
    ]


# ---------------------------------------------------------------------------
# Habit / vice frequency
# ---------------------------------------------------------------------------

def _raw_series(rows: List[DailyLogRow], name: str) -> pd.Series:
    return pd.Series([row.values.get(name) for row in rows], dtype=object)


def _days_done(rows: List[DailyLogRow], habit: HabitDefinition) -> int:
    raw = _raw_series(rows, habit.name)
    if habit.input_type == InputType.DROPDOWN:
        done = raw.map(lambda v: isinstance(v, str) and v not in EMPTY_DROPDOWN_LABELS)
        return int(done.sum())
    return int(pd.to_numeric(raw, errors="coerce").gt(0).sum())


def _category_name(category: Any) -> str | None:
    return None if category is None else HabitCategory(category).value


def _active(habits: Iterable[HabitDefinition], pool: HabitPool) -> List[HabitDefinition]:
    selected = [
        h for h in habits
        if h.pool == pool and h.is_active and h.retired_at is None
    ]
    return sorted(selected, key=lambda h: h.sort_order)


def compute_habit_completion_rates(
    rows: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
) -> List[Dict]:
    """Share of logged days on which each active good habit was done."""
    rows = list(rows)
    total_days = len(rows)
    if total_days == 0:
        return []

    results = []
    for habit in _active(habits, HabitPool.GOOD):
        done = _days_done(rows, habit)
        results.append({
            "habit": habit.name,
            "display_name": habit.label,
            "category": _category_name(habit.category),
            "rate": done / total_days,
            "days_completed": done,
            "total_days": total_days,
        })
    return results


def compute_vice_frequency(
    rows: Iterable[DailyLogRow],
    habits: Iterable[HabitDefinition],
) -> List[Dict]:
    """Number of logged days on which each active vice occurred."""
    rows = list(rows)
    total_days = len(rows)
    if total_days == 0:
        return []

    return [
        {
            "habit": vice.name,
            "display_name": vice.label,
            "frequency": int(pd.to_numeric(_raw_series(rows, vice.name), errors="coerce").gt(0).sum()),
            "total_days": total_days,
        }
        for vice in _active(habits, HabitPool.VICE)
    ]
