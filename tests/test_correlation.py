"""Correlation engine: flags, Pearson r, filtering and ordering."""

import dataclasses

import numpy as np

from factories import MEAL_QUALITY_OPTIONS, day, make_row, seed_habits, seed_vices
from lifetrack.config import CorrelationParams
from lifetrack.correlation import _pearson_r, compute_correlations, correlate_habit
from lifetrack.models import CorrelationFlag, HabitCategory, HabitDefinition, HabitPool, InputType

SCHOOLWORK = seed_habits()[0]
GYM = seed_habits()[4]
MEAL_QUALITY = seed_habits()[8]


def rows_for(values_by_day, finals):
    return [
        make_row(day(i), values, final_score=final)
        for i, (values, final) in enumerate(zip(values_by_day, finals))
    ]


def alternating(n, high=0.9, low=0.3, habit="schoolwork"):
    values = [{habit: i % 2} for i in range(n)]
    finals = [high if i % 2 else low for i in range(n)]
    return rows_for(values, finals)


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

def test_fewer_than_seven_points_is_insufficient():
    result = correlate_habit(alternating(6), SCHOOLWORK)
    assert result.r is None
    assert result.n == 6
    assert result.flag == CorrelationFlag.INSUFFICIENT_DATA


def test_seven_points_is_enough():
    result = correlate_habit(alternating(7), SCHOOLWORK)
    assert result.flag is None
    assert result.n == 7


def test_custom_min_data_points():
    result = correlate_habit(alternating(8), SCHOOLWORK, CorrelationParams(min_data_points=10))
    assert result.flag == CorrelationFlag.INSUFFICIENT_DATA


def test_constant_values_are_zero_variance():
    rows = rows_for([{"schoolwork": 1}] * 10, [0.1 * i for i in range(10)])
    result = correlate_habit(rows, SCHOOLWORK)
    assert result.r == 0.0
    assert result.flag == CorrelationFlag.ZERO_VARIANCE
    assert result.n == 10


# ---------------------------------------------------------------------------
# Pearson r
# ---------------------------------------------------------------------------

def test_perfect_positive_and_negative():
    positive = correlate_habit(alternating(10), SCHOOLWORK)
    assert abs(positive.r - 1.0) < 1e-9

    negative = correlate_habit(alternating(10, high=0.2, low=0.8), SCHOOLWORK)
    assert abs(negative.r + 1.0) < 1e-9


def test_matches_numpy_corrcoef():
    rng = np.random.default_rng(7)
    x = rng.integers(0, 2, 30).astype(float)
    y = rng.random(30)
    expected = np.corrcoef(x, y)[0, 1]
    assert abs(_pearson_r(x, y) - expected) < 1e-9


def test_r_always_in_range():
    rng = np.random.default_rng(11)
    for _ in range(20):
        x = rng.random(12)
        y = rng.random(12)
        assert -1.0 <= _pearson_r(x, y) <= 1.0


def test_constant_final_score_gives_zero():
    rows = rows_for([{"schoolwork": i % 2} for i in range(10)], [0.5] * 10)
    result = correlate_habit(rows, SCHOOLWORK)
    assert result.r == 0.0
    assert result.flag is None


# ---------------------------------------------------------------------------
# Pairing
# ---------------------------------------------------------------------------

def test_unscored_and_missing_days_skipped():
    rows = alternating(8)
    rows.append(make_row(day(8), {"schoolwork": 1}))
    rows.append(make_row(day(9), {}, final_score=0.5))
    assert correlate_habit(rows, SCHOOLWORK).n == 8


def test_dropdown_labels_resolve_to_weights():
    labels = list(MEAL_QUALITY_OPTIONS)
    values = [{"meal_quality": labels[i % 4]} for i in range(12)]
    finals = [0.2 + 0.2 * (i % 4) for i in range(12)]
    result = correlate_habit(rows_for(values, finals), MEAL_QUALITY)
    assert result.n == 12
    assert abs(result.r - 1.0) < 1e-9


def test_unknown_dropdown_label_skipped():
    values = [{"meal_quality": "Good" if i % 2 else "Poor"} for i in range(8)]
    values.append({"meal_quality": "Legendary"})
    finals = [0.8 if i % 2 else 0.3 for i in range(8)] + [0.5]
    assert correlate_habit(rows_for(values, finals), MEAL_QUALITY).n == 8


# ---------------------------------------------------------------------------
# compute_correlations
# ---------------------------------------------------------------------------

def test_empty_inputs_return_nothing():
    assert compute_correlations([], seed_habits()) == []
    assert compute_correlations(alternating(10), seed_vices()) == []


def test_only_active_good_habits_considered():
    retired = dataclasses.replace(GYM, name="old_gym", retired_at="2026-02-01T00:00:00Z")
    inactive = dataclasses.replace(GYM, name="paused", is_active=False)
    habits = [SCHOOLWORK, retired, inactive] + list(seed_vices())
    results = compute_correlations(alternating(10), habits)
    assert [r.habit for r in results] == ["schoolwork"]


def test_sorted_by_abs_r_with_nulls_last():
    noisy = HabitDefinition(
        name="read", pool=HabitPool.GOOD, category=HabitCategory.GROWTH,
        input_type=InputType.CHECKBOX, points=1,
    )
    sparse = dataclasses.replace(noisy, name="meditate")
    negative = dataclasses.replace(noisy, name="gym", category=HabitCategory.HEALTH)

    finals = [0.3, 0.9] * 5
    values = []
    for i in range(10):
        values.append({
            "schoolwork": i % 2,
            "gym": 1 - i % 2,
            "read": 1 if i in (1, 2, 3, 5) else 0,
            **({"meditate": 1} if i < 3 else {}),
        })
    rows = rows_for(values, finals)

    results = compute_correlations(rows, [sparse, noisy, SCHOOLWORK, negative])

    assert {r.habit for r in results[:2]} == {"schoolwork", "gym"}
    assert all(abs(abs(r.r) - 1.0) < 1e-9 for r in results[:2])
    assert results[2].habit == "read"
    assert 0 < abs(results[2].r) < 1
    assert results[-1].habit == "meditate"
    assert results[-1].flag == CorrelationFlag.INSUFFICIENT_DATA
