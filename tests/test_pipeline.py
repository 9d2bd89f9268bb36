"""Save / edit / analytics orchestration over the seed catalog."""

import dataclasses

from factories import (
    CFG,
    day,
    empty_values,
    make_row,
    perfect_values,
    score_row,
    scoring_config,
    seed_catalog,
)
from lifetrack.pipeline import (
    analyze_correlations,
    analyze_history,
    apply_updates,
    cascade_edit,
    score_day,
)

CATALOG = seed_catalog()


def save(entries, config=CFG):
    """Score and store (date, values) pairs in order."""
    rows = []
    for date, values in entries:
        row = make_row(date, values)
        rows.append(score_row(row, score_day(row, rows, CATALOG, config)))
    return rows


def with_values(rows, date, values):
    return [dataclasses.replace(r, values=values) if r.date == date else r for r in rows]


# ---------------------------------------------------------------------------
# score_day
# ---------------------------------------------------------------------------

def test_first_day_streak_zero():
    out = score_day(make_row(day(0), perfect_values()), [], CATALOG, CFG)
    assert out.streak == 0
    assert out.final_score == 1.0


def test_consecutive_days_extend_streak():
    rows = save([(day(i), perfect_values()) for i in range(3)])
    assert [r.streak for r in rows] == [0, 1, 2]


def test_gap_restarts_streak_at_one():
    rows = save([(day(0), perfect_values()), (day(1), perfect_values())])
    out = score_day(make_row(day(3), perfect_values()), rows, CATALOG, CFG)
    assert out.streak == 1


def test_resave_ignores_stored_row_for_same_day():
    rows = save([(day(0), perfect_values()), (day(1), perfect_values())])
    rows[1] = dataclasses.replace(rows[1], streak=9)
    out = score_day(make_row(day(1), perfect_values()), rows, CATALOG, CFG)
    assert out.streak == 1


# ---------------------------------------------------------------------------
# cascade_edit / apply_updates
# ---------------------------------------------------------------------------

def test_zeroing_middle_day_restarts_chain():
    rows = save([(day(i), perfect_values()) for i in range(3)])
    edited = with_values(rows, day(1), empty_values())

    updates = cascade_edit(day(1), edited, CATALOG, CFG)

    assert [u.date for u in updates] == [day(1), day(2)]
    assert updates[0].streak == 0
    assert updates[0].final_score == 0.0
    assert updates[1].streak == 1

    applied = apply_updates(edited, updates)
    assert [r.streak for r in applied] == [0, 0, 1]
    assert applied[1].base_score == 0.0
    # Untouched scores survive on propagated days
    assert applied[2].positive_score == 1.0
    # Inputs unchanged
    assert [r.streak for r in edited] == [0, 1, 2]


def test_edit_without_change_is_noop():
    rows = save([(day(i), perfect_values()) for i in range(3)])
    assert cascade_edit(day(1), rows, CATALOG, CFG) == []
    assert apply_updates(rows, []) == rows


def test_apply_updates_sorts_rows():
    rows = save([(day(i), perfect_values()) for i in range(3)])
    applied = apply_updates(list(reversed(rows)), [])
    assert [r.date for r in applied] == [day(0), day(1), day(2)]


def test_edit_with_vices_lowers_final_score():
    rows = save([(day(i), perfect_values()) for i in range(3)])
    values = {**perfect_values(), "weed": 1, "phone_use": 200}
    updates = cascade_edit(day(2), with_values(rows, day(2), values), CATALOG, CFG)

    assert len(updates) == 1
    assert abs(updates[0].vice_penalty - 0.19) < 1e-9
    assert abs(updates[0].base_score - 0.81) < 1e-9
    assert updates[0].streak == 2


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

def alternating_history(n):
    return [
        make_row(day(i), {"schoolwork": i % 2}, final_score=0.9 if i % 2 else 0.3)
        for i in range(n)
    ]


def test_correlations_use_configured_window():
    rows = alternating_history(60)
    results = analyze_correlations(rows, CATALOG, scoring_config(correlation_window_days=30))
    assert results[0].habit == "schoolwork"
    assert results[0].n == 30
    assert abs(results[0].r - 1.0) < 1e-9


def test_correlation_window_end_date_and_all_history():
    rows = alternating_history(60)
    ending = analyze_correlations(rows, CATALOG, scoring_config(correlation_window_days=30), day(9))
    assert ending[0].n == 10

    everything = analyze_correlations(rows, CATALOG, scoring_config(correlation_window_days=0))
    assert everything[0].n == 60


def test_analyze_history_bundle():
    rows = save([(day(i), perfect_values() if i % 3 else empty_values()) for i in range(14)])
    result = analyze_history(rows, CATALOG, CFG)

    assert set(result) == {
        "score_trend", "day_of_week", "habit_completion", "vice_frequency", "correlations",
    }
    assert len(result["score_trend"]) == 14
    assert result["score_trend"][6]["moving_avg"] is not None
    assert len(result["habit_completion"]) == 13
    assert len(result["vice_frequency"]) == 9
    assert len(result["correlations"]) == 13
