"""Shared builders for the test suite: the seed catalog, rows and configs."""

import dataclasses
import datetime

from lifetrack.config import AppConfig, ScoringConfig
from lifetrack.models import (
    DailyLogRow,
    HabitCategory,
    HabitDefinition,
    HabitPool,
    HabitValue,
    InputType,
    PenaltyMode,
    ScoringInput,
    ViceValue,
)

CFG = ScoringConfig()

MEAL_QUALITY_OPTIONS = {"Poor": 0, "Okay": 1, "Good": 2, "Great": 3}
SOCIAL_OPTIONS = {"None": 0, "Brief/Text": 0.5, "Casual Hangout": 1, "Meaningful Connection": 2}


def _good(name, category, points, order, input_type=InputType.CHECKBOX, options=None):
    return HabitDefinition(
        name=name,
        pool=HabitPool.GOOD,
        category=category,
        input_type=input_type,
        points=points,
        options=options,
        sort_order=order,
        display_name=name.replace("_", " ").title(),
    )


def _vice(name, penalty, mode, order, input_type=InputType.CHECKBOX):
    return HabitDefinition(
        name=name,
        pool=HabitPool.VICE,
        input_type=input_type,
        penalty=penalty,
        penalty_mode=mode,
        sort_order=order,
        display_name=name.replace("_", " ").title(),
    )


def seed_habits():
    P, H, G = HabitCategory.PRODUCTIVITY, HabitCategory.HEALTH, HabitCategory.GROWTH
    return (
        _good("schoolwork", P, 3, 1),
        _good("personal_project", P, 3, 2),
        _good("classes", P, 2, 3),
        _good("job_search", P, 2, 4),
        _good("gym", H, 3, 1),
        _good("sleep_7_9h", H, 2, 2),
        _good("wake_8am", H, 1, 3),
        _good("supplements", H, 1, 4),
        _good("meal_quality", H, 3, 5, InputType.DROPDOWN, MEAL_QUALITY_OPTIONS),
        _good("stretching", H, 1, 6),
        _good("meditate", G, 1, 1),
        _good("read", G, 1, 2),
        _good("social", G, 2, 3, InputType.DROPDOWN, SOCIAL_OPTIONS),
    )


def seed_vices():
    return (
        _vice("porn", 0.25, PenaltyMode.PER_INSTANCE, 1, InputType.NUMBER),
        _vice("masturbate", 0.10, PenaltyMode.FLAT, 2),
        _vice("weed", 0.12, PenaltyMode.FLAT, 3),
        _vice("skip_class", 0.08, PenaltyMode.FLAT, 4),
        _vice("binged_content", 0.07, PenaltyMode.FLAT, 5),
        _vice("gaming_1h", 0.06, PenaltyMode.FLAT, 6),
        _vice("past_12am", 0.05, PenaltyMode.FLAT, 7),
        _vice("late_wake", 0.03, PenaltyMode.FLAT, 8),
        _vice("phone_use", 0.0, PenaltyMode.TIERED, 9, InputType.NUMBER),
    )


def seed_catalog():
    return seed_habits() + seed_vices()


def empty_values():
    """Raw values for a day where nothing was done."""
    values = {h.name: 0 for h in seed_catalog()}
    values["meal_quality"] = "Poor"
    values["social"] = "None"
    return values


def perfect_values():
    """Raw values for a day with every good habit at full credit."""
    values = empty_values()
    for habit in seed_habits():
        values[habit.name] = 1
    values["meal_quality"] = "Great"
    values["social"] = "Meaningful Connection"
    return values


def day(offset, start="2026-02-01"):
    return (datetime.date.fromisoformat(start) + datetime.timedelta(days=offset)).isoformat()


def make_row(date, values=None, **scores):
    return DailyLogRow(date=date, values=values if values is not None else {}, **scores)


def scored_row(date, base_score, streak, final_score, values=None, **scores):
    return make_row(
        date, values, base_score=base_score, streak=streak, final_score=final_score, **scores
    )


def score_row(row, output):
    """Copy of ``row`` carrying ``output``'s five scores."""
    return dataclasses.replace(
        row,
        positive_score=output.positive_score,
        vice_penalty=output.vice_penalty,
        base_score=output.base_score,
        streak=output.streak,
        final_score=output.final_score,
    )


def habit_value(points, value=None, category=HabitCategory.PRODUCTIVITY, name="h"):
    return HabitValue(name, points if value is None else value, points, category)


def flat_vice(penalty, triggered=True, name="v"):
    return ViceValue(name, triggered, penalty, PenaltyMode.FLAT)


def scoring_input(habits=(), vices=(), phone_minutes=0.0, previous_streak=-1, config=CFG):
    return ScoringInput(tuple(habits), tuple(vices), phone_minutes, previous_streak, config)


def app_config(**overrides):
    return dataclasses.replace(AppConfig(), **overrides)


def scoring_config(**overrides):
    return dataclasses.replace(CFG, **overrides)
