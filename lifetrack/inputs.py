"""
Row -> ScoringInput resolution against the habit catalog.

This is the default strategy injected into the cascade engine: it knows how
checkbox, number and dropdown habits map to numeric credit and how each
penalty mode reads a vice's stored value. The scoring engine itself never
sees habit definitions or dropdown labels.
"""

import json
import math
from numbers import Real
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from lifetrack.config import ScoringConfig
from lifetrack.errors import ContractViolationError
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


# ---------------------------------------------------------------------------
# Dropdown option maps
# ---------------------------------------------------------------------------

def parse_options(options: Any) -> Optional[Dict[str, Any]]:
    """
    Return a habit's label -> weight map as an ordered dict.

    Accepts a mapping or its JSON text. Anything that is not an object
    (null, list, broken JSON) yields ``None``.
    """
    if options is None:
        return None
    if isinstance(options, str):
        try:
            options = json.loads(options)
        except ValueError:
            return None
    if not isinstance(options, dict):
        return None
    return dict(options)


def _is_missing(raw: Any) -> bool:
    if raw is None:
        return True
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False


def as_number(raw: Any) -> Optional[float]:
    if _is_missing(raw) or isinstance(raw, str) or not isinstance(raw, Real):
        return None
    value = float(raw)
    return value if math.isfinite(value) else None


# ---------------------------------------------------------------------------
# Value resolution
# ---------------------------------------------------------------------------

def resolve_habit_value(row: DailyLogRow, habit: HabitDefinition) -> Optional[float]:
    """
    Numeric value of ``habit`` on ``row``, or ``None`` when unresolvable.

    Checkbox and number habits use the stored number. Dropdown habits look
    the stored label up in the habit's option map.
    """
    raw = row.values.get(habit.name)
    if _is_missing(raw):
        return None

    kind = habit.input_type
    if kind in (InputType.CHECKBOX, InputType.NUMBER):
        return as_number(raw)

    if kind == InputType.DROPDOWN:
        if not isinstance(raw, str):
            return None
        options = parse_options(habit.options)
        if options is None or raw not in options:
            return None
        return as_number(options[raw])

    raise ContractViolationError(f"Unknown input type: {kind!r}", kind)


def _raw_number(row: DailyLogRow, name: str) -> float:
    value = as_number(row.values.get(name))
    return 0.0 if value is None else value


def _is_scored_habit(habit: HabitDefinition) -> bool:
    return bool(habit.is_active) and habit.retired_at is None


def _habit_category(habit: HabitDefinition) -> HabitCategory:
    try:
        return HabitCategory(habit.category)
    except ValueError:
        raise ContractViolationError(
            f"Good habit {habit.name!r} has unknown category: {habit.category!r}", habit.category
        )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_habit_values(
    row: DailyLogRow,
    habits: Iterable[HabitDefinition],
) -> List[HabitValue]:
    """Credit earned by each active good habit on ``row``."""
    values: List[HabitValue] = []

    for habit in habits:
        if habit.pool != HabitPool.GOOD or not _is_scored_habit(habit):
            continue

        kind = habit.input_type
        if kind == InputType.CHECKBOX:
            credit = habit.points if _raw_number(row, habit.name) >= 1 else 0.0
        elif kind == InputType.NUMBER:
            credit = min(max(_raw_number(row, habit.name), 0.0), habit.points)
        elif kind == InputType.DROPDOWN:
            resolved = resolve_habit_value(row, habit)
            credit = 0.0 if resolved is None else resolved
        else:
            raise ContractViolationError(f"Unknown input type: {kind!r}", kind)

        values.append(
            HabitValue(
                name=habit.name,
                value=credit,
                points=habit.points,
                category=_habit_category(habit),
            )
        )

    return values


def build_vice_values(
    row: DailyLogRow,
    habits: Iterable[HabitDefinition],
) -> List[ViceValue]:
    """State of each active vice on ``row``. Tiered vices carry no penalty."""
    values: List[ViceValue] = []

    for habit in habits:
        if habit.pool != HabitPool.VICE or not _is_scored_habit(habit):
            continue

        raw = _raw_number(row, habit.name)
        mode = habit.penalty_mode

        if mode == PenaltyMode.FLAT:
            vice = ViceValue(habit.name, raw >= 1, habit.penalty, PenaltyMode.FLAT)
        elif mode == PenaltyMode.PER_INSTANCE:
            vice = ViceValue(
                habit.name, raw > 0, habit.penalty, PenaltyMode.PER_INSTANCE,
                count=int(max(raw, 0)),
            )
        elif mode == PenaltyMode.TIERED:
            vice = ViceValue(habit.name, False, 0.0, PenaltyMode.TIERED)
        else:
            raise ContractViolationError(f"Unknown penalty mode: {mode!r}", mode)

        values.append(vice)

    return values


def phone_minutes_for(row: DailyLogRow, habits: Iterable[HabitDefinition]) -> float:
    """Minutes logged against the active tiered vice, 0 if there is none."""
    for habit in habits:
        if (
            habit.pool == HabitPool.VICE
            and habit.penalty_mode == PenaltyMode.TIERED
            and _is_scored_habit(habit)
        ):
            value = as_number(row.values.get(habit.name))
            return 0.0 if value is None else value
    return 0.0


def build_scoring_input(
    row: DailyLogRow,
    previous_streak: int,
    habits: Iterable[HabitDefinition],
    config: ScoringConfig,
) -> ScoringInput:
    """Resolve ``row`` into the scoring engine's input."""
    habits = tuple(habits)
    return ScoringInput(
        habit_values=tuple(build_habit_values(row, habits)),
        vice_values=tuple(build_vice_values(row, habits)),
        phone_minutes=phone_minutes_for(row, habits),
        previous_streak=previous_streak,
        config=config,
    )
