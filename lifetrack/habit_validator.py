"""
Habit-definition validation.

Pool decides the shape of a valid habit: good habits earn points in a
category, vices carry a penalty and nothing else. Dropdown habits must also
carry a label -> weight map with exactly one zero-weight option (the
no-credit baseline). Catalog-wide facts (how many active good habits or
tiered vices exist) come from the HabitValidationContext.
"""

import json
import logging
import math
from numbers import Real
from typing import Any, List

from lifetrack.models import (
    HabitCategory,
    HabitDefinition,
    HabitPool,
    HabitValidationContext,
    InputType,
    PenaltyMode,
    ValidationIssue,
    ValidationResult,
)

logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME_LENGTH = 50
MIN_DROPDOWN_OPTIONS = 2
MAX_DROPDOWN_OPTIONS = 10
MAX_OPTION_LABEL_LENGTH = 50

_CATEGORIES = tuple(HabitCategory)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value) and float(value).is_integer()


# ---------------------------------------------------------------------------
# Dropdown option maps (H11-H17)
# ---------------------------------------------------------------------------

def _validate_dropdown_options(habit: HabitDefinition, errors: List[ValidationIssue]) -> None:
    missing = ValidationIssue(
        "options", "H11", "Dropdown habits require options", habit.options
    )

    if habit.options is None:
        if habit.pool == HabitPool.GOOD:
            errors.append(missing)
        return

    options = habit.options
    if isinstance(options, str):
        try:
            options = json.loads(options)
        except ValueError:
            errors.append(missing)
            return

    if not isinstance(options, dict):
        errors.append(missing)
        return

    if len(options) < MIN_DROPDOWN_OPTIONS:
        errors.append(
            ValidationIssue(
                "options", "H15", "Dropdown habits must have at least 2 options", len(options)
            )
        )

    if len(options) > MAX_DROPDOWN_OPTIONS:
        errors.append(
            ValidationIssue(
                "options", "H16", "Dropdown habits cannot exceed 10 options", len(options)
            )
        )

    for label in options:
        if not isinstance(label, str) or not 1 <= len(label) <= MAX_OPTION_LABEL_LENGTH:
            errors.append(
                ValidationIssue("options", "H17", "Option labels must be 1-50 characters", label)
            )

    weights = []
    for weight in options.values():
        if not _is_number(weight) or not math.isfinite(weight) or weight < 0:
            errors.append(
                ValidationIssue(
                    "options", "H12", "Option weights must be non-negative numbers", weight
                )
            )
        else:
            weights.append(weight)

    zero_count = sum(1 for w in weights if w == 0)
    if zero_count != 1:
        errors.append(
            ValidationIssue(
                "options", "H13", "Options must contain exactly one option with weight 0",
                zero_count,
            )
        )


# ---------------------------------------------------------------------------
# Pool rules
# ---------------------------------------------------------------------------

def _validate_good_habit(habit: HabitDefinition, errors: List[ValidationIssue]) -> None:
    if habit.category not in _CATEGORIES:
        errors.append(
            ValidationIssue("category", "H03", "Good habits must have a category", habit.category)
        )

    if not _is_integer(habit.points) or habit.points < 1:
        errors.append(
            ValidationIssue("points", "H04", "Good habit points must be at least 1", habit.points)
        )

    if habit.penalty != 0:
        errors.append(
            ValidationIssue("penalty", "H05", "Good habits cannot have a penalty", habit.penalty)
        )


def _validate_vice(
    habit: HabitDefinition,
    context: HabitValidationContext,
    errors: List[ValidationIssue],
) -> None:
    if habit.category is not None:
        errors.append(
            ValidationIssue("category", "H06", "Vices cannot have a category", habit.category)
        )

    if habit.points != 0:
        errors.append(
            ValidationIssue("points", "H07", "Vices cannot contribute positive points", habit.points)
        )

    if habit.penalty_mode == PenaltyMode.TIERED:
        if habit.penalty != 0:
            errors.append(
                ValidationIssue(
                    "penalty", "H09",
                    "Tiered vices use the configured phone penalties; habit penalty must be 0",
                    habit.penalty,
                )
            )
        if context.tiered_vice_count > 0:
            errors.append(
                ValidationIssue(
                    "penalty_mode", "H18",
                    "Only one tiered vice is supported and one already exists",
                    habit.penalty_mode,
                )
            )
        return

    penalty = habit.penalty
    if not _is_number(penalty) or not 0 <= penalty <= 1.0:
        errors.append(
            ValidationIssue("penalty", "H08", "penalty must be between 0 and 1.0", penalty)
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_habit_config(
    habit: HabitDefinition,
    context: HabitValidationContext,
) -> ValidationResult:
    """Validate a habit definition before it is written to the catalog."""
    errors: List[ValidationIssue] = []

    name = habit.label
    if not isinstance(name, str) or not 1 <= len(name) <= MAX_DISPLAY_NAME_LENGTH:
        errors.append(
            ValidationIssue("display_name", "H01", "display_name must be 1-50 characters", name)
        )

    if name in context.existing_display_names:
        errors.append(
            ValidationIssue(
                "display_name", "H_UNIQUE_NAME",
                "A habit with this display name already exists", name,
            )
        )

    if not _is_integer(habit.sort_order) or habit.sort_order < 1:
        errors.append(
            ValidationIssue(
                "sort_order", "H02", "sort_order must be a positive integer", habit.sort_order
            )
        )

    if habit.pool == HabitPool.GOOD:
        _validate_good_habit(habit, errors)
    else:
        _validate_vice(habit, context, errors)

    if habit.input_type == InputType.CHECKBOX and habit.options is not None:
        errors.append(
            ValidationIssue(
                "options", "H10", "Checkbox habits cannot have options", habit.options
            )
        )

    if habit.input_type == InputType.DROPDOWN:
        _validate_dropdown_options(habit, errors)

    # The catalog must keep at least one active good habit
    if (
        not habit.is_active
        and habit.pool == HabitPool.GOOD
        and context.active_good_habit_count < 1
    ):
        errors.append(
            ValidationIssue(
                "is_active", "H19", "Cannot retire the last active good habit", habit.is_active
            )
        )

    logger.debug("Habit %s validation: %d errors", habit.name, len(errors))
    return ValidationResult.from_issues(errors)
