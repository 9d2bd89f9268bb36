"""
Config and dropdown-options validation.

Validators are pure: they never mutate their input and never raise on a
malformed value. Each failed rule becomes a ValidationIssue carrying the
rule id, so the caller can block the write and show the reason.

Rule ids:
    R01-R02   start_date format and not in the future
    R03-R16   per-field ranges (declared in config.CONFIG_RANGE_RULES)
    R17       correlation window is one of the supported lengths
    R18-R25   dropdown options shape, plus R_READONLY seed lists
    R26-R29   phone tiers strictly ascending (minutes, then penalties)
    W01-W02   advisory warnings
"""

import datetime
import json
import logging
import re
from numbers import Real
from typing import Any, List, Union

from lifetrack.config import (
    CONFIG_RANGE_RULES,
    VALID_CORRELATION_WINDOWS,
    AppConfig,
    RangeRule,
    ScoringConfig,
)
from lifetrack.models import ValidationIssue, ValidationResult
from lifetrack.options import (
    DROPDOWN_OPTION_KEYS,
    READ_ONLY_DROPDOWN_KEYS,
    SEED_DROPDOWN_OPTIONS,
)

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MIN_DROPDOWN_ITEMS = 2
MAX_DROPDOWN_ITEMS = 50
MAX_DROPDOWN_ITEM_LENGTH = 100


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_range(errors: List[ValidationIssue], rule: RangeRule, value: Any) -> None:
    if not _is_number(value):
        errors.append(ValidationIssue(rule.field, rule.rule, rule.message, value))
        return

    if rule.integer and not float(value).is_integer():
        errors.append(ValidationIssue(rule.field, rule.rule, rule.message, value))
        return

    above_min = value > rule.minimum if rule.min_exclusive else value >= rule.minimum
    if not above_min or not value <= rule.maximum:
        errors.append(ValidationIssue(rule.field, rule.rule, rule.message, value))


def _check_ascending(
    errors: List[ValidationIssue],
    lower_field: str,
    upper_field: str,
    rule: str,
    message: str,
    scoring: ScoringConfig,
) -> None:
    lower = getattr(scoring, lower_field)
    upper = getattr(scoring, upper_field)
    if _is_number(lower) and _is_number(upper) and lower >= upper:
        errors.append(ValidationIssue(lower_field, rule, message, lower))


def _check_start_date(errors: List[ValidationIssue], value: Any, today: datetime.date) -> None:
    message = "start_date must be a valid date in YYYY-MM-DD format"
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        errors.append(ValidationIssue("start_date", "R01", message, value))
        return

    try:
        start = datetime.date.fromisoformat(value)
    except ValueError:
        errors.append(ValidationIssue("start_date", "R01", message, value))
        return

    if start > today:
        errors.append(
            ValidationIssue("start_date", "R02", "start_date cannot be a future date", value)
        )


# ---------------------------------------------------------------------------
# Dropdown options
# ---------------------------------------------------------------------------

def _validate_option_list(errors: List[ValidationIssue], key: str, value: Any) -> None:
    field = f"dropdown_options.{key}"

    # R20: must be a non-empty list
    if not isinstance(value, (list, tuple)) or len(value) == 0:
        errors.append(
            ValidationIssue(field, "R20", f"{field} must be a non-empty array", value)
        )
        return

    if len(value) < MIN_DROPDOWN_ITEMS:
        errors.append(
            ValidationIssue(field, "R21", f"{field} must contain at least 2 options", value)
        )

    if len(value) > MAX_DROPDOWN_ITEMS:
        errors.append(
            ValidationIssue(field, "R22", f"{field} cannot exceed 50 options", len(value))
        )

    # R23: every item is a non-empty string of at most 100 characters
    for i, item in enumerate(value):
        if not isinstance(item, str) or not 0 < len(item) <= MAX_DROPDOWN_ITEM_LENGTH:
            errors.append(
                ValidationIssue(
                    field, "R23",
                    f"{field}[{i}] must be a non-empty string of at most 100 characters",
                    item,
                )
            )

    # R24: no duplicates
    seen = set()
    for item in value:
        if not isinstance(item, str):
            continue
        if item in seen:
            errors.append(
                ValidationIssue(field, "R24", f"{field} contains duplicate option: '{item}'", item)
            )
        seen.add(item)

    if key in READ_ONLY_DROPDOWN_KEYS and list(value) != list(SEED_DROPDOWN_OPTIONS[key]):
        errors.append(
            ValidationIssue(
                field, "R_READONLY", f"{field} is read-only and must match seed values", value
            )
        )


def validate_dropdown_options(options: Any) -> ValidationResult:
    """
    Validate the parsed dropdown-options object.

    It must be a mapping holding exactly the keys in DROPDOWN_OPTION_KEYS,
    each a list of 2-50 unique non-empty strings; read-only keys must equal
    their seed lists.
    """
    errors: List[ValidationIssue] = []

    if not isinstance(options, dict):
        errors.append(
            ValidationIssue(
                "dropdown_options", "R18", "dropdown_options must be a valid JSON object", options
            )
        )
        return ValidationResult.from_issues(errors)

    for key in options:
        if key not in DROPDOWN_OPTION_KEYS:
            errors.append(
                ValidationIssue(
                    "dropdown_options", "R25",
                    f"dropdown_options contains unrecognized key: {key}", key,
                )
            )

    for key in DROPDOWN_OPTION_KEYS:
        if key not in options:
            errors.append(
                ValidationIssue(
                    "dropdown_options", "R19",
                    f"dropdown_options missing required key: {key}", None,
                )
            )
            continue
        _validate_option_list(errors, key, options[key])

    return ValidationResult.from_issues(errors)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def _scoring_issues(scoring: ScoringConfig):
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    for rule in CONFIG_RANGE_RULES:
        _check_range(errors, rule, getattr(scoring, rule.field))

    window = scoring.correlation_window_days
    if not _is_number(window) or window not in VALID_CORRELATION_WINDOWS:
        errors.append(
            ValidationIssue(
                "correlation_window_days", "R17",
                "correlation_window_days must be one of: "
                + ", ".join(str(w) for w in VALID_CORRELATION_WINDOWS),
                window,
            )
        )

    _check_ascending(
        errors, "phone_t1_min", "phone_t2_min", "R26",
        "phone_t1_min must be less than phone_t2_min", scoring,
    )
    _check_ascending(
        errors, "phone_t2_min", "phone_t3_min", "R27",
        "phone_t2_min must be less than phone_t3_min", scoring,
    )
    _check_ascending(
        errors, "phone_t1_penalty", "phone_t2_penalty", "R28",
        "phone_t1_penalty must be less than phone_t2_penalty (tiers must escalate)", scoring,
    )
    _check_ascending(
        errors, "phone_t2_penalty", "phone_t3_penalty", "R29",
        "phone_t2_penalty must be less than phone_t3_penalty (tiers must escalate)", scoring,
    )

    max_bonus = scoring.max_streak_bonus
    per_day = scoring.streak_bonus_per_day
    if _is_number(max_bonus) and _is_number(per_day) and max_bonus < per_day:
        warnings.append(
            ValidationIssue(
                "max_streak_bonus", "W01",
                "max_streak_bonus is less than streak_bonus_per_day; "
                "the bonus cap will be hit on day 1",
                max_bonus,
            )
        )

    cap = scoring.vice_cap
    if _is_number(cap) and cap > 0:
        for tier in (1, 2, 3):
            field = f"phone_t{tier}_penalty"
            value = getattr(scoring, field)
            if _is_number(value) and value >= cap:
                warnings.append(
                    ValidationIssue(
                        field, "W02",
                        f"{field} equals or exceeds vice_cap; "
                        "phone use alone will max the cap",
                        value,
                    )
                )

    return errors, warnings


def validate_config(
    config: Union[AppConfig, ScoringConfig],
    today: datetime.date | None = None,
) -> ValidationResult:
    """
    Validate a candidate config before it is persisted.

    Accepts the full AppConfig (start date, scoring, dropdown options) or a
    bare ScoringConfig, in which case only the scoring rules run. ``today``
    anchors the future-date check and defaults to the current date.
    """
    if isinstance(config, ScoringConfig):
        errors, warnings = _scoring_issues(config)
        return ValidationResult.from_issues(errors, warnings)

    if today is None:
        today = datetime.date.today()

    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    _check_start_date(errors, config.start_date, today)

    scoring_errors, scoring_warnings = _scoring_issues(config.scoring)
    errors.extend(scoring_errors)
    warnings.extend(scoring_warnings)

    raw = config.dropdown_options
    parsed = True
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            parsed = False
            errors.append(
                ValidationIssue(
                    "dropdown_options", "R18", "dropdown_options must be valid JSON", raw
                )
            )

    if parsed:
        dropdown = validate_dropdown_options(raw)
        errors.extend(dropdown.errors)
        warnings.extend(dropdown.warnings)

    logger.debug("Config validation: %d errors, %d warnings", len(errors), len(warnings))
    return ValidationResult.from_issues(errors, warnings)
