"""
Centralized configuration for scoring weights, thresholds, and rule tables.

Every tunable constant lives here. Config objects are frozen: a settings
change produces a new object and only affects days scored afterwards.
Nothing in this module validates on construction; the validators report
problems so the caller can decide whether to persist.
"""

from dataclasses import dataclass, field
from typing import Mapping, Union

from lifetrack.options import SEED_DROPDOWN_OPTIONS


# ---------------------------------------------------------------------------
# Scoring parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringConfig:
    """Everything the scoring engine reads, with the seed defaults."""

    # Category multipliers applied to habit points
    multiplier_productivity: float = 1.5
    multiplier_health: float = 1.3
    multiplier_growth: float = 1.0

    # Fraction of the max weighted sum that counts as a perfect day
    target_fraction: float = 0.85

    # Upper bound on the combined vice deduction
    vice_cap: float = 0.40

    # Streak: base score needed to extend, bonus per day, and bonus cap
    streak_threshold: float = 0.65
    streak_bonus_per_day: float = 0.01
    max_streak_bonus: float = 0.10

    # Phone use: minute thresholds and the penalty for each tier
    phone_t1_min: int = 61
    phone_t2_min: int = 181
    phone_t3_min: int = 301
    phone_t1_penalty: float = 0.03
    phone_t2_penalty: float = 0.07
    phone_t3_penalty: float = 0.12

    # Days of history fed to the correlation engine (0 = all)
    correlation_window_days: int = 90


# ---------------------------------------------------------------------------
# Analytics parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CorrelationParams:
    """Sample-size floor below which r is not reported."""

    min_data_points: int = 7


@dataclass(frozen=True)
class AnalyticsParams:
    """Window sizes for the trend signals."""

    moving_average_window: int = 7


VALID_CORRELATION_WINDOWS: tuple = (0, 30, 60, 90, 180, 365)


# ---------------------------------------------------------------------------
# Config range rules (declarative)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RangeRule:
    """Inclusive numeric bounds for a single ScoringConfig field."""

    field: str
    rule: str
    minimum: float
    maximum: float
    message: str
    min_exclusive: bool = False
    integer: bool = False


CONFIG_RANGE_RULES: tuple = (
    RangeRule(
        field="multiplier_productivity", rule="R03", minimum=0, maximum=10.0,
        min_exclusive=True,
        message="multiplier_productivity must be between 0 (exclusive) and 10.0 (inclusive)",
    ),
    RangeRule(
        field="multiplier_health", rule="R04", minimum=0, maximum=10.0,
        min_exclusive=True,
        message="multiplier_health must be between 0 (exclusive) and 10.0 (inclusive)",
    ),
    RangeRule(
        field="multiplier_growth", rule="R05", minimum=0, maximum=10.0,
        min_exclusive=True,
        message="multiplier_growth must be between 0 (exclusive) and 10.0 (inclusive)",
    ),
    RangeRule(
        field="target_fraction", rule="R06", minimum=0, maximum=1.0,
        min_exclusive=True,
        message="target_fraction must be greater than 0 and at most 1.0",
    ),
    RangeRule(
        field="vice_cap", rule="R07", minimum=0, maximum=1.0,
        message="vice_cap must be between 0 and 1.0 inclusive",
    ),
    RangeRule(
        field="streak_threshold", rule="R08", minimum=0, maximum=1.0,
        message="streak_threshold must be between 0 and 1.0 inclusive",
    ),
    RangeRule(
        field="streak_bonus_per_day", rule="R09", minimum=0, maximum=0.1,
        message="streak_bonus_per_day must be between 0 and 0.1 inclusive",
    ),
    RangeRule(
        field="max_streak_bonus", rule="R10", minimum=0, maximum=0.5,
        message="max_streak_bonus must be between 0 and 0.5 inclusive",
    ),
    RangeRule(
        field="phone_t1_min", rule="R11", minimum=0, maximum=1440, integer=True,
        message="phone_t1_min must be between 0 and 1440 (minutes in a day)",
    ),
    RangeRule(
        field="phone_t2_min", rule="R12", minimum=0, maximum=1440, integer=True,
        message="phone_t2_min must be between 0 and 1440",
    ),
    RangeRule(
        field="phone_t3_min", rule="R13", minimum=0, maximum=1440, integer=True,
        message="phone_t3_min must be between 0 and 1440",
    ),
    RangeRule(
        field="phone_t1_penalty", rule="R14", minimum=0, maximum=1.0,
        message="phone_t1_penalty must be between 0 and 1.0 inclusive",
    ),
    RangeRule(
        field="phone_t2_penalty", rule="R15", minimum=0, maximum=1.0,
        message="phone_t2_penalty must be between 0 and 1.0 inclusive",
    ),
    RangeRule(
        field="phone_t3_penalty", rule="R16", minimum=0, maximum=1.0,
        message="phone_t3_penalty must be between 0 and 1.0 inclusive",
    ),
)


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

def _seed_dropdown_options() -> dict:
    return {key: list(values) for key, values in SEED_DROPDOWN_OPTIONS.items()}


@dataclass(frozen=True)
class AppConfig:
    """Complete persisted configuration: tracking start, scoring, dropdowns.

    ``dropdown_options`` may be a mapping or the JSON text it is stored as.
    """

    start_date: str = "2026-01-20"
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    dropdown_options: Union[Mapping, str] = field(default_factory=_seed_dropdown_options)
