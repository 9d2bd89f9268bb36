"""
lifetrack: deterministic daily scoring core for a personal habit tracker.

Turns a day's logged habits and vices into five scores, keeps streaks
consistent when history is edited, correlates habits with outcomes, and
validates config and habit definitions before they are stored.

Architecture:
    config            tunable weights, thresholds, rule tables (single source of truth)
    options           dropdown taxonomy and its seed lists
    models            enums and value objects passed between engines
    scoring           one day's inputs -> positive, penalty, base, streak, final
    inputs            stored row + habit catalog -> scoring input
    cascade           forward streak propagation after a historical edit
    correlation       Pearson r between each good habit and final score
    signals           trend, weekday and frequency analytics (pandas)
    config_validator  config / dropdown-options rules
    habit_validator   habit-definition rules
    pipeline          orchestration of the save, edit and analytics flows

The core is stateless: no storage, no clock except the validator's
injectable ``today``.
"""

from lifetrack.cascade import compute_cascade, determine_previous_streak
from lifetrack.config import AppConfig, ScoringConfig
from lifetrack.config_validator import validate_config, validate_dropdown_options
from lifetrack.correlation import compute_correlations
from lifetrack.errors import ContractViolationError, LifetrackError
from lifetrack.habit_validator import validate_habit_config
from lifetrack.inputs import build_scoring_input
from lifetrack.pipeline import (
    analyze_correlations,
    analyze_history,
    apply_updates,
    cascade_edit,
    score_day,
)
from lifetrack.scoring import compute_scores

__version__ = "1.0.0"

__all__ = [
    "AppConfig",
    "ScoringConfig",
    "ContractViolationError",
    "LifetrackError",
    "compute_scores",
    "compute_cascade",
    "determine_previous_streak",
    "build_scoring_input",
    "compute_correlations",
    "validate_config",
    "validate_dropdown_options",
    "validate_habit_config",
    "score_day",
    "cascade_edit",
    "apply_updates",
    "analyze_correlations",
    "analyze_history",
]
