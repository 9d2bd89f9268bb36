"""
Daily scoring: transforms one day's resolved inputs into the five scores.

Each helper is a pure scalar function. The composition order is fixed:
max weighted -> positive -> vice penalty -> base -> streak -> final.
No cross-day logic lives here beyond the previous streak handed in.
"""

import math
from typing import Iterable, Sequence

from lifetrack.config import ScoringConfig
from lifetrack.errors import ContractViolationError
from lifetrack.models import (
    HabitCategory,
    HabitValue,
    PenaltyMode,
    ScoringInput,
    ScoringOutput,
    ViceValue,
)


# ---------------------------------------------------------------------------
# Category -> multiplier
# ---------------------------------------------------------------------------

# Must cover every HabitCategory member; there is no fallback multiplier.
CATEGORY_MULTIPLIER_FIELDS = {
    HabitCategory.PRODUCTIVITY: "multiplier_productivity",
    HabitCategory.HEALTH: "multiplier_health",
    HabitCategory.GROWTH: "multiplier_growth",
}


def category_multiplier(category: HabitCategory, config: ScoringConfig) -> float:
    """Return the configured multiplier for a good-habit category."""
    try:
        field_name = CATEGORY_MULTIPLIER_FIELDS[HabitCategory(category)]
    except (KeyError, ValueError):
        raise ContractViolationError(f"Unknown habit category: {category!r}", category)
    return getattr(config, field_name)


# ---------------------------------------------------------------------------
# Positive score
# ---------------------------------------------------------------------------

def compute_max_weighted(habits: Sequence[HabitValue], config: ScoringConfig) -> float:
    """Sum of points x category multiplier; 0 for an empty habit set."""
    return sum(h.points * category_multiplier(h.category, config) for h in habits)


def compute_positive_score(
    habits: Sequence[HabitValue],
    max_weighted: float,
    target_fraction: float,
    config: ScoringConfig,
) -> float:
    """
    Weighted credit earned against the target, clamped to [0, 1].

    positive = clamp(sum(value_i * mult_i) / (max_weighted * target_fraction))

    Returns 0 when the denominator would be zero (no habits, or a zero target).
    """
    if max_weighted == 0:
        return 0.0

    target = max_weighted * target_fraction
    if target == 0:
        return 0.0

    weighted_sum = sum(h.value * category_multiplier(h.category, config) for h in habits)
    return max(0.0, min(1.0, weighted_sum / target))


# ---------------------------------------------------------------------------
# Vice penalty
# ---------------------------------------------------------------------------

def _sanitize_minutes(phone_minutes: float) -> float:
    try:
        minutes = float(phone_minutes)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(minutes) or minutes < 0:
        return 0.0
    return minutes


def phone_tier_penalty(phone_minutes: float, config: ScoringConfig) -> float:
    """Penalty of the highest tier whose threshold is met. Tiers never stack."""
    minutes = _sanitize_minutes(phone_minutes)

    if minutes >= config.phone_t3_min:
        return config.phone_t3_penalty
    if minutes >= config.phone_t2_min:
        return config.phone_t2_penalty
    if minutes >= config.phone_t1_min:
        return config.phone_t1_penalty
    return 0.0


def compute_vice_penalty(
    vices: Iterable[ViceValue],
    phone_minutes: float,
    config: ScoringConfig,
) -> float:
    """
    Flat penalties for triggered vices, count x penalty for per-instance
    vices, plus the phone tier penalty, all clamped to [0, ``config.vice_cap``].

    Tiered vices are skipped in the loop; phone use arrives separately as
    ``phone_minutes``. NaN, infinite or negative minutes count as 0.
    """
    total = 0.0

    for v in vices:
        mode = v.penalty_mode
        if mode == PenaltyMode.FLAT:
            if v.triggered:
                total += v.penalty_value
        elif mode == PenaltyMode.PER_INSTANCE:
            total += (v.count or 0) * v.penalty_value
        elif mode == PenaltyMode.TIERED:
            continue
        else:
            raise ContractViolationError(f"Unknown penalty mode: {mode!r}", mode)

    total += phone_tier_penalty(phone_minutes, config)

    return max(0.0, min(config.vice_cap, total))


# ---------------------------------------------------------------------------
# Base, streak, final
# ---------------------------------------------------------------------------

def compute_base_score(positive_score: float, vice_penalty: float) -> float:
    return positive_score * (1 - vice_penalty)


def compute_streak(base_score: float, previous_streak: int, streak_threshold: float) -> int:
    """
    Extend the streak when base_score reaches the threshold (inclusive),
    otherwise reset to 0.

    Callers pass -1 for the very first tracked day (so it scores streak 0)
    and 0 after a calendar gap (so the day scores streak 1).
    """
    if base_score >= streak_threshold:
        return previous_streak + 1
    return 0


def compute_final_score(
    base_score: float,
    streak: int,
    streak_bonus_per_day: float,
    max_streak_bonus: float,
) -> float:
    """Base score amplified by the capped streak bonus, never above 1.0."""
    bonus = min(streak * streak_bonus_per_day, max_streak_bonus)
    return min(1.0, base_score * (1 + bonus))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_scores(scoring_input: ScoringInput) -> ScoringOutput:
    """Compute all five daily scores in one pass."""
    cfg = scoring_input.config
    habits = tuple(scoring_input.habit_values)

    max_weighted = compute_max_weighted(habits, cfg)
    positive_score = compute_positive_score(habits, max_weighted, cfg.target_fraction, cfg)
    vice_penalty = compute_vice_penalty(
        scoring_input.vice_values, scoring_input.phone_minutes, cfg
    )
    base_score = compute_base_score(positive_score, vice_penalty)
    streak = compute_streak(base_score, scoring_input.previous_streak, cfg.streak_threshold)
    final_score = compute_final_score(
        base_score, streak, cfg.streak_bonus_per_day, cfg.max_streak_bonus
    )

    return ScoringOutput(
        positive_score=positive_score,
        vice_penalty=vice_penalty,
        base_score=base_score,
        streak=streak,
        final_score=final_score,
    )
