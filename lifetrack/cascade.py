"""
Cascade recomputation after a historical day is edited.

Only streak and final_score depend on earlier days, so after rescoring the
edited day the engine walks forward recomputing those two fields and stops
as soon as a day's stored values already agree (the chain has re-converged).
Cost is bounded by the length of the affected suffix, not the whole log.

Pure: rows in, updates out. Applying the updates atomically together with
the edit is the caller's job.
"""

import datetime
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from lifetrack.config import ScoringConfig
from lifetrack.errors import ContractViolationError, InvalidDateError
from lifetrack.models import CascadeUpdate, DailyLogRow, ScoringInput, ScoringOutput
from lifetrack.scoring import compute_final_score, compute_scores, compute_streak

logger = logging.getLogger(__name__)

ScoringInputBuilder = Callable[[DailyLogRow, int], ScoringInput]

# previous_streak sentinels
NO_PRIOR_DAY = -1
AFTER_GAP = 0


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def to_day(value: Any) -> datetime.date:
    """Parse an ISO string, date or timestamp into a calendar day."""
    if not isinstance(value, (str, datetime.date)):
        raise InvalidDateError(value)
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        raise InvalidDateError(value)
    if pd.isna(ts):
        raise InvalidDateError(value)
    return ts.date()


def is_next_day(earlier: datetime.date, later: datetime.date) -> bool:
    return (later - earlier).days == 1


def _sorted_by_day(rows: Iterable[DailyLogRow]) -> List[Tuple[datetime.date, DailyLogRow]]:
    keyed = [(to_day(row.date), row) for row in rows]
    keyed.sort(key=lambda pair: pair[0])
    return keyed


# ---------------------------------------------------------------------------
# Previous streak
# ---------------------------------------------------------------------------

def _previous_streak(
    day: datetime.date,
    prior: Sequence[Tuple[datetime.date, DailyLogRow]],
) -> int:
    if not prior:
        return NO_PRIOR_DAY

    prior_day, prior_row = prior[-1]
    if is_next_day(prior_day, day):
        return prior_row.streak if prior_row.streak is not None else AFTER_GAP
    return AFTER_GAP


def determine_previous_streak(date: Any, rows: Iterable[DailyLogRow]) -> int:
    """
    previous_streak to score ``date`` with, given the stored rows.

    -1 when no earlier row exists, 0 after a calendar gap (or when the
    previous day was never scored), else the previous day's streak.
    """
    day = to_day(date)
    prior = [pair for pair in _sorted_by_day(rows) if pair[0] < day]
    return _previous_streak(day, prior)


# ---------------------------------------------------------------------------
# Comparison helpers
# ---------------------------------------------------------------------------

def _scores_match(row: DailyLogRow, output: ScoringOutput) -> bool:
    return (
        row.positive_score == output.positive_score
        and row.vice_penalty == output.vice_penalty
        and row.base_score == output.base_score
        and row.streak == output.streak
        and row.final_score == output.final_score
    )


def _propagate(base_score: float, previous_streak: int, cfg: ScoringConfig) -> Tuple[int, float]:
    streak = compute_streak(base_score, previous_streak, cfg.streak_threshold)
    final = compute_final_score(
        base_score, streak, cfg.streak_bonus_per_day, cfg.max_streak_bonus
    )
    return streak, final


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_cascade(
    edited_date: Any,
    rows: Iterable[DailyLogRow],
    config: ScoringConfig,
    build_scoring_input: ScoringInputBuilder,
) -> List[CascadeUpdate]:
    """
    Compute every score change caused by editing ``edited_date``.

    ``rows`` must contain the edited day (with its new raw values), enough
    earlier rows to resolve its previous streak, and every later row that
    might be affected. Order does not matter.

    The first update, if the edited day changed, carries all five scores;
    later updates carry streak and final_score only. An empty list means
    nothing needs to be written.

    Raises ContractViolationError if ``edited_date`` is not among ``rows``.
    """
    ordered = _sorted_by_day(rows)
    target = to_day(edited_date)

    edited_index: Optional[int] = None
    for i, (day, _) in enumerate(ordered):
        if day == target:
            edited_index = i
            break
    if edited_index is None:
        raise ContractViolationError(
            f"Edited date {edited_date} not found in candidate rows", edited_date
        )

    edited_row = ordered[edited_index][1]
    previous_streak = _previous_streak(target, ordered[:edited_index])

    recomputed = compute_scores(build_scoring_input(edited_row, previous_streak))
    edited_unchanged = _scores_match(edited_row, recomputed)
    subsequent = ordered[edited_index + 1:]

    logger.debug(
        "Cascade from %s: previous_streak=%d, unchanged=%s, %d later rows",
        target, previous_streak, edited_unchanged, len(subsequent),
    )

    # -- Early exit: nothing changed and the next day agrees ------------------

    if edited_unchanged:
        if not subsequent:
            return []

        first_day, first_row = subsequent[0]
        first_prev = recomputed.streak if is_next_day(target, first_day) else AFTER_GAP
        if first_row.base_score is not None:
            streak, final = _propagate(first_row.base_score, first_prev, config)
            if streak == first_row.streak and final == first_row.final_score:
                return []

    # -- Edited day -----------------------------------------------------------

    updates: List[CascadeUpdate] = []

    if not edited_unchanged:
        updates.append(
            CascadeUpdate(
                date=edited_row.date,
                streak=recomputed.streak,
                final_score=recomputed.final_score,
                positive_score=recomputed.positive_score,
                vice_penalty=recomputed.vice_penalty,
                base_score=recomputed.base_score,
            )
        )

    # -- Forward walk ---------------------------------------------------------

    last_day = target
    last_streak = recomputed.streak

    for day, row in subsequent:
        prev = last_streak if is_next_day(last_day, day) else AFTER_GAP

        if row.base_score is None:
            logger.debug("Cascade halted at %s: day was never scored", day)
            break

        streak, final = _propagate(row.base_score, prev, config)

        if streak == row.streak and final == row.final_score:
            logger.debug("Cascade converged at %s", day)
            break

        updates.append(CascadeUpdate(date=row.date, streak=streak, final_score=final))
        last_day = day
        last_streak = streak

    logger.debug("Cascade from %s produced %d updates", target, len(updates))
    return updates
