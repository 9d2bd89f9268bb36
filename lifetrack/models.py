"""
Data model: closed enums and the value objects passed between engines.

Enums subclass ``str`` so rows loaded from storage can carry plain strings
("good", "per_instance", ...) and still compare equal to the members.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from lifetrack.config import ScoringConfig


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class HabitPool(str, Enum):
    GOOD = "good"
    VICE = "vice"


class HabitCategory(str, Enum):
    PRODUCTIVITY = "productivity"
    HEALTH = "health"
    GROWTH = "growth"


class InputType(str, Enum):
    CHECKBOX = "checkbox"
    NUMBER = "number"
    DROPDOWN = "dropdown"


class PenaltyMode(str, Enum):
    FLAT = "flat"
    PER_INSTANCE = "per_instance"
    TIERED = "tiered"


class CorrelationFlag(str, Enum):
    ZERO_VARIANCE = "zero_variance"
    INSUFFICIENT_DATA = "insufficient_data"


# ---------------------------------------------------------------------------
# Habit catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HabitDefinition:
    """
    One entry of the habit catalog.

    ``name`` is the key under which a day's raw value is stored in
    ``DailyLogRow.values``. ``options`` is the ordered label → weight map of
    a dropdown habit; the JSON text it is persisted as is also accepted.
    """

    name: str
    pool: HabitPool
    category: Optional[HabitCategory] = None
    input_type: InputType = InputType.CHECKBOX
    points: float = 0
    penalty: float = 0.0
    penalty_mode: PenaltyMode = PenaltyMode.FLAT
    options: Optional[Union[Mapping[str, float], str]] = None
    sort_order: int = 1
    is_active: bool = True
    retired_at: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name if self.display_name is not None else self.name


# ---------------------------------------------------------------------------
# Scoring engine I/O
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HabitValue:
    """A good habit's resolved numeric credit for one day."""

    name: str
    value: float
    points: float
    category: HabitCategory


@dataclass(frozen=True)
class ViceValue:
    """A vice's state for one day. ``count`` is used by per-instance vices."""

    name: str
    triggered: bool
    penalty_value: float
    penalty_mode: PenaltyMode
    count: Optional[int] = None


@dataclass(frozen=True)
class ScoringInput:
    """Resolved numeric inputs for one day plus the config in effect."""

    habit_values: Tuple[HabitValue, ...] = ()
    vice_values: Tuple[ViceValue, ...] = ()
    phone_minutes: float = 0.0
    previous_streak: int = -1
    config: ScoringConfig = field(default_factory=ScoringConfig)


@dataclass(frozen=True)
class ScoringOutput:
    positive_score: float
    vice_penalty: float
    base_score: float
    streak: int
    final_score: float


# ---------------------------------------------------------------------------
# Persisted daily log
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailyLogRow:
    """
    A stored day: raw habit values keyed by habit name plus the five scores.

    Scores are ``None`` for a day that has never been scored.
    """

    date: Any
    values: Mapping[str, Any] = field(default_factory=dict)
    positive_score: Optional[float] = None
    vice_penalty: Optional[float] = None
    base_score: Optional[float] = None
    streak: Optional[int] = None
    final_score: Optional[float] = None


@dataclass(frozen=True)
class CascadeUpdate:
    """
    New values for one day of a cascade.

    The edited day carries all five scores; propagated days only carry
    streak and final_score and leave the other three as ``None``.
    """

    date: Any
    streak: int
    final_score: float
    positive_score: Optional[float] = None
    vice_penalty: Optional[float] = None
    base_score: Optional[float] = None


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CorrelationResult:
    habit: str
    r: Optional[float]
    n: int
    flag: Optional[CorrelationFlag] = None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationIssue:
    """A single failed rule. Used for both errors and warnings."""

    field: str
    rule: str
    message: str
    value: Any = None


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()

    @classmethod
    def from_issues(cls, errors, warnings=()) -> "ValidationResult":
        return cls(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


@dataclass(frozen=True)
class HabitValidationContext:
    """
    Catalog facts the habit validator cannot derive from the habit itself.

    Counts exclude the habit being validated.
    """

    active_good_habit_count: int
    tiered_vice_count: int = 0
    existing_display_names: Tuple[str, ...] = ()
