"""
Error hierarchy for the scoring core.

The engine is total for anything that can be sanitized (bad phone minutes)
or reported (validation failures, thin correlation samples). Exceptions are
reserved for programmer-contract violations: a caller handing the cascade a
row set without the edited day, or an unknown enum reaching an exhaustive
dispatch.
"""

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """High-level error categories."""

    CONTRACT = "contract"


class LifetrackError(Exception):
    """Base exception for all lifetrack errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.CONTRACT,
        value: Any = None,
    ) -> None:
        self.message = message
        self.category = category
        self.value = value
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message}"


class ContractViolationError(LifetrackError):
    """Raised when a caller breaks an engine precondition."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message, ErrorCategory.CONTRACT, value)


class InvalidDateError(ContractViolationError):
    """Raised when a row date cannot be parsed as a calendar day."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid date: {value!r}", value)
