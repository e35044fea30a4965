"""Closed enums shared across the adaptive difficulty core.

Usage:
    from adaptive_cat.domain_types import GradedState, ResponseOutcome
"""

import enum


class GradedState(str, enum.Enum):
    """Marking status of one administered question slot."""

    UNANSWERED = "unanswered"
    CORRECT_GRADED = "correct_graded"
    PARTIALLY_CORRECT_GRADED = "partially_correct_graded"
    WRONG_GRADED = "wrong_graded"
    UNKNOWN = "unknown"

    @property
    def is_graded(self) -> bool:
        return self in _GRADED_STATES


_GRADED_STATES = frozenset(
    {
        GradedState.CORRECT_GRADED,
        GradedState.PARTIALLY_CORRECT_GRADED,
        GradedState.WRONG_GRADED,
    }
)


class ResponseOutcome(str, enum.Enum):
    """Classification of the most recently answered question."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNDETERMINED = "undetermined"


class StopReason(str, enum.Enum):
    """Why an attempt should stop rather than receive another question."""

    UNDETERMINED_LAST_RESPONSE = "last attempt status undetermined"
    ZERO_QUESTIONS_ATTEMPTED = "number of questions attempted is zero"
    ANSWER_COUNT_MISMATCH = (
        "sum of correct/incorrect answers does not equal attempted count"
    )
    ERROR_WITHIN_LIMITS = "calculated error within limits"
    MAX_QUESTIONS_REACHED = "maximum number of questions reached"
